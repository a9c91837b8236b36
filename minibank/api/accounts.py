"""
Account management and operation endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_banking_system, http_error
from .schemas import AmountRequest, CreateAccountRequest, account_to_dict, operation_to_dict
from ..errors import BankingError
from ..system import BankingSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_account(
    request: CreateAccountRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Open a new account for an existing user"""
    try:
        account = system.open_account(request.user_id)
    except BankingError as e:
        raise http_error(e)

    return {"account": account_to_dict(account), "message": "Account created successfully"}


@router.get("")
def list_accounts(system: BankingSystem = Depends(get_banking_system)):
    """List all accounts"""
    return {"accounts": [account_to_dict(a) for a in system.accounts.all()]}


@router.get("/{account_id}")
def get_account(
    account_id: str,
    system: BankingSystem = Depends(get_banking_system)
):
    """Get account details with its operations"""
    try:
        account = system.get_account(account_id)
    except BankingError as e:
        raise http_error(e)

    return account_to_dict(account, with_operations=True)


@router.post("/{account_id}/activate")
def activate_account(
    account_id: str,
    system: BankingSystem = Depends(get_banking_system)
):
    try:
        account = system.activate_account(account_id)
    except BankingError as e:
        raise http_error(e)

    return {"account": account_to_dict(account), "message": "Account activated"}


@router.post("/{account_id}/deactivate")
def deactivate_account(
    account_id: str,
    system: BankingSystem = Depends(get_banking_system)
):
    try:
        account = system.deactivate_account(account_id)
    except BankingError as e:
        raise http_error(e)

    return {"account": account_to_dict(account), "message": "Account deactivated"}


@router.post("/{account_id}/deposit")
def deposit(
    account_id: str,
    request: AmountRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Deposit into an account"""
    try:
        operation = system.deposit(account_id, request.amount)
    except BankingError as e:
        raise http_error(e)

    return {
        "operation": operation_to_dict(operation),
        "balance": str(operation.account.balance),
        "message": "Deposit processed successfully"
    }


@router.post("/{account_id}/withdraw")
def withdraw(
    account_id: str,
    request: AmountRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Withdraw from an account"""
    try:
        operation = system.withdraw(account_id, request.amount)
    except BankingError as e:
        raise http_error(e)

    return {
        "operation": operation_to_dict(operation),
        "balance": str(operation.account.balance),
        "message": "Withdrawal processed successfully"
    }


@router.get("/{account_id}/operations")
def get_account_operations(
    account_id: str,
    system: BankingSystem = Depends(get_banking_system)
):
    """Get operation history for an account, oldest first"""
    try:
        account = system.get_account(account_id)
    except BankingError as e:
        raise http_error(e)

    return {"operations": [operation_to_dict(op) for op in system.ledger.history(account)]}
