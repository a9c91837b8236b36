"""
Account search endpoints
"""

from fastapi import APIRouter, Depends, Query

from .dependencies import get_banking_system, http_error
from .schemas import account_to_dict
from ..errors import BankingError
from ..system import BankingSystem


router = APIRouter()


@router.get("/accounts/by_user")
def search_accounts_by_user(
    user_id: str = Query(...),
    system: BankingSystem = Depends(get_banking_system)
):
    """Find all accounts owned by a user"""
    try:
        accounts = system.accounts_for_user(user_id)
    except BankingError as e:
        raise http_error(e)

    return {"accounts": [account_to_dict(a) for a in accounts]}


@router.get("/accounts/by_id")
def search_account_by_id(
    account_id: str = Query(...),
    system: BankingSystem = Depends(get_banking_system)
):
    """Find one account by its ID"""
    try:
        account = system.get_account(account_id)
    except BankingError as e:
        raise http_error(e)

    return account_to_dict(account, with_operations=True)
