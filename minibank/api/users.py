"""
User management endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_banking_system, http_error
from .schemas import CreateUserRequest, user_to_dict
from ..errors import BankingError
from ..system import BankingSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    request: CreateUserRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Create a new user"""
    try:
        user = system.register_user(request.name)
    except BankingError as e:
        raise http_error(e)

    return {"user": user_to_dict(user), "message": "User created successfully"}


@router.get("")
def list_users(system: BankingSystem = Depends(get_banking_system)):
    """List all users"""
    return {"users": [user_to_dict(u) for u in system.users.all()]}


@router.get("/{user_id}")
def get_user(
    user_id: str,
    system: BankingSystem = Depends(get_banking_system)
):
    """Get user with the IDs of their accounts"""
    try:
        user = system.get_user(user_id)
        accounts = system.accounts_for_user(user_id)
    except BankingError as e:
        raise http_error(e)

    result = user_to_dict(user)
    result["account_ids"] = [a.id for a in accounts]
    return result
