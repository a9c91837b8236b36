"""
Pydantic schemas for API requests and response serializers
"""

from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field

from ..accounts import Account
from ..operations import Operation
from ..users import User


class CreateUserRequest(BaseModel):
    name: Optional[str] = Field(None, description="User display name")


class CreateAccountRequest(BaseModel):
    user_id: str = Field(..., description="ID of the account owner")


class AmountRequest(BaseModel):
    amount: Union[str, int, float, None] = Field(None, description="Positive amount, number or decimal string")


def user_to_dict(user: User) -> Dict[str, Any]:
    return {"id": user.id, "name": user.name}


def account_to_dict(account: Account, with_operations: bool = False) -> Dict[str, Any]:
    result = {
        "id": account.id,
        "owner_id": account.owner.id,
        "owner_name": account.owner.name,
        "state": account.state.name.lower(),
        "balance": str(account.balance),
    }
    if with_operations:
        result["operations"] = [operation_to_dict(op) for op in account.operations]
    return result


def operation_to_dict(operation: Operation) -> Dict[str, Any]:
    return {
        "id": operation.id,
        "kind": operation.kind.value,
        "amount": str(operation.amount),
        "account_id": operation.account.id,
        "created_at": operation.created_at.isoformat(),
    }
