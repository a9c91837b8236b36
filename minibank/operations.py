"""
Operation Ledger Module

Validates and applies deposit/withdraw operations against an account.

Operations follow a two-phase protocol: ``construct`` validates the account
state and funds and returns an immutable, not yet applied Operation;
``execute`` mutates the balance and appends the operation to the account
history without re-validating. ``apply`` runs both phases under a lock so
that nothing can touch the account in between.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum
import threading

from .accounts import Account, AccountRegistry
from .errors import AccountInactive, InsufficientFunds
from .ids import new_id
from .logging_config import get_logger, log_action


class OperationKind(Enum):
    """Kinds of ledger operations"""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


@dataclass(frozen=True, eq=False)
class Operation:
    """
    Immutable record of a single deposit or withdrawal
    """
    id: str
    kind: OperationKind
    amount: Decimal
    account: Account = field(repr=False)
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount as it affects the balance"""
        if self.kind == OperationKind.WITHDRAW:
            return -self.amount
        return self.amount


class OperationLedger:
    """
    Applies operations to accounts held in an AccountRegistry
    """

    def __init__(self, accounts: AccountRegistry, lock: Optional[threading.RLock] = None):
        self.accounts = accounts
        self._lock = lock or threading.RLock()
        self.logger = get_logger("minibank.operations")

    def construct(self, kind: OperationKind, amount: Decimal, account: Account) -> Operation:
        """
        Validate and build an operation without applying it

        Args:
            kind: Deposit or withdraw
            amount: Operation amount (positivity is checked by the caller)
            account: Target account

        Returns:
            Unapplied Operation

        Raises:
            AccountInactive: If the account is not active
            InsufficientFunds: If a withdrawal exceeds the balance
        """
        if not account.is_active:
            self._log_rejection(kind, amount, account, "account inactive")
            raise AccountInactive("Account is inactive")

        if kind == OperationKind.WITHDRAW and not self.accounts.can_withdraw(account, amount):
            self._log_rejection(kind, amount, account, "insufficient funds")
            raise InsufficientFunds("Insufficient funds")

        return Operation(
            id=new_id(),
            kind=kind,
            amount=amount,
            account=account,
            created_at=datetime.now(timezone.utc)
        )

    def execute(self, operation: Operation) -> Operation:
        """Apply a constructed operation to its account"""
        account = operation.account
        account.balance += operation.signed_amount
        account.operations.append(operation)

        log_action(
            self.logger, "info", f"Operation executed: {operation.kind.value}",
            action="execute_operation", resource=f"operation:{operation.id}",
            extra={
                "account_id": account.id,
                "amount": str(operation.amount),
                "balance": str(account.balance)
            }
        )
        return operation

    def apply(self, kind: OperationKind, amount: Decimal, account: Account) -> Operation:
        """Construct and execute an operation as one step"""
        with self._lock:
            operation = self.construct(kind, amount, account)
            return self.execute(operation)

    def deposit(self, account: Account, amount: Decimal) -> Operation:
        return self.apply(OperationKind.DEPOSIT, amount, account)

    def withdraw(self, account: Account, amount: Decimal) -> Operation:
        return self.apply(OperationKind.WITHDRAW, amount, account)

    def history(self, account: Account) -> List[Operation]:
        """Get the account's operations, oldest first"""
        return list(account.operations)

    def _log_rejection(self, kind: OperationKind, amount: Decimal, account: Account, reason: str) -> None:
        log_action(
            self.logger, "warning", f"Operation rejected: {reason}",
            action="construct_operation", resource=f"account:{account.id}",
            extra={"kind": kind.value, "amount": str(amount)}
        )
