"""
Account Registry Module

Manages accounts, their owner link, balance and Active/Inactive state.
Balances are Decimal; the registry only tracks them, the operation ledger
is the only component that changes them.
"""

from decimal import Decimal
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional
from enum import Enum

from .errors import NotFound
from .ids import new_id
from .logging_config import get_logger, log_action
from .users import User

if TYPE_CHECKING:
    from .operations import Operation


class AccountState(Enum):
    """Account states, valued as in the snapshot document"""
    INACTIVE = 0
    ACTIVE = 1


@dataclass(eq=False)
class Account:
    """
    Balance-bearing account owned by exactly one user
    """
    id: str
    owner: User
    state: AccountState = AccountState.ACTIVE
    balance: Decimal = Decimal('0')
    operations: List['Operation'] = field(default_factory=list, repr=False)

    @property
    def is_active(self) -> bool:
        """Check if account accepts operations"""
        return self.state == AccountState.ACTIVE

    @property
    def is_inactive(self) -> bool:
        return self.state == AccountState.INACTIVE

    def can_withdraw(self, amount: Decimal) -> bool:
        """Check if account is active and holds at least ``amount``"""
        return self.is_active and self.balance >= amount


class AccountRegistry:
    """
    In-memory collection of accounts, in insertion order
    """

    def __init__(self):
        self._accounts: List[Account] = []
        self._by_id: Dict[str, Account] = {}
        self.logger = get_logger("minibank.accounts")

    def create_account(self, owner: User) -> Account:
        """
        Open a new account for ``owner``

        The owner must already be resolved by the caller.

        Returns:
            Active Account with zero balance and no operations
        """
        if owner is None:
            raise NotFound("Account owner not found")

        account = self._add(Account(id=new_id(), owner=owner))

        log_action(
            self.logger, "info", "Account created",
            action="create_account", resource=f"account:{account.id}",
            extra={"owner_id": owner.id}
        )
        return account

    def restore_account(
        self,
        account_id: str,
        owner: User,
        state: AccountState,
        balance: Decimal
    ) -> Account:
        """Re-create an account under a known id (snapshot loading only)"""
        return self._add(Account(id=account_id, owner=owner, state=state, balance=balance))

    def find_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by ID"""
        return self._by_id.get(account_id)

    def find_by_owner(self, user: User) -> List[Account]:
        """Get all accounts owned by ``user``"""
        return [account for account in self._accounts if account.owner == user]

    def all(self) -> List[Account]:
        """Get all accounts"""
        return list(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def activate(self, account: Account) -> Account:
        """Set account Active (no-op if already Active)"""
        return self._set_state(account, AccountState.ACTIVE)

    def deactivate(self, account: Account) -> Account:
        """Set account Inactive (no-op if already Inactive)"""
        return self._set_state(account, AccountState.INACTIVE)

    def can_withdraw(self, account: Account, amount: Decimal) -> bool:
        return account.can_withdraw(amount)

    def _set_state(self, account: Account, new_state: AccountState) -> Account:
        old_state = account.state
        account.state = new_state

        if old_state != new_state:
            log_action(
                self.logger, "info", f"Account state changed to {new_state.name.lower()}",
                action="update_account_state", resource=f"account:{account.id}",
                extra={"old_state": old_state.name, "new_state": new_state.name}
            )
        return account

    def _add(self, account: Account) -> Account:
        self._accounts.append(account)
        self._by_id[account.id] = account
        return account
