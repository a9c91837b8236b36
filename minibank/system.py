"""
Banking System

Top-level application state: one registry of each kind, the operation
ledger and the snapshot storage. Every method here validates user input,
delegates to the core components and saves a snapshot after each change.
A single lock serializes mutations and the snapshot write that follows.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional, Union
import threading

from .accounts import Account, AccountRegistry
from .config import MinibankConfig, get_config
from .errors import InvalidInput, NotFound
from .operations import Operation, OperationKind, OperationLedger
from .storage import JSONFileStorage, SnapshotStorage
from .users import User, UserRegistry


AmountInput = Union[str, int, float, Decimal, None]

AMOUNT_QUANTUM = Decimal('0.01')
MAX_TRANSACTION_AMOUNT = Decimal('1000000000.00')
MAX_BALANCE = Decimal('9999999999999.99')


def parse_amount(raw: AmountInput, max_amount: Decimal = MAX_TRANSACTION_AMOUNT) -> Decimal:
    """
    Parse a user-supplied amount, rounded to cents

    Raises:
        InvalidInput: If the amount is missing, unparsable, not finite,
            above ``max_amount`` or not positive once rounded
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidInput("Amount is required")

    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        raise InvalidInput(f"Invalid amount: {raw!r}")

    if not amount.is_finite() or amount <= 0:
        raise InvalidInput("Amount must be a positive number")

    # Compared before rounding; quantize fails on huge exponents
    if amount > max_amount:
        raise InvalidInput(f"Amount exceeds the maximum of {max_amount}")

    amount = amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise InvalidInput("Amount must be a positive number")
    return amount


class BankingSystem:
    """Core banking system with all components initialized"""

    def __init__(
        self,
        storage: SnapshotStorage,
        max_transaction_amount: Decimal = MAX_TRANSACTION_AMOUNT,
        max_balance: Decimal = MAX_BALANCE
    ):
        self.storage = storage
        self.max_transaction_amount = max_transaction_amount
        self.max_balance = max_balance
        self.lock = threading.RLock()
        self.users = UserRegistry()
        self.accounts = AccountRegistry()
        self.ledger = OperationLedger(self.accounts, self.lock)

    @classmethod
    def from_config(cls, config: Optional[MinibankConfig] = None) -> 'BankingSystem':
        """Create a system backed by the configured JSON file"""
        config = config or get_config()
        return cls(
            JSONFileStorage(config.data_file),
            max_transaction_amount=Decimal(config.max_transaction_amount),
            max_balance=Decimal(config.max_balance)
        )

    # Persistence

    def load(self) -> None:
        """Replace in-memory state with the saved snapshot"""
        with self.lock:
            self.users, self.accounts = self.storage.load()
            self.ledger = OperationLedger(self.accounts, self.lock)

    def save(self) -> None:
        with self.lock:
            self.storage.save(self.users.all(), self.accounts.all())

    # Users

    def register_user(self, name: str) -> User:
        with self.lock:
            user = self.users.create_user(name)
            self.save()
            return user

    def get_user(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    # Accounts

    def open_account(self, user_id: str) -> Account:
        with self.lock:
            account = self.accounts.create_account(self.get_user(user_id))
            self.save()
            return account

    def get_account(self, account_id: str) -> Account:
        account = self.accounts.find_by_id(account_id)
        if not account:
            raise NotFound("Account not found")
        return account

    def accounts_for_user(self, user_id: str) -> List[Account]:
        return self.accounts.find_by_owner(self.get_user(user_id))

    def activate_account(self, account_id: str) -> Account:
        with self.lock:
            account = self.accounts.activate(self.get_account(account_id))
            self.save()
            return account

    def deactivate_account(self, account_id: str) -> Account:
        with self.lock:
            account = self.accounts.deactivate(self.get_account(account_id))
            self.save()
            return account

    # Operations

    def deposit(self, account_id: str, amount: AmountInput) -> Operation:
        return self._operate(OperationKind.DEPOSIT, account_id, amount)

    def withdraw(self, account_id: str, amount: AmountInput) -> Operation:
        return self._operate(OperationKind.WITHDRAW, account_id, amount)

    def _operate(self, kind: OperationKind, account_id: str, raw_amount: AmountInput) -> Operation:
        amount = parse_amount(raw_amount, self.max_transaction_amount)
        with self.lock:
            account = self.get_account(account_id)
            if kind == OperationKind.DEPOSIT and account.balance + amount > self.max_balance:
                raise InvalidInput(f"Balance would exceed the maximum of {self.max_balance}")
            operation = self.ledger.apply(kind, amount, account)
            self.save()
            return operation
