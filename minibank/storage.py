"""
Storage Backend Module

Provides the snapshot storage interface and implementations for in-memory
(testing) and JSON file (persistence) backends. A snapshot holds every user
and every account; operation history is not part of it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple, Union
from decimal import Decimal
from pathlib import Path
import json
import os
import tempfile

from .accounts import Account, AccountRegistry, AccountState
from .errors import StorageIOError, StorageParseError
from .logging_config import get_logger, log_action
from .users import User, UserRegistry


def _encode_decimal(value: Any) -> Any:
    """json default hook writing Decimals as JSON numbers"""
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot write non-finite amount {value}")
        as_float = float(value)
        if Decimal(repr(as_float)) != value:
            raise ValueError(f"Amount {value} has no exact JSON number form")
        if value == value.to_integral_value():
            return int(value)
        return as_float
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_snapshot(users: List[User], accounts: List[Account], indent: Optional[int] = None) -> str:
    """
    Serialize users and accounts to snapshot JSON text

    Raises:
        StorageIOError: If a value cannot be written without loss
    """
    try:
        return json.dumps(snapshot_document(users, accounts), default=_encode_decimal, indent=indent)
    except (TypeError, ValueError) as e:
        raise StorageIOError(f"Could not encode snapshot: {e}") from e


def snapshot_document(users: List[User], accounts: List[Account]) -> Dict[str, Any]:
    """Build the snapshot document for users and accounts"""
    return {
        "users": [{"id": u.id, "name": u.name} for u in users],
        "accounts": [
            {
                "id": a.id,
                "owner_id": a.owner.id,
                "state": a.state.value,
                "balance": a.balance
            }
            for a in accounts
        ]
    }


def restore_registries(data: Any) -> Tuple[UserRegistry, AccountRegistry]:
    """
    Rebuild registries from a parsed snapshot document

    Users are restored first, then accounts are linked to them by
    ``owner_id``. Accounts whose owner is missing are skipped.

    Raises:
        StorageParseError: If the document does not have the snapshot shape
    """
    logger = get_logger("minibank.storage")
    users = UserRegistry()
    accounts = AccountRegistry()

    if not isinstance(data, dict):
        raise StorageParseError("Snapshot root must be a JSON object")

    try:
        user_rows = data["users"]
        account_rows = data["accounts"]
        if not isinstance(user_rows, list) or not isinstance(account_rows, list):
            raise StorageParseError("Snapshot 'users' and 'accounts' must be arrays")

        for row in user_rows:
            user_id, name = row["id"], row["name"]
            if not isinstance(user_id, str) or not isinstance(name, str):
                raise StorageParseError(f"Malformed user record: {row!r}")
            if users.find_by_id(user_id) is not None:
                raise StorageParseError(f"Duplicate user id {user_id}")
            users.restore_user(user_id, name)

        for row in account_rows:
            account_id, owner_id = row["id"], row["owner_id"]
            if not isinstance(account_id, str):
                raise StorageParseError(f"Malformed account record: {row!r}")
            state = AccountState(row["state"])
            balance = row["balance"]
            if isinstance(balance, bool) or not isinstance(balance, (int, float, Decimal)):
                raise StorageParseError(f"Malformed balance in account {account_id}")
            balance = Decimal(str(balance))
            if not balance.is_finite():
                raise StorageParseError(f"Non-finite balance in account {account_id}")
            if accounts.find_by_id(account_id) is not None:
                raise StorageParseError(f"Duplicate account id {account_id}")

            owner = users.find_by_id(owner_id)
            if owner is None:
                log_action(
                    logger, "warning", "Skipping account with unknown owner",
                    action="load_snapshot", resource=f"account:{account_id}",
                    extra={"owner_id": owner_id}
                )
                continue

            accounts.restore_account(account_id, owner, state, balance)
    except StorageParseError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise StorageParseError(f"Malformed snapshot: {e!r}") from e

    return users, accounts


class SnapshotStorage(ABC):
    """Abstract interface for snapshot backends"""

    @abstractmethod
    def save(self, users: List[User], accounts: List[Account]) -> None:
        """Persist all users and accounts"""
        pass

    @abstractmethod
    def load(self) -> Tuple[UserRegistry, AccountRegistry]:
        """Rebuild registries from the last snapshot (empty if none)"""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Check if a snapshot has been saved"""
        pass


class InMemorySnapshotStorage(SnapshotStorage):
    """In-memory snapshot storage for testing"""

    def __init__(self):
        self._document: Optional[str] = None

    def save(self, users: List[User], accounts: List[Account]) -> None:
        self._document = encode_snapshot(users, accounts)

    def load(self) -> Tuple[UserRegistry, AccountRegistry]:
        if self._document is None:
            return UserRegistry(), AccountRegistry()
        return restore_registries(json.loads(self._document, parse_float=Decimal))

    def exists(self) -> bool:
        return self._document is not None

    def get_document(self) -> Optional[Dict[str, Any]]:
        """Get the stored document for inspection"""
        if self._document is None:
            return None
        return json.loads(self._document)


class JSONFileStorage(SnapshotStorage):
    """JSON file snapshot storage for persistence"""

    def __init__(self, path: Union[str, Path] = "db/data.json"):
        self.path = Path(path)
        self.logger = get_logger("minibank.storage")

    def save(self, users: List[User], accounts: List[Account]) -> None:
        """
        Write the snapshot, replacing the previous file

        The document is written to a temporary file in the target
        directory and renamed over the target.

        Raises:
            StorageIOError: If the snapshot cannot be encoded or the
                directory or file cannot be written
        """
        document = encode_snapshot(users, accounts, indent=2)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageIOError(f"Could not write snapshot to {self.path}: {e}") from e

        log_action(
            self.logger, "info", "Snapshot saved",
            action="save_snapshot", resource=str(self.path),
            extra={"users": len(users), "accounts": len(accounts)}
        )

    def load(self) -> Tuple[UserRegistry, AccountRegistry]:
        """
        Read the snapshot file

        Returns:
            Restored (users, accounts); empty registries if the file is absent

        Raises:
            StorageIOError: If the file exists but cannot be read
            StorageParseError: If the file content is malformed
        """
        if not self.exists():
            return UserRegistry(), AccountRegistry()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageIOError(f"Could not read snapshot {self.path}: {e}") from e

        try:
            data = json.loads(raw, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise StorageParseError(f"Snapshot {self.path} is not valid JSON: {e}") from e

        users, accounts = restore_registries(data)

        log_action(
            self.logger, "info", "Snapshot loaded",
            action="load_snapshot", resource=str(self.path),
            extra={"users": len(users), "accounts": len(accounts)}
        )
        return users, accounts

    def exists(self) -> bool:
        return self.path.is_file()
