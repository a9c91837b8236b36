"""
User Registry Module

Stores users for the lifetime of the process and supports lookup by id and
by name. Users are never updated or deleted.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import InvalidInput
from .ids import new_id
from .logging_config import get_logger, log_action


@dataclass(frozen=True)
class User:
    """Bank user"""
    id: str
    name: str


class UserRegistry:
    """
    In-memory collection of users, in insertion order
    """

    def __init__(self):
        self._users: List[User] = []
        self._by_id: Dict[str, User] = {}
        self.logger = get_logger("minibank.users")

    def create_user(self, name: Optional[str]) -> User:
        """
        Create a user with a freshly generated id

        Args:
            name: Display name, must be non-empty

        Returns:
            Created User

        Raises:
            InvalidInput: If name is empty or missing
        """
        if not name:
            raise InvalidInput("User name is required")

        user = self._add(User(id=new_id(), name=name))

        log_action(
            self.logger, "info", "User created",
            action="create_user", resource=f"user:{user.id}",
            extra={"name": name}
        )
        return user

    def restore_user(self, user_id: str, name: str) -> User:
        """Re-create a user under a known id (snapshot loading only)"""
        return self._add(User(id=user_id, name=name))

    def find_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        return self._by_id.get(user_id)

    def find_by_name(self, name: str) -> List[User]:
        """Get all users with the given name"""
        return [user for user in self._users if user.name == name]

    def all(self) -> List[User]:
        """Get all users"""
        return list(self._users)

    def __len__(self) -> int:
        return len(self._users)

    def _add(self, user: User) -> User:
        self._users.append(user)
        self._by_id[user.id] = user
        return user
