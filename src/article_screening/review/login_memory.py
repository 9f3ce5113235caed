"""
Durable memory of the last reviewer and role.

Used only to prefill the login form; it is never trusted as a login.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..schemas import Role

REVIEWER_KEY = "reviewer"
ROLE_KEY = "role"


class LoginMemory(ABC):
    """Storage for the `reviewer` and `role` values."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    def remember(self, reviewer: str, role: Role) -> None:
        """Store the reviewer and role for the next visit."""
        self.set(REVIEWER_KEY, reviewer)
        self.set(ROLE_KEY, Role.parse(role).value)

    def recall(self) -> tuple[Optional[str], Optional[Role]]:
        """Return the saved reviewer and role; unknown roles are dropped."""
        reviewer = self.get(REVIEWER_KEY) or None
        raw_role = self.get(ROLE_KEY)
        role = None
        if raw_role:
            try:
                role = Role(raw_role)
            except ValueError:
                role = None
        return reviewer, role

    def forget(self) -> None:
        """Clear both keys."""
        self.delete(REVIEWER_KEY)
        self.delete(ROLE_KEY)


class InMemoryLoginMemory(LoginMemory):
    """Dictionary-backed memory for tests and scripts."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)
