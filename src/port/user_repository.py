from datetime import date
from typing import Protocol

from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Writes are single atomic store operations. Uniqueness is enforced by the
    store itself: implementations raise DuplicateUserError on a collision and
    StorageError on any other failure.
    """
    def create(self, username: str, email: str, password_hash: str, dob: date) -> User:
        """Insert a new user with the default coin balance and return it."""
        ...

    def get_by_username(self, username: str) -> User | None:
        """Find a user by username. Return User or None if not found."""
        ...

    def update_profile(
        self,
        current_username: str,
        new_username: str,
        email: str | None = None,
        dob: date | None = None,
    ) -> User | None:
        """Overwrite username (and email/dob when given) on the record keyed by
        current_username. Return the updated User or None if no record matched."""
        ...

    def ping(self) -> bool:
        """Return True if the backing store is reachable."""
        ...
