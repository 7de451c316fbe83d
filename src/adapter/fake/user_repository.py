"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone

from domain.model.errors import DuplicateUserError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self, unique_email: bool = True):
        self.store: dict[str, User] = {}
        self.unique_email = unique_email
        self._lock = threading.Lock()

    def _taken(self, username: str, email: str | None, exclude_id: str | None = None) -> bool:
        for user in self.store.values():
            if user.id == exclude_id:
                continue
            if user.username == username:
                return True
            if self.unique_email and email is not None and user.email == email:
                return True
        return False

    # ── write operations ─────────────────────────────────────

    def create(self, username: str, email: str, password_hash: str, dob: date) -> User:
        with self._lock:
            if self._taken(username, email):
                raise DuplicateUserError(username)

            now = datetime.now(timezone.utc)
            user = User(
                id=uuid.uuid4().hex,
                username=username,
                email=email,
                password_hash=password_hash,
                dob=dob,
                created_at=now,
                updated_at=now,
            )
            self.store[user.id] = user
            return replace(user)

    def update_profile(
        self,
        current_username: str,
        new_username: str,
        email: str | None = None,
        dob: date | None = None,
    ) -> User | None:
        with self._lock:
            user = self._find(current_username)
            if not user:
                return None
            if self._taken(new_username, email, exclude_id=user.id):
                raise DuplicateUserError(new_username)

            user.username = new_username
            if email is not None:
                user.email = email
            if dob is not None:
                user.dob = dob
            user.updated_at = datetime.now(timezone.utc)
            return replace(user)

    # ── read operations ──────────────────────────────────────

    def _find(self, username: str) -> User | None:
        for user in self.store.values():
            if user.username == username:
                return user
        return None

    def get_by_username(self, username: str) -> User | None:
        user = self._find(username)
        return replace(user) if user else None

    def ping(self) -> bool:
        return True
