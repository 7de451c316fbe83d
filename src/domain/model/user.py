from dataclasses import dataclass
from datetime import date, datetime

DEFAULT_COIN_BALANCE = 99


@dataclass
class User:
    """Domain model representing a registered user."""
    id: str
    username: str
    email: str
    password_hash: str
    dob: date
    super_coin_bal: int = DEFAULT_COIN_BALANCE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_profile(self) -> 'Profile':
        return Profile(
            username=self.username,
            email=self.email,
            dob=self.dob,
            super_coin_bal=self.super_coin_bal,
        )


@dataclass(frozen=True)
class Profile:
    """Public projection of a User. Never carries the password hash."""
    username: str
    email: str
    dob: date
    super_coin_bal: int


@dataclass
class Identity:
    """Verified username attached to a request by the auth dependency.

    Renaming a user updates this object for the rest of the request only.
    The bearer token keeps the old username until it expires.
    """
    username: str
