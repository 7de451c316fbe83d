"""Account service: signup, login and profile business logic.

Pure business logic with no HTTP dependencies and no knowledge of which
storage backend is in use. Raises domain errors that route handlers map to
HTTP status codes.
"""

import logging
from datetime import date, datetime

from domain.model.errors import InvalidCredentialsError, NotFoundError, ValidationError
from domain.model.user import Profile, User
from port.user_repository import UserRepository
from services.password import DEFAULT_BCRYPT_ROUNDS, hash_password, verify_password
from services.token_service import issue_token

logger = logging.getLogger(__name__)


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _require(message: str, *values) -> None:
    if any(_is_blank(v) for v in values):
        raise ValidationError(message)


def signup(
    repo: UserRepository,
    username: str,
    email: str,
    password: str,
    dob: date,
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> User:
    """Register a new user with the default coin balance.

    Raises:
        ValidationError: a field is missing or empty
        DuplicateUserError: username (or email) already taken
        StorageError: the store failed
    """
    _require("All fields are required", username, email, password, dob)
    if "\x00" in password:
        # bcrypt refuses NUL bytes
        raise ValidationError("Password must not contain NUL characters")

    password_hash = hash_password(password, rounds=bcrypt_rounds)
    user = repo.create(username=username, email=email, password_hash=password_hash, dob=dob)

    logger.info("User registered", extra={"userId": user.id, "username": username})
    return user


def login(
    repo: UserRepository,
    username: str,
    password: str,
    secret: str,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    """Check credentials and issue a one-hour bearer token.

    Unknown username and wrong password raise the same error.

    Raises:
        ValidationError: username or password missing
        InvalidCredentialsError: credentials do not match a user
        StorageError: the store failed
    """
    _require("Username and password are required", username, password)

    user = repo.get_by_username(username)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"username": username})
        raise InvalidCredentialsError()

    logger.info("User logged in", extra={"userId": user.id, "username": username})
    return issue_token(user.username, secret, algorithm=algorithm, now=now)


def get_profile(repo: UserRepository, username: str) -> Profile:
    """Return the public profile of the user behind a verified identity.

    Raises:
        NotFoundError: no user has this username any more
        StorageError: the store failed
    """
    user = repo.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")
    return user.to_profile()


def update_profile(
    repo: UserRepository,
    username: str,
    new_username: str,
    email: str | None = None,
    dob: date | None = None,
) -> Profile:
    """Rename the user and overwrite email/dob when given.

    Tokens issued before the rename still carry the old username; they are
    neither reissued nor revoked here.

    Raises:
        ValidationError: new_username missing (nothing is written)
        NotFoundError: no record matches the current username
        DuplicateUserError: new_username (or email) belongs to another user
        StorageError: the store failed
    """
    _require("New username is required", new_username)

    user = repo.update_profile(username, new_username, email=email, dob=dob)
    if not user:
        raise NotFoundError("User not found")

    logger.info("Profile updated", extra={"userId": user.id, "username": username, "newUsername": new_username})
    return user.to_profile()
