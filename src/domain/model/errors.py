"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input is missing a required field."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DuplicateUserError(DuplicateError):
    """Username (or email, when email is unique) is already taken."""

    def __init__(self, username: str, message: str = "Username or email already exists"):
        self.username = username
        super().__init__(message)


class InvalidCredentialsError(DomainError):
    """Unknown username or wrong password.

    Both cases share one message so callers cannot tell which field was wrong.
    """

    def __init__(self):
        super().__init__("Invalid username or password")


class StorageError(DomainError):
    """The user store failed for a reason other than a uniqueness violation."""
