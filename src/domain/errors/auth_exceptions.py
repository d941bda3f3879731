"""Domain exceptions raised by value objects, factories and repositories.

The engine catches these at its boundary and classifies them through their
``error_code``; they never reach HTTP clients directly.
"""

from src.core.enums import ErrorCode


class AuthDomainException(Exception):
    """Base class for exceptions raised inside the authentication domain."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message: str = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidEmailError(AuthDomainException, ValueError):
    error_code = ErrorCode.INVALID_EMAIL
    default_message = "Invalid email"


class InvalidPasswordError(AuthDomainException, ValueError):
    error_code = ErrorCode.INVALID_PASSWORD
    default_message = "Invalid password"


class UserAlreadyExistsError(AuthDomainException):
    error_code = ErrorCode.USER_ALREADY_EXISTS
    default_message = "User already exists"


class UserNotFoundError(AuthDomainException):
    error_code = ErrorCode.USER_NOT_FOUND
    default_message = "User not found"


class TransientStorageError(AuthDomainException):
    """Repository or token store failure (including timeouts)."""

    error_code = ErrorCode.TRANSIENT_STORAGE
    default_message = "Storage temporarily unavailable"


class ConcurrentUpdateError(AuthDomainException):
    """The stored record changed since it was read."""

    error_code = ErrorCode.TRANSIENT_STORAGE
    default_message = "User was modified concurrently"
