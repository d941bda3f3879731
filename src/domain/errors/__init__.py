"""Domain errors package.

Usage:
    from src.domain.errors import AuthenticationError, InvalidEmailError
"""

from src.domain.errors.auth_exceptions import (
    AuthDomainException,
    ConcurrentUpdateError,
    InvalidEmailError,
    InvalidPasswordError,
    TransientStorageError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from src.domain.errors.authentication_error import AuthenticationError

__all__ = [
    "AuthDomainException",
    "AuthenticationError",
    "ConcurrentUpdateError",
    "InvalidEmailError",
    "InvalidPasswordError",
    "TransientStorageError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
