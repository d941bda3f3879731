"""Error codes for the authentication engine (machine-readable).

Every failure produced by the engine is classified into exactly one of
these codes. The HTTP layer maps them to status codes; clients may rely on
the string values.

Categories:
- Validation errors (INVALID_*, VALIDATION_FAILED)
- Resource errors (USER_NOT_FOUND)
- Conflict errors (USER_ALREADY_EXISTS)
- Authentication errors (INVALID_CREDENTIALS, INVALID_TOKEN, UNSUPPORTED_*)
- Account state errors (ACCOUNT_*, CREDENTIALS_EXPIRED)
- Infrastructure errors (TRANSIENT_STORAGE, INTERNAL_ERROR)
"""

from enum import Enum


class ErrorCode(Enum):
    """Engine error codes (machine-readable)."""

    # Validation errors
    INVALID_EMAIL = "invalid_email"
    INVALID_PASSWORD = "invalid_password"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"

    # Conflict errors
    USER_ALREADY_EXISTS = "user_already_exists"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    UNSUPPORTED_AUTHENTICATION = "unsupported_authentication"

    # Account state errors
    ACCOUNT_DISABLED = "account_disabled"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_EXPIRED = "account_expired"
    CREDENTIALS_EXPIRED = "credentials_expired"

    # Infrastructure errors
    TRANSIENT_STORAGE = "transient_storage"
    INTERNAL_ERROR = "internal_error"
