"""Client-facing authentication messages.

Authentication failures share one message per failure kind so responses
never reveal whether the identifier or the password was wrong.

Usage:
    from src.domain.errors import AuthenticationError

    return AuthenticationResult.failed(
        ErrorCode.INVALID_CREDENTIALS, AuthenticationError.INVALID_CREDENTIALS
    )
"""


class AuthenticationError:
    """Authentication message constants.

    These are NOT exceptions - they are message values placed in result
    envelopes returned by the engine.
    """

    # Credential errors
    INVALID_CREDENTIALS = "Invalid username/email or password"
    UNSUPPORTED_AUTHENTICATION = "Unsupported authentication type"

    # Token errors
    INVALID_TOKEN = "Invalid refresh token"
    INVALID_OR_EXPIRED_TOKEN = "Invalid or expired refresh token"
    REVOKED_TOKEN = "Refresh token has been revoked"

    # Account state errors
    ACCOUNT_DISABLED = "Account is disabled"
    ACCOUNT_LOCKED = "Account is locked"
    ACCOUNT_EXPIRED = "Account has expired"
    CREDENTIALS_EXPIRED = "Credentials have expired"

    # Infrastructure
    SERVICE_UNAVAILABLE = "Service temporarily unavailable, please retry"
