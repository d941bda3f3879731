"""Error response builder for engine failures.

Maps ErrorCode values to HTTP status codes and builds the JSON error body
``{status, error, code, message}``.

Status mapping:
    400: invalid email/password, validation, uniqueness, unsupported strategy
    401: credential, token and account-state failures (and unknown users)
    503: transient storage failures
    500: everything else
"""

from fastapi import status
from fastapi.responses import JSONResponse

from src.core.enums import ErrorCode
from src.schemas.auth_schemas import ErrorResponse

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.USER_ALREADY_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNSUPPORTED_AUTHENTICATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.USER_NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.ACCOUNT_DISABLED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.ACCOUNT_LOCKED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.ACCOUNT_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.CREDENTIALS_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TRANSIENT_STORAGE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

# HTTP status code to title
STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class ErrorResponseBuilder:
    """Build JSON error responses from engine failures.

    Example:
        >>> response = ErrorResponseBuilder.from_error_code(
        ...     ErrorCode.INVALID_CREDENTIALS, "Invalid username/email or password"
        ... )
        >>> response.status_code
        401
    """

    @staticmethod
    def status_for(code: ErrorCode | None) -> int:
        if code is None:
            return status.HTTP_500_INTERNAL_SERVER_ERROR
        return _STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    @staticmethod
    def from_error_code(code: ErrorCode | None, message: str | None) -> JSONResponse:
        """Convert a failed envelope's code and message to a JSON response.

        Args:
            code: ErrorCode from the envelope (None is treated as internal).
            message: Client-safe message.

        Returns:
            JSONResponse with ErrorResponse content.
        """
        status_code = ErrorResponseBuilder.status_for(code)
        body = ErrorResponse(
            status=status_code,
            error=STATUS_TITLES.get(status_code, "Error"),
            code=(code or ErrorCode.INTERNAL_ERROR).value,
            message=message or "Request failed",
        )
        return JSONResponse(status_code=status_code, content=body.model_dump())
