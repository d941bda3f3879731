"""Global exception handlers for FastAPI application.

Handlers:
    validation_exception_handler: RequestValidationError -> 400 with details
    generic_exception_handler: Any unhandled exception -> 500 (no internals)

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.container import get_logger
from src.core.enums import ErrorCode
from src.presentation.routers.errors.error_response_builder import STATUS_TITLES
from src.schemas.auth_schemas import ErrorResponse, ValidationErrorResponse


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert RequestValidationError to a 400 response.

    Example:
        >>> # POST /api/auth/login with {"password": "x"}
        >>> # {
        >>> #   "status": 400,
        >>> #   "error": "Validation failed",
        >>> #   "details": [
        >>> #     {"field": "usernameOrEmail", "code": "missing", "message": "Field required"}
        >>> #   ]
        >>> # }
    """
    # Type narrowing: FastAPI registers this handler only for RequestValidationError
    assert isinstance(exc, RequestValidationError)

    details = []
    for error in exc.errors():
        # Skip "body" prefix (["body", "email"] -> "email")
        field_parts = [str(p) for p in error.get("loc", []) if p != "body"]
        details.append(
            {
                "field": ".".join(field_parts) if field_parts else "body",
                "code": error.get("type", "validation_error"),
                "message": error.get("msg", "Validation failed"),
            }
        )

    body = ValidationErrorResponse(status=status.HTTP_400_BAD_REQUEST, details=details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected Python exceptions.

    Logs the exception and returns a 500 body that never includes stack
    traces or exception text.
    """
    get_logger().error(
        "Unhandled exception",
        error=exc,
        request_path=request.url.path,
        request_method=request.method,
    )

    body = ErrorResponse(
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error=STATUS_TITLES[500],
        code=ErrorCode.INTERNAL_ERROR.value,
        message="An unexpected error occurred",
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
