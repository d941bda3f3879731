"""Error responses and global exception handlers.

Exports:
    ErrorResponseBuilder: Maps engine failures to JSON error responses
    register_exception_handlers: Register global exception handlers with FastAPI
"""

from src.presentation.routers.errors.error_response_builder import (
    ErrorResponseBuilder,
)
from src.presentation.routers.errors.exception_handlers import (
    register_exception_handlers,
)

__all__ = [
    "ErrorResponseBuilder",
    "register_exception_handlers",
]
