"""Core shared kernel.

Foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Error codes and base error values
- Settings

The core module has NO dependencies on other application layers.
"""

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
]
