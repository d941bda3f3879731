"""Base error value for railway-oriented results.

DomainError is carried inside Failure results; it is data, not an
exception. Adapters subclass it to attach infrastructure context.

Usage:
    from src.core.errors import DomainError
    from src.core.enums import ErrorCode

    return Failure(
        error=DomainError(
            code=ErrorCode.TRANSIENT_STORAGE,
            message="Token store unavailable",
        )
    )
"""

from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error value (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
