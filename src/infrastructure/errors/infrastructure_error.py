"""Infrastructure layer error types.

Infrastructure errors represent failures in external systems (database,
token store).

Architecture:
- Adapters catch library exceptions and map them to these error values
- Infrastructure errors inherit from DomainError (not Exception)
- Uses InfrastructureErrorCode for internal error tracking
- Used with Result types for error propagation
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DomainError
from src.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode (TRANSIENT_STORAGE for storage failures).
        message: Human-readable message.
        infrastructure_code: Original infrastructure error code.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DatabaseError(InfrastructureError):
    """Database-specific errors (wraps SQLAlchemy exceptions)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Token store errors (wraps Redis exceptions, key/operation in details)."""

    pass
