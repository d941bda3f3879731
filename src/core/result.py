"""Result types for railway-oriented programming.

Adapters that talk to external systems (token store, cache) return a Result
instead of raising, so callers decide explicitly how each failure is
classified.

Usage:
    async def lookup(key: str) -> Result[str | None, DomainError]:
        ...

    match await store.get("revoked:abc"):
        case Success(value=None):
            ...  # not revoked
        case Success(value=marker):
            ...
        case Failure(error=error):
            ...  # store unavailable
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
