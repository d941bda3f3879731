"""Infrastructure errors package.

Usage:
    from src.infrastructure.errors import CacheError, DatabaseError
"""

from src.infrastructure.errors.infrastructure_error import (
    CacheError,
    DatabaseError,
    InfrastructureError,
)

__all__ = [
    "CacheError",
    "DatabaseError",
    "InfrastructureError",
]
