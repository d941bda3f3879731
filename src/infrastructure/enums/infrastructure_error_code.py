"""Infrastructure-specific error codes.

These are internal codes for tracking infrastructure failures.
They travel alongside the domain ErrorCode (TRANSIENT_STORAGE).

Categories:
- Database errors (DATABASE_*)
- Cache / token store errors (CACHE_*)
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    # Database errors
    DATABASE_CONNECTION_FAILED = "database_connection_failed"
    DATABASE_TIMEOUT = "database_timeout"
    DATABASE_CONSTRAINT_VIOLATION = "database_constraint_violation"
    DATABASE_ERROR = "database_error"

    # Cache errors
    CACHE_CONNECTION_ERROR = "cache_connection_error"
    CACHE_TIMEOUT = "cache_timeout"
    CACHE_GET_ERROR = "cache_get_error"
    CACHE_SET_ERROR = "cache_set_error"
    CACHE_DELETE_ERROR = "cache_delete_error"
    CACHE_SCAN_ERROR = "cache_scan_error"
