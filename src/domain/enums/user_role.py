"""Role tokens accepted at the HTTP and persistence edges.

The engine works with plain role strings (``UserRecord.roles``); this enum
is the domain-specific vocabulary the edges map to and from.

Usage:
    from src.domain.enums import UserRole

    roles = frozenset(role.value for role in request.roles)
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles.

    String Enum:
        Inherits from str so values serialize directly into the ``roles``
        claim of access tokens.
    """

    ADMIN = "admin"
    """Administrator with management capabilities."""

    USER = "user"
    """Standard user (assigned by default on registration)."""

    READONLY = "readonly"
    """Read-only access to own resources."""

    @classmethod
    def values(cls) -> frozenset[str]:
        """All role tokens as plain strings."""
        return frozenset(role.value for role in cls)
