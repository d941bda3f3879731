"""Authentication commands (write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- AuthEngine executes business logic and returns result envelopes
- Raw values are validated by the engine (Email / Password value objects)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.domain.value_objects import Credentials


@dataclass(frozen=True, kw_only=True)
class RegisterUser:
    """Register new user account.

    Attributes:
        email: Email address as entered (validated and normalized by the engine).
        username: Username (trimmed, must be unique).
        password: Plain-text password (policy-checked, then hashed).
        roles: Roles to assign; None means the configured default roles.
        attributes: Initial user attributes.
        display_name: Optional display name.

    Example:
        >>> command = RegisterUser(
        ...     email="Alice@Example.COM",
        ...     username="alice",
        ...     password="P@ssw0rd!",
        ... )
        >>> result = await engine.register_user(command)
    """

    email: str
    username: str
    password: str = field(repr=False)
    roles: frozenset[str] | None = None
    attributes: Mapping[str, Any] | None = None
    display_name: str | None = None


@dataclass(frozen=True, kw_only=True)
class AuthenticateUser:
    """Authenticate with a credential variant.

    Attributes:
        credentials: Tagged credential object (username+password, email+password).
        ip_address: Client address for the login notification (optional).
        user_agent: Client user agent for the login notification (optional).
    """

    credentials: Credentials
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    """Change a user's password.

    On success every refresh token of the user is revoked.

    Attributes:
        user_id: User whose password changes.
        current_password: Current plain-text password (verified).
        new_password: New plain-text password (policy-checked).
    """

    user_id: UUID
    current_password: str = field(repr=False)
    new_password: str = field(repr=False)
