"""User record for authentication.

Pure business data, no framework dependencies. Records are value-semantic:
they are never mutated in place, UserFactory returns new copies.

Account Status:
    - enabled / locked / account_expired / credentials_expired flags gate
      authentication (checked in that order by the engine)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class UserRecord:
    """Immutable user record.

    Attributes:
        id: Unique user identifier (immutable once assigned)
        email: Normalized email address (validated by Email value object)
        username: Trimmed, non-empty username
        password_hash: Encoded password (never plaintext)
        roles: Role tokens propagated into access tokens
        enabled: Account enabled (disabled accounts cannot authenticate)
        locked: Account locked by an administrator or policy
        account_expired: Account past its validity
        credentials_expired: Password must be changed before login
        created_at: Timestamp when user was created
        updated_at: Timestamp of the last change (never before created_at)
        attributes: Free-form string-keyed metadata (e.g. lastLogin)
        display_name: Optional name shown in notifications

    Example:
        >>> user = factory.create_user(
        ...     email=Email.of("alice@example.com"),
        ...     username="alice",
        ...     password=Password.from_encoded("$2b$12$..."),
        ... )
        >>> user.get_display_name()
        'alice'
    """

    id: UUID
    email: str
    username: str
    password_hash: str
    roles: frozenset[str] = frozenset()
    enabled: bool = True
    locked: bool = False
    account_expired: bool = False
    credentials_expired: bool = False
    created_at: datetime
    updated_at: datetime
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)
    display_name: str | None = None

    def get_display_name(self) -> str:
        """Resolve the name shown to the user.

        Returns:
            str: display_name if set, else username, else email.
        """
        for candidate in (self.display_name, self.username, self.email):
            if candidate and candidate.strip():
                return candidate
        return ""

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def is_valid(self) -> bool:
        """Check record completeness.

        Returns:
            bool: True when email, username and password hash are present and
                neither the account nor the credentials are expired.
        """
        return (
            bool(self.email)
            and bool(self.username and self.username.strip())
            and bool(self.password_hash)
            and not self.account_expired
            and not self.credentials_expired
        )
