"""Credential strategy protocol (port).

A strategy verifies one credential shape. The engine picks the first
enabled strategy that accepts the credential's tag.
"""

from typing import Protocol

from src.domain.entities.user import UserRecord
from src.domain.enums import CredentialType
from src.domain.value_objects import Credentials


class CredentialStrategyProtocol(Protocol):
    """Credential verifier bound to credential tags."""

    @property
    def is_enabled(self) -> bool:
        ...

    def accepts(self, credential_type: CredentialType) -> bool:
        ...

    def prepare(self, credentials: Credentials) -> Credentials:
        """Normalize credentials (e.g. trim identifiers) before verification."""
        ...

    def validate_format(self, credentials: Credentials) -> bool:
        """Check required fields are present and non-blank."""
        ...

    async def authenticate(self, credentials: Credentials) -> UserRecord | None:
        """Verify credentials.

        Returns:
            The user on success, None otherwise. Never reveals which part of
            the credentials was wrong.
        """
        ...
