"""Credential shape tags.

Each credential variant carries one of these tags; strategies declare which
tags they accept and the strategy registry is keyed by them.

Usage:
    from src.domain.enums import CredentialType

    registry.resolve(CredentialType.USERNAME_PASSWORD)
"""

from enum import Enum


class CredentialType(str, Enum):
    """Credential variant discriminator.

    String Enum:
        Inherits from str for easy serialization and logging.
        Values are lowercase for consistency.
    """

    USERNAME_PASSWORD = "username_password"
    """Username (or email used as identifier) plus password."""

    EMAIL_PASSWORD = "email_password"
    """Email address plus password."""
