"""Credential variants submitted for authentication.

Each variant exposes its ``credential_type`` tag; strategies are selected by
tag, never by class.
"""

from dataclasses import dataclass, field
from typing import ClassVar, TypeAlias

from src.domain.enums import CredentialType


@dataclass(frozen=True, slots=True, kw_only=True)
class UsernamePasswordCredentials:
    """Username (or email used as identifier) and password.

    Attributes:
        username: Identifier as entered by the user.
        password: Raw password (excluded from repr).
    """

    credential_type: ClassVar[CredentialType] = CredentialType.USERNAME_PASSWORD

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class EmailPasswordCredentials:
    """Email address and password.

    Attributes:
        email: Email address as entered by the user.
        password: Raw password (excluded from repr).
    """

    credential_type: ClassVar[CredentialType] = CredentialType.EMAIL_PASSWORD

    email: str
    password: str = field(repr=False)


Credentials: TypeAlias = UsernamePasswordCredentials | EmailPasswordCredentials
