"""Shared behavior for password-based credential strategies."""

import asyncio

from src.domain.entities.user import UserRecord
from src.domain.enums import CredentialType
from src.domain.protocols.password_hashing_protocol import PasswordHasherProtocol
from src.domain.protocols.user_repository import UserRepository

# Never a valid password for any account; only hashed for timing equalization
_DUMMY_PASSWORD = "dummy-password-for-timing-Aa1!"


class PasswordCredentialStrategy:
    """Base for strategies that look a user up and verify a password.

    Subclasses set ``credential_types`` and implement ``prepare``,
    ``validate_format`` and ``authenticate``.

    Timing:
        When no user is found the raw password is still compared against a
        dummy hash, so both paths cost one bcrypt verification.
    """

    credential_types: frozenset[CredentialType] = frozenset()

    def __init__(
        self,
        user_repo: UserRepository,
        password_hasher: PasswordHasherProtocol,
        *,
        enabled: bool = True,
    ) -> None:
        self._user_repo = user_repo
        self._password_hasher = password_hasher
        self._enabled = enabled
        self._dummy_hash: str | None = None

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    def accepts(self, credential_type: CredentialType) -> bool:
        return credential_type in self.credential_types

    async def _verify(self, user: UserRecord | None, raw_password: str) -> UserRecord | None:
        if user is None:
            await asyncio.to_thread(
                self._password_hasher.matches, raw_password, await self._get_dummy_hash()
            )
            return None

        matched = await asyncio.to_thread(
            self._password_hasher.matches, raw_password, user.password_hash
        )
        return user if matched else None

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(
                self._password_hasher.encode, _DUMMY_PASSWORD
            )
        return self._dummy_hash
