"""Token store protocol for domain layer.

Key-value store with per-key TTL used for refresh-token indexing and
revocation markers.

Key layout:
    revoked:<refresh-token>       -> marker, TTL = remaining token lifetime
    user:<user-id>:<refresh-token> -> marker, TTL = refresh token lifetime

Architecture:
- Protocol-based - uses structural typing
- All operations return Result types
- Writes to keys sharing a user prefix are read-your-writes
"""

from collections.abc import Mapping, Sequence
from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result


class TokenStoreProtocol(Protocol):
    """Token store protocol - what the token service needs from storage."""

    async def get(self, key: str) -> Result[str | None, DomainError]:
        """Get value (None if missing or expired)."""
        ...

    async def set(self, key: str, value: str, ttl: int) -> Result[None, DomainError]:
        """Set value with a TTL in seconds (must be positive)."""
        ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Delete key. Success(True) if it existed."""
        ...

    async def exists(self, key: str) -> Result[bool, DomainError]:
        ...

    async def ttl(self, key: str) -> Result[int | None, DomainError]:
        """Remaining TTL in seconds (None if missing or no expiry)."""
        ...

    async def scan_prefix(self, prefix: str) -> Result[list[str], DomainError]:
        """List live keys starting with prefix."""
        ...

    async def apply_batch(
        self,
        *,
        set_entries: Mapping[str, tuple[str, int]],
        delete_keys: Sequence[str],
    ) -> Result[None, DomainError]:
        """Atomically write entries (key -> (value, ttl)) and delete keys.

        Either every change is applied or none is.
        """
        ...
