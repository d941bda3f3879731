"""UserId value object.

Wraps the 128-bit user identifier. New identifiers are UUIDv7 so they sort
by creation time.
"""

from dataclasses import dataclass
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True)
class UserId:
    """Opaque user identifier.

    Example:
        >>> uid = UserId.generate()
        >>> UserId.of(str(uid)) == uid
        True
    """

    value: UUID

    @classmethod
    def of(cls, raw: str | UUID) -> "UserId":
        """Parse an identifier.

        Raises:
            ValueError: If raw is not a valid UUID string.
        """
        if isinstance(raw, UUID):
            return cls(raw)
        if raw is None or not str(raw).strip():
            raise ValueError("User ID cannot be empty")
        return cls(UUID(str(raw).strip()))

    @classmethod
    def generate(cls) -> "UserId":
        """Create a new time-ordered identifier."""
        return cls(uuid7())

    def __str__(self) -> str:
        return str(self.value)
