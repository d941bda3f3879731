"""UserRepository protocol for user persistence.

Port (interface) for hexagonal architecture.
Infrastructure layer implements this protocol.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from src.domain.entities.user import UserRecord


class UserRepository(Protocol):
    """User repository protocol (port).

    Uniqueness of email and username is enforced at this layer: ``save`` and
    ``update`` raise UserAlreadyExistsError on violation. Storage failures
    surface as TransientStorageError.

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.

    Pagination:
        ``page`` is zero-based; results are ordered by creation time, then id.

    Example Implementation:
        >>> class InMemoryUserRepository:
        ...     async def find_by_email(self, email: str) -> UserRecord | None:
        ...         ...
    """

    async def save(self, user: UserRecord) -> UserRecord:
        """Create a new user.

        Args:
            user: Record to persist.

        Returns:
            The stored record.

        Raises:
            UserAlreadyExistsError: If id, email or username is taken.
        """
        ...

    async def update(
        self, user: UserRecord, *, expected_updated_at: datetime | None = None
    ) -> UserRecord:
        """Replace an existing user.

        Args:
            user: New state of the record.
            expected_updated_at: When given, the write only happens if the
                stored record still carries this ``updated_at``.

        Raises:
            UserNotFoundError: If the id is unknown.
            UserAlreadyExistsError: If the new email or username is taken.
            ConcurrentUpdateError: If ``expected_updated_at`` does not match.
        """
        ...

    async def find_by_id(self, user_id: UUID) -> UserRecord | None:
        ...

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Find user by email address (case-insensitive)."""
        ...

    async def find_by_username(self, username: str) -> UserRecord | None:
        ...

    async def find_by_role(self, role: str) -> list[UserRecord]:
        ...

    async def find_by_roles(self, roles: Iterable[str]) -> list[UserRecord]:
        """Find users holding any of the given roles."""
        ...

    async def find_all_enabled(self) -> list[UserRecord]:
        ...

    async def find_all_disabled(self) -> list[UserRecord]:
        ...

    async def find_all_locked(self) -> list[UserRecord]:
        ...

    async def find_users_created_after(self, moment: datetime) -> list[UserRecord]:
        ...

    async def find_by_attribute(self, key: str, value: Any) -> list[UserRecord]:
        ...

    async def find_by_attributes(
        self, attributes: Mapping[str, Any]
    ) -> list[UserRecord]:
        """Find users matching every given attribute."""
        ...

    async def count(self) -> int:
        ...

    async def count_by_role(self, role: str) -> int:
        ...

    async def count_enabled(self) -> int:
        ...

    async def count_disabled(self) -> int:
        ...

    async def exists_by_email(self, email: str) -> bool:
        ...

    async def exists_by_username(self, username: str) -> bool:
        ...

    async def exists_by_id(self, user_id: UUID) -> bool:
        ...

    async def delete_by_id(self, user_id: UUID) -> bool:
        """Delete a user.

        Returns:
            True if a user was deleted, False if the id was unknown.
        """
        ...

    async def delete(self, user: UserRecord) -> bool:
        ...

    async def find_all(self, page: int, size: int) -> list[UserRecord]:
        ...

    async def find_by_username_containing(
        self, pattern: str, page: int, size: int
    ) -> list[UserRecord]:
        """Find users whose username contains pattern (case-insensitive)."""
        ...
