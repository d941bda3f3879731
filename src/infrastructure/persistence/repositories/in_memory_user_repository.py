"""InMemoryUserRepository - process-local implementation of UserRepository.

Used when no database URL is configured and throughout the test suite.
All operations are serialized by one asyncio.Lock, which makes the
check-then-insert in ``save`` atomic (concurrent registrations of the same
identifier: exactly one wins).
"""

import asyncio
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities.user import UserRecord
from src.domain.errors import (
    ConcurrentUpdateError,
    UserAlreadyExistsError,
    UserNotFoundError,
)


def _sort_key(user: UserRecord) -> tuple[datetime, str]:
    return user.created_at, str(user.id)


def _page(users: list[UserRecord], page: int, size: int) -> list[UserRecord]:
    if page < 0 or size <= 0:
        raise ValueError("page must be >= 0 and size must be > 0")
    ordered = sorted(users, key=_sort_key)
    return ordered[page * size : (page + 1) * size]


class InMemoryUserRepository:
    """Dict-backed user repository.

    This class does NOT inherit from UserRepository protocol (Protocol uses
    structural typing).

    Indexes:
        _by_id: id -> record
        _email_index: lowercased email -> id
        _username_index: username -> id
    """

    def __init__(self) -> None:
        self._by_id: dict[UUID, UserRecord] = {}
        self._email_index: dict[str, UUID] = {}
        self._username_index: dict[str, UUID] = {}
        self._lock = asyncio.Lock()

    async def save(self, user: UserRecord) -> UserRecord:
        async with self._lock:
            if user.id in self._by_id:
                raise UserAlreadyExistsError(f"User with id {user.id} already exists")
            self._check_unique(user)
            self._store(user)
            return user

    async def update(
        self, user: UserRecord, *, expected_updated_at: datetime | None = None
    ) -> UserRecord:
        async with self._lock:
            current = self._by_id.get(user.id)
            if current is None:
                raise UserNotFoundError(f"User with id {user.id} not found")
            if (
                expected_updated_at is not None
                and current.updated_at != expected_updated_at
            ):
                raise ConcurrentUpdateError(f"User {user.id} was modified concurrently")
            self._check_unique(user)
            self._unstore(current)
            self._store(user)
            return user

    async def find_by_id(self, user_id: UUID) -> UserRecord | None:
        async with self._lock:
            return self._by_id.get(user_id)

    async def find_by_email(self, email: str) -> UserRecord | None:
        async with self._lock:
            user_id = self._email_index.get(email.strip().lower())
            return None if user_id is None else self._by_id[user_id]

    async def find_by_username(self, username: str) -> UserRecord | None:
        async with self._lock:
            user_id = self._username_index.get(username)
            return None if user_id is None else self._by_id[user_id]

    async def find_by_role(self, role: str) -> list[UserRecord]:
        return await self._filter(lambda u: role in u.roles)

    async def find_by_roles(self, roles: Iterable[str]) -> list[UserRecord]:
        wanted = frozenset(roles)
        return await self._filter(lambda u: not wanted.isdisjoint(u.roles))

    async def find_all_enabled(self) -> list[UserRecord]:
        return await self._filter(lambda u: u.enabled)

    async def find_all_disabled(self) -> list[UserRecord]:
        return await self._filter(lambda u: not u.enabled)

    async def find_all_locked(self) -> list[UserRecord]:
        return await self._filter(lambda u: u.locked)

    async def find_users_created_after(self, moment: datetime) -> list[UserRecord]:
        return await self._filter(lambda u: u.created_at > moment)

    async def find_by_attribute(self, key: str, value: Any) -> list[UserRecord]:
        return await self.find_by_attributes({key: value})

    async def find_by_attributes(
        self, attributes: Mapping[str, Any]
    ) -> list[UserRecord]:
        def matches(user: UserRecord) -> bool:
            return all(
                key in user.attributes and user.attributes[key] == value
                for key, value in attributes.items()
            )

        return await self._filter(matches)

    async def count(self) -> int:
        async with self._lock:
            return len(self._by_id)

    async def count_by_role(self, role: str) -> int:
        return len(await self.find_by_role(role))

    async def count_enabled(self) -> int:
        return len(await self.find_all_enabled())

    async def count_disabled(self) -> int:
        return len(await self.find_all_disabled())

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def exists_by_username(self, username: str) -> bool:
        return await self.find_by_username(username) is not None

    async def exists_by_id(self, user_id: UUID) -> bool:
        return await self.find_by_id(user_id) is not None

    async def delete_by_id(self, user_id: UUID) -> bool:
        async with self._lock:
            current = self._by_id.get(user_id)
            if current is None:
                return False
            self._unstore(current)
            return True

    async def delete(self, user: UserRecord) -> bool:
        return await self.delete_by_id(user.id)

    async def find_all(self, page: int, size: int) -> list[UserRecord]:
        async with self._lock:
            return _page(list(self._by_id.values()), page, size)

    async def find_by_username_containing(
        self, pattern: str, page: int, size: int
    ) -> list[UserRecord]:
        needle = pattern.lower()
        async with self._lock:
            found = [u for u in self._by_id.values() if needle in u.username.lower()]
            return _page(found, page, size)

    async def _filter(self, predicate: Callable[[UserRecord], bool]) -> list[UserRecord]:
        async with self._lock:
            return sorted(
                (u for u in self._by_id.values() if predicate(u)), key=_sort_key
            )

    def _check_unique(self, user: UserRecord) -> None:
        email_owner = self._email_index.get(user.email.lower())
        if email_owner is not None and email_owner != user.id:
            raise UserAlreadyExistsError(f"User with email {user.email} already exists")
        username_owner = self._username_index.get(user.username)
        if username_owner is not None and username_owner != user.id:
            raise UserAlreadyExistsError(
                f"User with username {user.username} already exists"
            )

    def _store(self, user: UserRecord) -> None:
        self._by_id[user.id] = user
        self._email_index[user.email.lower()] = user.id
        self._username_index[user.username] = user.id

    def _unstore(self, user: UserRecord) -> None:
        self._by_id.pop(user.id, None)
        self._email_index.pop(user.email.lower(), None)
        self._username_index.pop(user.username, None)
