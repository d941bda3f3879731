"""SqlAlchemyUserRepository - SQLAlchemy implementation of UserRepository.

Adapter for hexagonal architecture.
Maps between domain UserRecord and database UserModel. Every operation runs
in its own transactional session obtained from Database.
"""

from collections.abc import AsyncIterator, Iterable, Mapping
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.user import UserRecord
from src.domain.errors import (
    ConcurrentUpdateError,
    TransientStorageError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.user import UserModel, UserRoleModel


def _aware(moment: datetime) -> datetime:
    """SQLite returns naive datetimes; values are always stored as UTC."""
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


def _ordered(stmt: Select[tuple[UserModel]]) -> Select[tuple[UserModel]]:
    return stmt.order_by(UserModel.created_at, UserModel.id)


class SqlAlchemyUserRepository:
    """SQLAlchemy implementation of UserRepository protocol.

    This class does NOT inherit from UserRepository protocol (Protocol uses
    structural typing).

    Error mapping:
        IntegrityError -> UserAlreadyExistsError (unique email/username/id)
        SQLAlchemyError -> TransientStorageError

    Example:
        >>> repo = SqlAlchemyUserRepository(Database("sqlite+aiosqlite:///users.db"))
        >>> user = await repo.find_by_email("user@example.com")
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._database.get_session() as session:
                yield session
        except IntegrityError as e:
            raise UserAlreadyExistsError(
                "User with the same id, email or username already exists"
            ) from e
        except SQLAlchemyError as e:
            raise TransientStorageError(f"User storage failure: {e}") from e

    async def _select(self, stmt: Select[tuple[UserModel]]) -> list[UserRecord]:
        async with self._session() as session:
            result = await session.execute(_ordered(stmt))
            return [self._to_domain(model) for model in result.scalars().all()]

    async def _select_one(self, stmt: Select[tuple[UserModel]]) -> UserRecord | None:
        async with self._session() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return None if model is None else self._to_domain(model)

    async def _count(self, *criteria: Any) -> int:
        async with self._session() as session:
            stmt = select(func.count()).select_from(UserModel).where(*criteria)
            return int((await session.execute(stmt)).scalar_one())

    async def save(self, user: UserRecord) -> UserRecord:
        async with self._session() as session:
            session.add(self._to_model(user))
            await session.flush()
        return user

    async def update(
        self, user: UserRecord, *, expected_updated_at: datetime | None = None
    ) -> UserRecord:
        """Replace an existing user.

        With ``expected_updated_at`` the row is read FOR UPDATE and written
        only if its ``updated_at`` still matches.

        Raises:
            UserNotFoundError: If the id is unknown.
            ConcurrentUpdateError: If the stored ``updated_at`` differs.
        """
        checked = expected_updated_at is not None
        async with self._session() as session:
            model = await session.get(UserModel, user.id, with_for_update=checked)
            if model is None:
                raise UserNotFoundError(f"User with id {user.id} not found")
            if checked and _aware(model.updated_at) != expected_updated_at:
                raise ConcurrentUpdateError(
                    f"User {user.id} was modified concurrently"
                )

            model.email = user.email
            model.username = user.username
            model.password_hash = user.password_hash
            model.enabled = user.enabled
            model.locked = user.locked
            model.account_expired = user.account_expired
            model.credentials_expired = user.credentials_expired
            model.attributes = dict(user.attributes)
            model.display_name = user.display_name
            model.updated_at = user.updated_at

            # Apply role changes as a diff so unchanged rows are kept
            current = {row.role for row in model.roles}
            model.roles = [row for row in model.roles if row.role in user.roles]
            for role in sorted(user.roles - current):
                model.roles.append(UserRoleModel(role=role))

            await session.flush()
        return user

    async def find_by_id(self, user_id: UUID) -> UserRecord | None:
        return await self._select_one(select(UserModel).where(UserModel.id == user_id))

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Find user by email address (case-insensitive)."""
        normalized = email.strip().lower()
        return await self._select_one(
            select(UserModel).where(func.lower(UserModel.email) == normalized)
        )

    async def find_by_username(self, username: str) -> UserRecord | None:
        return await self._select_one(
            select(UserModel).where(UserModel.username == username)
        )

    async def find_by_role(self, role: str) -> list[UserRecord]:
        return await self._select(
            select(UserModel).where(UserModel.roles.any(UserRoleModel.role == role))
        )

    async def find_by_roles(self, roles: Iterable[str]) -> list[UserRecord]:
        wanted = sorted(set(roles))
        if not wanted:
            return []
        return await self._select(
            select(UserModel).where(UserModel.roles.any(UserRoleModel.role.in_(wanted)))
        )

    async def find_all_enabled(self) -> list[UserRecord]:
        return await self._select(select(UserModel).where(UserModel.enabled.is_(True)))

    async def find_all_disabled(self) -> list[UserRecord]:
        return await self._select(select(UserModel).where(UserModel.enabled.is_(False)))

    async def find_all_locked(self) -> list[UserRecord]:
        return await self._select(select(UserModel).where(UserModel.locked.is_(True)))

    async def find_users_created_after(self, moment: datetime) -> list[UserRecord]:
        return await self._select(
            select(UserModel).where(UserModel.created_at > moment.astimezone(UTC))
        )

    async def find_by_attribute(self, key: str, value: Any) -> list[UserRecord]:
        return await self.find_by_attributes({key: value})

    async def find_by_attributes(
        self, attributes: Mapping[str, Any]
    ) -> list[UserRecord]:
        """Find users matching every given attribute.

        JSON operators differ between backends, so matching runs in Python.
        """
        users = await self._select(select(UserModel))
        return [
            user
            for user in users
            if all(
                key in user.attributes and user.attributes[key] == value
                for key, value in attributes.items()
            )
        ]

    async def count(self) -> int:
        return await self._count()

    async def count_by_role(self, role: str) -> int:
        return await self._count(UserModel.roles.any(UserRoleModel.role == role))

    async def count_enabled(self) -> int:
        return await self._count(UserModel.enabled.is_(True))

    async def count_disabled(self) -> int:
        return await self._count(UserModel.enabled.is_(False))

    async def exists_by_email(self, email: str) -> bool:
        return await self._count(
            func.lower(UserModel.email) == email.strip().lower()
        ) > 0

    async def exists_by_username(self, username: str) -> bool:
        return await self._count(UserModel.username == username) > 0

    async def exists_by_id(self, user_id: UUID) -> bool:
        return await self._count(UserModel.id == user_id) > 0

    async def delete_by_id(self, user_id: UUID) -> bool:
        async with self._session() as session:
            model = await session.get(UserModel, user_id)
            if model is None:
                return False
            await session.delete(model)
            await session.flush()
            return True

    async def delete(self, user: UserRecord) -> bool:
        return await self.delete_by_id(user.id)

    async def find_all(self, page: int, size: int) -> list[UserRecord]:
        return await self._select(self._paged(select(UserModel), page, size))

    async def find_by_username_containing(
        self, pattern: str, page: int, size: int
    ) -> list[UserRecord]:
        stmt = select(UserModel).where(
            func.lower(UserModel.username).contains(pattern.lower(), autoescape=True)
        )
        return await self._select(self._paged(stmt, page, size))

    @staticmethod
    def _paged(
        stmt: Select[tuple[UserModel]], page: int, size: int
    ) -> Select[tuple[UserModel]]:
        if page < 0 or size <= 0:
            raise ValueError("page must be >= 0 and size must be > 0")
        return stmt.offset(page * size).limit(size)

    def _to_domain(self, model: UserModel) -> UserRecord:
        """Convert database model to domain record."""
        return UserRecord(
            id=model.id,
            email=model.email,
            username=model.username,
            password_hash=model.password_hash,
            roles=frozenset(row.role for row in model.roles),
            enabled=model.enabled,
            locked=model.locked,
            account_expired=model.account_expired,
            credentials_expired=model.credentials_expired,
            created_at=_aware(model.created_at),
            updated_at=_aware(model.updated_at),
            attributes=dict(model.attributes or {}),
            display_name=model.display_name,
        )

    def _to_model(self, user: UserRecord) -> UserModel:
        """Convert domain record to database model."""
        return UserModel(
            id=user.id,
            email=user.email,
            username=user.username,
            password_hash=user.password_hash,
            enabled=user.enabled,
            locked=user.locked,
            account_expired=user.account_expired,
            credentials_expired=user.credentials_expired,
            attributes=dict(user.attributes),
            display_name=user.display_name,
            created_at=user.created_at,
            updated_at=user.updated_at,
            roles=[UserRoleModel(role=role) for role in sorted(user.roles)],
        )
