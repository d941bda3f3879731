"""Declarative base and mixins for all database models.

This module provides:
- Base: Declarative root (owns the metadata)
- BaseModel: Base class for entity tables (provides id, created_at)
- BaseMutableModel: Base for mutable entity tables (adds updated_at)

Following hexagonal architecture:
- This is an infrastructure concern (database implementation detail)
- Domain records (UserRecord) do not inherit from these classes
- Repositories map between models and domain records

Note: SQLAlchemy's generic Uuid type keeps models portable across
PostgreSQL and SQLite.
"""

from datetime import datetime
from uuid import UUID as PythonUUID

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid_extensions import uuid7


class Base(DeclarativeBase):
    """Declarative root shared by every table (including association tables)."""


class BaseModel(Base):
    """Base class for entity tables.

    Provides:
        - id: UUID primary key (time-ordered UUIDv7 when not supplied)
        - created_at: Timestamp when record was created (UTC)
    """

    __abstract__ = True

    id: Mapped[PythonUUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid7,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class BaseMutableModel(BaseModel):
    """Base class for mutable entity tables.

    Adds updated_at. Repositories set it explicitly from the domain record;
    the server default only applies to rows written outside the repositories.
    """

    __abstract__ = True

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
