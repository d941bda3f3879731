"""User database models.

Tables:
    users: One row per account (email and username unique)
    user_roles: Role tokens per user (composite primary key)

Security:
    - password_hash: NEVER stores plaintext passwords (bcrypt hashed)
"""

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.persistence.base import Base, BaseMutableModel


class UserModel(BaseMutableModel):
    """User account row.

    Fields:
        id, created_at, updated_at: From BaseMutableModel
        email: Unique lowercased email address
        username: Unique username (case-sensitive)
        password_hash: Encoded password
        enabled / locked / account_expired / credentials_expired: Status flags
        attributes: JSON object of free-form metadata
        display_name: Optional display name
        roles: UserRoleModel rows (loaded eagerly with selectin)
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address (unique, lowercase)",
    )
    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Username (unique, trimmed)",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    account_expired: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    credentials_expired: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    attributes: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    roles: Mapped[list["UserRoleModel"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<UserModel(id={self.id}, email={self.email!r}, "
            f"username={self.username!r}, enabled={self.enabled})>"
        )


class UserRoleModel(Base):
    """Role token held by a user."""

    __tablename__ = "user_roles"

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)

    user: Mapped[UserModel] = relationship(back_populates="roles")
