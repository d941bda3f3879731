"""UserFactory - constructors and mutators for UserRecord.

Every operation returns a new record; the input is never modified. Mutators
preserve ``id`` and ``created_at`` and advance ``updated_at``.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from src.domain.entities.user import UserRecord
from src.domain.errors import InvalidPasswordError
from src.domain.value_objects import Email, Password, UserId


def _utc_now() -> datetime:
    return datetime.now(UTC)


class UserFactory:
    """Pure factory for user records.

    Args:
        clock: Returns the current time (UTC). Injectable for tests.

    Example:
        >>> factory = UserFactory()
        >>> user = factory.create_user(
        ...     email=Email.of("alice@example.com"),
        ...     username="alice",
        ...     password=Password.from_encoded(hash_),
        ...     roles=["user"],
        ... )
        >>> locked = factory.lock_user(user)
        >>> locked.locked, user.locked
        (True, False)
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    def create_user(
        self,
        *,
        email: Email,
        username: str,
        password: Password,
        roles: Iterable[str] = (),
        attributes: Mapping[str, Any] | None = None,
        display_name: str | None = None,
        user_id: UUID | None = None,
    ) -> UserRecord:
        """Create a new enabled user record.

        Args:
            email: Validated email.
            username: Username (trimmed; must be non-blank).
            password: Encoded password (``Password.from_encoded``).
            roles: Role tokens.
            attributes: Initial attributes.
            display_name: Optional display name.
            user_id: Identifier to use (generated when omitted).

        Returns:
            UserRecord: New record with created_at == updated_at.

        Raises:
            ValueError: If username is blank.
            InvalidPasswordError: If password is not an encoded hash.
        """
        if username is None or not username.strip():
            raise ValueError("Username cannot be empty")
        self._require_encoded(password)

        now = self._clock()
        return UserRecord(
            id=user_id or UserId.generate().value,
            email=email.value,
            username=username.strip(),
            password_hash=password.value,
            roles=frozenset(role for role in roles if role),
            created_at=now,
            updated_at=now,
            attributes=dict(attributes or {}),
            display_name=display_name,
        )

    def update_password(self, user: UserRecord, password: Password) -> UserRecord:
        """Replace the password hash.

        Raises:
            InvalidPasswordError: If password is not an encoded hash.
        """
        self._require_encoded(password)
        return self._touch(user, password_hash=password.value)

    def enable_user(self, user: UserRecord) -> UserRecord:
        return self._touch(user, enabled=True)

    def disable_user(self, user: UserRecord) -> UserRecord:
        return self._touch(user, enabled=False)

    def lock_user(self, user: UserRecord) -> UserRecord:
        return self._touch(user, locked=True)

    def unlock_user(self, user: UserRecord) -> UserRecord:
        return self._touch(user, locked=False)

    def expire_account(self, user: UserRecord) -> UserRecord:
        return self._touch(user, account_expired=True)

    def expire_credentials(self, user: UserRecord) -> UserRecord:
        return self._touch(user, credentials_expired=True)

    def add_role(self, user: UserRecord, role: str) -> UserRecord:
        return self._touch(user, roles=user.roles | {role})

    def remove_role(self, user: UserRecord, role: str) -> UserRecord:
        return self._touch(user, roles=user.roles - {role})

    def add_attribute(self, user: UserRecord, key: str, value: Any) -> UserRecord:
        return self._touch(user, attributes={**user.attributes, key: value})

    def remove_attribute(self, user: UserRecord, key: str) -> UserRecord:
        attributes = {k: v for k, v in user.attributes.items() if k != key}
        return self._touch(user, attributes=attributes)

    def update_attributes(
        self, user: UserRecord, attributes: Mapping[str, Any]
    ) -> UserRecord:
        """Merge attributes into the record (new keys win)."""
        return self._touch(user, attributes={**user.attributes, **attributes})

    def update_display_name(
        self, user: UserRecord, display_name: str | None
    ) -> UserRecord:
        return self._touch(user, display_name=display_name)

    @staticmethod
    def get_attribute(user: UserRecord, key: str, default: Any = None) -> Any:
        return user.get_attribute(key, default)

    def _touch(self, user: UserRecord, **changes: Any) -> UserRecord:
        # updated_at strictly increases, even if the clock stalls or goes back
        updated_at = self._clock()
        if updated_at <= user.updated_at:
            updated_at = user.updated_at + timedelta(microseconds=1)
        return replace(user, updated_at=updated_at, **changes)

    @staticmethod
    def _require_encoded(password: Password) -> None:
        if not password.is_encoded():
            raise InvalidPasswordError("Password must be encoded before storage")
