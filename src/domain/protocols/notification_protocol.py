"""Notification protocol (port).

Best-effort delivery of user-facing messages. Callers never let a
notification failure change the outcome of an authentication flow.
"""

from typing import Protocol

from src.domain.entities.user import UserRecord


class NotificationProtocol(Protocol):
    """User notification interface.

    Implementations:
        - EmailNotificationService: renders email templates and hands them
          to an EmailSenderProtocol
    """

    async def send_welcome(self, user: UserRecord) -> None:
        ...

    async def send_password_change(self, user: UserRecord) -> None:
        ...

    async def send_password_reset(
        self, user: UserRecord, temporary_password: str
    ) -> None:
        ...

    async def send_account_status(self, user: UserRecord, status: str) -> None:
        ...

    async def send_login(
        self,
        user: UserRecord,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        ...

    async def send_security_alert(
        self, user: UserRecord, alert_type: str, details: str
    ) -> None:
        ...
