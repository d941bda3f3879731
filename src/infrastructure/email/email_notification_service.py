"""Email notification service implementing NotificationProtocol.

Renders the configured subject/text templates and hands the result to an
EmailSenderProtocol transport. When notifications are disabled every
method is a no-op.

Placeholders are replaced verbatim (no escaping, no formatting language):
    {displayName}, {username}, {email}, {ipAddress}, {userAgent},
    {alertType}, {details}, {status}, {temporaryPassword}
"""

from src.core.config import Settings
from src.domain.entities.user import UserRecord
from src.domain.protocols.email_protocol import EmailSenderProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol

UNKNOWN = "Unknown"


def render(template: str, values: dict[str, str]) -> str:
    """Replace ``{name}`` placeholders with values.

    Args:
        template: Template text.
        values: Placeholder name -> replacement.

    Returns:
        str: Rendered text. Unknown placeholders are left as-is.
    """
    for name, value in values.items():
        template = template.replace("{" + name + "}", value)
    return template


class EmailNotificationService:
    """Template-based email notifications.

    Note: Does NOT inherit from NotificationProtocol (uses structural typing).

    Args:
        sender: Email transport.
        settings: Provides the enable flag, from-address and templates.
        logger: Structured logger.
    """

    def __init__(
        self,
        sender: EmailSenderProtocol,
        settings: Settings,
        logger: LoggerProtocol,
    ) -> None:
        self._sender = sender
        self._settings = settings
        self._logger = logger.bind(component="email_notifications")

    @property
    def enabled(self) -> bool:
        return self._settings.notification_email_enabled

    async def send_welcome(self, user: UserRecord) -> None:
        await self._send("welcome", user)

    async def send_password_change(self, user: UserRecord) -> None:
        await self._send("password-change", user)

    async def send_password_reset(
        self, user: UserRecord, temporary_password: str
    ) -> None:
        await self._send("password-reset", user, temporaryPassword=temporary_password)

    async def send_account_status(self, user: UserRecord, status: str) -> None:
        await self._send("account-status", user, status=status)

    async def send_login(
        self,
        user: UserRecord,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        await self._send(
            "login",
            user,
            ipAddress=ip_address or UNKNOWN,
            userAgent=user_agent or UNKNOWN,
        )

    async def send_security_alert(
        self, user: UserRecord, alert_type: str, details: str
    ) -> None:
        await self._send("security-alert", user, alertType=alert_type, details=details)

    async def _send(self, template: str, user: UserRecord, **extra: str) -> None:
        if not self.enabled:
            return

        subject, text = self._settings.email_template(template)
        values = {
            "displayName": user.get_display_name(),
            "username": user.username,
            "email": user.email,
            **extra,
        }

        await self._sender.send(
            to_email=user.email,
            subject=render(subject, values),
            body=render(text, values),
            from_email=self._settings.notification_email_from,
        )
        self._logger.info(
            "Notification email sent",
            template=template,
            user_id=str(user.id),
        )
