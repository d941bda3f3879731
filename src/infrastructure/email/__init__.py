"""Email notification implementations.

This package contains:
- EmailNotificationService: NotificationProtocol over an email transport
- StubEmailSender: Transport that logs instead of sending (dev/test)
"""

from src.infrastructure.email.email_notification_service import (
    EmailNotificationService,
)
from src.infrastructure.email.stub_email_sender import StubEmailSender

__all__ = [
    "EmailNotificationService",
    "StubEmailSender",
]
