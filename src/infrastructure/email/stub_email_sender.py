"""Stub email transport for development and testing.

Logs the envelope instead of delivering mail. The body is never logged
because it may contain a temporary password.
"""

from src.domain.protocols.logger_protocol import LoggerProtocol


class StubEmailSender:
    """EmailSenderProtocol implementation that only logs (nothing is retained)."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger.bind(component="stub_email_sender")

    async def send(
        self,
        *,
        to_email: str,
        subject: str,
        body: str,
        from_email: str,
    ) -> None:
        self._logger.info(
            "Email (stub, not delivered)",
            to_email=to_email,
            from_email=from_email,
            subject=subject,
        )
