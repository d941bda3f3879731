"""EmailSenderProtocol - Port for email transport implementations.

Infrastructure layer provides concrete implementations (StubEmailSender).
"""

from typing import Protocol


class EmailSenderProtocol(Protocol):
    """Email transport protocol (port).

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.

    Example Implementation:
        >>> class StubEmailSender:
        ...     async def send(self, *, to_email, subject, body, from_email):
        ...         print(f"[STUB] {subject} -> {to_email}")
    """

    async def send(
        self,
        *,
        to_email: str,
        subject: str,
        body: str,
        from_email: str,
    ) -> None:
        """Send a plain-text email.

        Args:
            to_email: Recipient address.
            subject: Subject line.
            body: Plain-text body.
            from_email: Sender address.
        """
        ...
