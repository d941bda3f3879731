"""LoggerProtocol - structured logging port used by the engine and adapters.

Calls carry a short message plus key-value context. Secrets (passwords,
tokens, password hashes) are never passed as context; the console adapter
redacts known secret keys as a second line of defence.

Usage:
    from src.core.container import get_logger

    logger = get_logger().bind(component="auth_engine")
    logger.info("User registered", user_id=str(user.id))
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Structured logger with context binding."""

    def debug(self, message: str, /, **context: Any) -> None: ...

    def info(self, message: str, /, **context: Any) -> None: ...

    def warning(self, message: str, /, **context: Any) -> None: ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a failure.

        Args:
            message: Human-readable message (no f-strings; use context).
            error: Optional exception; adapters add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None: ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with ``context`` attached to every call.

        The receiver is left unchanged.
        """
        ...
