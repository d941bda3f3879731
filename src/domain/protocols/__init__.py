"""Domain protocols (ports).

Protocols define what the domain and application layers need from the
outside world. Infrastructure adapters implement them structurally (no
inheritance).

Usage:
    from src.domain.protocols import TokenServiceProtocol, UserRepository
"""

from src.domain.protocols.credential_strategy_protocol import (
    CredentialStrategyProtocol,
)
from src.domain.protocols.email_protocol import EmailSenderProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_protocol import NotificationProtocol
from src.domain.protocols.password_hashing_protocol import PasswordHasherProtocol
from src.domain.protocols.token_service_protocol import TokenServiceProtocol
from src.domain.protocols.token_store_protocol import TokenStoreProtocol
from src.domain.protocols.user_repository import UserRepository

__all__ = [
    "CredentialStrategyProtocol",
    "EmailSenderProtocol",
    "LoggerProtocol",
    "NotificationProtocol",
    "PasswordHasherProtocol",
    "TokenServiceProtocol",
    "TokenStoreProtocol",
    "UserRepository",
]
