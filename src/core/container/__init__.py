"""Container module - Centralized dependency injection.

Re-exports all factory functions from submodules:

    from src.core.container import get_auth_engine, get_logger, ...

The container is organized into modules:
- infrastructure: Core services (logging, hashing, token store, db, email)
- auth: Credential strategies and the AuthEngine
"""

from src.core.container.auth import get_auth_engine, get_strategy_registry
from src.core.container.infrastructure import (
    get_database,
    get_email_sender,
    get_logger,
    get_notification_service,
    get_password_hasher,
    get_token_service,
    get_token_store,
    get_user_repository,
)

__all__ = [
    "get_auth_engine",
    "get_database",
    "get_email_sender",
    "get_logger",
    "get_notification_service",
    "get_password_hasher",
    "get_strategy_registry",
    "get_token_service",
    "get_token_store",
    "get_user_repository",
]


def clear_container_cache() -> None:
    """Reset every cached singleton (settings included)."""
    from src.core.config import get_settings

    for factory in (
        get_auth_engine,
        get_strategy_registry,
        get_notification_service,
        get_email_sender,
        get_token_service,
        get_user_repository,
        get_database,
        get_token_store,
        get_password_hasher,
        get_logger,
        get_settings,
    ):
        factory.cache_clear()
