"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console/JSON)
- Password hashing (bcrypt)
- Token store (Redis, or in-process when no Redis URL is configured)
- Database (SQLAlchemy async engine, only when a database URL is configured)
- User repository (SQLAlchemy or in-process)
- Token service (JWT)
- Email transport and notifications

Every factory is cached with ``lru_cache``; tests override them through
``app.dependency_overrides`` or call ``cache_clear()``.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.core.enums import Environment

if TYPE_CHECKING:
    from src.domain.protocols import (
        EmailSenderProtocol,
        LoggerProtocol,
        NotificationProtocol,
        PasswordHasherProtocol,
        TokenServiceProtocol,
        TokenStoreProtocol,
        UserRepository,
    )
    from src.infrastructure.persistence.database import Database


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: ConsoleAdapter (human-readable)
    - testing/ci/production, or LOG_JSON=true: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    use_json = settings.log_json or settings.environment != Environment.DEVELOPMENT
    return ConsoleAdapter(use_json=use_json, level=settings.log_level)


@lru_cache()
def get_password_hasher() -> "PasswordHasherProtocol":
    """Get bcrypt password hasher singleton (cost from BCRYPT_ROUNDS)."""
    from src.infrastructure.security.bcrypt_password_hasher import (
        BcryptPasswordHasher,
    )

    return BcryptPasswordHasher(cost_factor=get_settings().bcrypt_rounds)


@lru_cache()
def get_token_store() -> "TokenStoreProtocol":
    """Get token store singleton (app-scoped).

    Returns RedisTokenStore with connection pooling when REDIS_URL is set,
    InMemoryTokenStore otherwise.

    Usage:
        # Application Layer (direct use)
        store = get_token_store()
        await store.set("key", "value", ttl=60)
    """
    settings = get_settings()
    if not settings.redis_url:
        from src.infrastructure.cache.in_memory_token_store import InMemoryTokenStore

        return InMemoryTokenStore()

    from redis.asyncio import ConnectionPool, Redis

    from src.infrastructure.cache.redis_token_store import RedisTokenStore

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        socket_keepalive=True,
    )
    return RedisTokenStore(redis_client=Redis(connection_pool=pool))


@lru_cache()
def get_database() -> "Database | None":
    """Get database manager singleton, or None when DATABASE_URL is unset."""
    settings = get_settings()
    if not settings.database_url:
        return None

    from src.infrastructure.persistence.database import Database

    return Database(database_url=settings.database_url, echo=settings.db_echo)


@lru_cache()
def get_user_repository() -> "UserRepository":
    """Get user repository singleton.

    SqlAlchemyUserRepository over get_database() when a database URL is
    configured, InMemoryUserRepository otherwise.
    """
    database = get_database()
    if database is None:
        from src.infrastructure.persistence.repositories import (
            InMemoryUserRepository,
        )

        return InMemoryUserRepository()

    from src.infrastructure.persistence.repositories import SqlAlchemyUserRepository

    return SqlAlchemyUserRepository(database)


@lru_cache()
def get_token_service() -> "TokenServiceProtocol":
    """Get JWT token service singleton (app-scoped).

    Usage:
        # Presentation Layer (FastAPI Depends)
        token_service: TokenServiceProtocol = Depends(get_token_service)
    """
    from src.infrastructure.security.jwt_token_service import JwtTokenService

    settings = get_settings()
    return JwtTokenService(
        secret_key=settings.jwt_secret,
        token_store=get_token_store(),
        access_token_ttl=settings.access_token_validity_seconds,
        refresh_token_ttl=settings.refresh_token_validity_seconds,
        token_type=settings.token_type,
        algorithm=settings.jwt_algorithm,
    )


@lru_cache()
def get_email_sender() -> "EmailSenderProtocol":
    """Get email transport singleton (StubEmailSender logs instead of sending)."""
    from src.infrastructure.email.stub_email_sender import StubEmailSender

    return StubEmailSender(logger=get_logger())


@lru_cache()
def get_notification_service() -> "NotificationProtocol":
    """Get email notification service singleton (no-op when disabled)."""
    from src.infrastructure.email.email_notification_service import (
        EmailNotificationService,
    )

    return EmailNotificationService(
        sender=get_email_sender(),
        settings=get_settings(),
        logger=get_logger(),
    )
