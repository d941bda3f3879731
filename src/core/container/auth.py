"""Authentication dependency factories.

Wires credential strategies and the AuthEngine from infrastructure
singletons.
"""

from functools import lru_cache

from src.application.services.auth_engine import AuthEngine
from src.application.strategies import (
    EmailPasswordStrategy,
    StrategyRegistry,
    UsernamePasswordStrategy,
)
from src.core.config import get_settings
from src.core.container.infrastructure import (
    get_logger,
    get_notification_service,
    get_password_hasher,
    get_token_service,
    get_user_repository,
)


@lru_cache()
def get_strategy_registry() -> StrategyRegistry:
    """Username+password first, then email+password."""
    user_repo = get_user_repository()
    hasher = get_password_hasher()
    return StrategyRegistry(
        [
            UsernamePasswordStrategy(user_repo, hasher),
            EmailPasswordStrategy(user_repo, hasher),
        ]
    )


@lru_cache()
def get_auth_engine() -> AuthEngine:
    """Get AuthEngine singleton.

    Usage:
        # Presentation Layer (FastAPI Depends)
        engine: AuthEngine = Depends(get_auth_engine)
    """
    settings = get_settings()
    return AuthEngine(
        user_repo=get_user_repository(),
        password_hasher=get_password_hasher(),
        token_service=get_token_service(),
        strategies=get_strategy_registry(),
        notifications=get_notification_service(),
        logger=get_logger(),
        default_roles=settings.default_role_list,
        operation_timeout=settings.operation_timeout_seconds,
    )
