"""Pytest configuration and shared fixtures.

Environment defaults are set before any application module is imported, so
``src.main`` can build its Settings (JWT_SECRET is required).

Fixtures build the engine from in-process collaborators:
- InMemoryUserRepository / InMemoryTokenStore
- BcryptPasswordHasher with the minimum cost factor (fast)
- AsyncMock notifications and Mock logger
"""

import inspect
import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-at-least-32-bytes-long")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("BCRYPT_ROUNDS", "10")

from collections.abc import Iterable  # noqa: E402
from unittest.mock import AsyncMock, Mock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from src.application.services.auth_engine import AuthEngine  # noqa: E402
from src.application.strategies import (  # noqa: E402
    EmailPasswordStrategy,
    StrategyRegistry,
    UsernamePasswordStrategy,
)
from src.domain.entities.user import UserRecord  # noqa: E402
from src.domain.factories.user_factory import UserFactory  # noqa: E402
from src.domain.value_objects import Email, Password  # noqa: E402
from src.infrastructure.cache.in_memory_token_store import (  # noqa: E402
    InMemoryTokenStore,
)
from src.infrastructure.persistence.repositories import (  # noqa: E402
    InMemoryUserRepository,
)
from src.infrastructure.security.bcrypt_password_hasher import (  # noqa: E402
    BcryptPasswordHasher,
)
from src.infrastructure.security.jwt_token_service import (  # noqa: E402
    JwtTokenService,
)

TEST_SECRET = os.environ["JWT_SECRET"]
TEST_PASSWORD = "P@ssw0rd!"


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with in-process doubles")
    config.addinivalue_line(
        "markers", "integration: Integration tests with Redis/SQL backends"
    )
    config.addinivalue_line("markers", "api: HTTP API tests via TestClient")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)


# =============================================================================
# Collaborators
# =============================================================================


@pytest.fixture
def password_hasher():
    return BcryptPasswordHasher(cost_factor=10)


@pytest.fixture
def token_store():
    return InMemoryTokenStore()


@pytest.fixture
def token_service(token_store):
    return JwtTokenService(secret_key=TEST_SECRET, token_store=token_store)


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def user_factory():
    return UserFactory()


@pytest.fixture
def notifications():
    """Notification double; every send_* method is an AsyncMock."""
    return AsyncMock()


@pytest.fixture
def logger():
    return Mock()


@pytest.fixture
def strategies(user_repo, password_hasher):
    return StrategyRegistry(
        [
            UsernamePasswordStrategy(user_repo, password_hasher),
            EmailPasswordStrategy(user_repo, password_hasher),
        ]
    )


@pytest_asyncio.fixture
async def engine(
    user_repo, password_hasher, token_service, strategies, notifications, logger
):
    """AuthEngine over in-process collaborators; drains background tasks."""
    auth_engine = AuthEngine(
        user_repo=user_repo,
        password_hasher=password_hasher,
        token_service=token_service,
        strategies=strategies,
        notifications=notifications,
        logger=logger,
        default_roles=["user"],
        operation_timeout=2.0,
    )
    yield auth_engine
    await auth_engine.wait_for_background_tasks()


# =============================================================================
# Users
# =============================================================================


@pytest.fixture
def make_user(user_factory, password_hasher):
    """Build a UserRecord with a real bcrypt hash (not persisted)."""

    def _make(
        email: str = "alice@example.com",
        username: str = "alice",
        password: str = TEST_PASSWORD,
        roles: Iterable[str] = ("user",),
        **attributes,
    ) -> UserRecord:
        return user_factory.create_user(
            email=Email.of(email),
            username=username,
            password=Password.from_encoded(password_hasher.encode(password)),
            roles=roles,
            attributes=attributes or None,
        )

    return _make


@pytest_asyncio.fixture
async def saved_user(user_repo, make_user):
    """alice / alice@example.com / P@ssw0rd!, stored in user_repo."""
    return await user_repo.save(make_user())
