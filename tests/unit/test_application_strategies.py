"""Unit tests for credential strategies and the strategy registry."""

import statistics
import time
from unittest.mock import Mock

import pytest

from src.application.strategies import (
    EmailPasswordStrategy,
    StrategyRegistry,
    UsernamePasswordStrategy,
)
from src.domain.enums import CredentialType
from src.domain.value_objects import (
    EmailPasswordCredentials,
    UsernamePasswordCredentials,
)
from tests.conftest import TEST_PASSWORD


@pytest.fixture
def username_strategy(user_repo, password_hasher):
    return UsernamePasswordStrategy(user_repo, password_hasher)


@pytest.fixture
def email_strategy(user_repo, password_hasher):
    return EmailPasswordStrategy(user_repo, password_hasher)


@pytest.mark.unit
class TestUsernamePasswordStrategy:
    def test_prepare_trims_username(self, username_strategy):
        prepared = username_strategy.prepare(
            UsernamePasswordCredentials(username="  alice ", password=" pw ")
        )

        assert prepared.username == "alice"
        assert prepared.password == " pw "

    @pytest.mark.parametrize(
        ("username", "password", "valid"),
        [("alice", "pw", True), ("", "pw", False), ("alice", "   ", False)],
    )
    def test_validate_format(self, username_strategy, username, password, valid):
        credentials = UsernamePasswordCredentials(username=username, password=password)

        assert username_strategy.validate_format(credentials) is valid

    def test_rejects_other_variant(self, username_strategy):
        credentials = EmailPasswordCredentials(email="a@example.com", password="pw")

        assert not username_strategy.validate_format(credentials)

    async def test_authenticate_by_username(self, username_strategy, saved_user):
        user = await username_strategy.authenticate(
            UsernamePasswordCredentials(username="alice", password=TEST_PASSWORD)
        )

        assert user == saved_user

    async def test_falls_back_to_email(self, username_strategy, saved_user):
        user = await username_strategy.authenticate(
            UsernamePasswordCredentials(
                username="Alice@Example.com", password=TEST_PASSWORD
            )
        )

        assert user == saved_user

    async def test_username_wins_over_email(
        self, username_strategy, user_repo, make_user, saved_user
    ):
        # A second user whose username looks like alice's email
        mallory = await user_repo.save(
            make_user(
                email="mallory@example.com",
                username="alice@example.com",
                password="M@llory123",
            )
        )

        resolved = await username_strategy.authenticate(
            UsernamePasswordCredentials(
                username="alice@example.com", password="M@llory123"
            )
        )
        wrong = await username_strategy.authenticate(
            UsernamePasswordCredentials(
                username="alice@example.com", password=TEST_PASSWORD
            )
        )

        assert resolved == mallory
        assert wrong is None

    @pytest.mark.parametrize(
        ("username", "password"),
        [("alice", "Wr0ng-pass"), ("nobody", TEST_PASSWORD)],
    )
    async def test_wrong_credentials(
        self, username_strategy, saved_user, username, password
    ):
        credentials = UsernamePasswordCredentials(username=username, password=password)

        assert await username_strategy.authenticate(credentials) is None


@pytest.mark.unit
class TestEmailPasswordStrategy:
    def test_prepare_normalizes_email(self, email_strategy):
        prepared = email_strategy.prepare(
            EmailPasswordCredentials(email=" Alice@Example.COM ", password="pw")
        )

        assert prepared.email == "alice@example.com"

    @pytest.mark.parametrize(
        ("email", "valid"), [("alice@example.com", True), ("not-an-email", False)]
    )
    def test_validate_format(self, email_strategy, email, valid):
        credentials = EmailPasswordCredentials(email=email, password="pw")

        assert email_strategy.validate_format(credentials) is valid

    async def test_authenticate(self, email_strategy, saved_user):
        credentials = email_strategy.prepare(
            EmailPasswordCredentials(email="ALICE@example.com", password=TEST_PASSWORD)
        )

        assert await email_strategy.authenticate(credentials) == saved_user

    async def test_unknown_email(self, email_strategy, saved_user):
        credentials = EmailPasswordCredentials(
            email="nobody@example.com", password=TEST_PASSWORD
        )

        assert await email_strategy.authenticate(credentials) is None


@pytest.mark.unit
class TestStrategyRegistry:
    def test_resolve_by_credential_type(self, username_strategy, email_strategy):
        registry = StrategyRegistry([username_strategy, email_strategy])

        assert registry.resolve(CredentialType.USERNAME_PASSWORD) is username_strategy
        assert registry.resolve(CredentialType.EMAIL_PASSWORD) is email_strategy
        assert len(registry) == 2

    def test_disabled_strategy_is_skipped(self, user_repo, password_hasher):
        disabled = EmailPasswordStrategy(user_repo, password_hasher, enabled=False)
        registry = StrategyRegistry([disabled])

        assert registry.resolve(CredentialType.EMAIL_PASSWORD) is None

    def test_first_registered_wins(self, user_repo, password_hasher):
        first = EmailPasswordStrategy(user_repo, password_hasher)
        second = EmailPasswordStrategy(user_repo, password_hasher)
        registry = StrategyRegistry()
        registry.register(first)
        registry.register(second)

        assert registry.resolve(CredentialType.EMAIL_PASSWORD) is first
        assert list(registry) == [first, second]


@pytest.mark.unit
class TestTimingEqualization:
    async def test_unknown_user_still_costs_one_verification(
        self, user_repo, password_hasher, saved_user
    ):
        hasher = Mock(wraps=password_hasher)
        strategy = UsernamePasswordStrategy(user_repo, hasher)

        await strategy.authenticate(
            UsernamePasswordCredentials(username="nobody", password=TEST_PASSWORD)
        )
        await strategy.authenticate(
            UsernamePasswordCredentials(username="alice", password="Wr0ng-pass!")
        )

        assert hasher.matches.call_count == 2

    async def test_unknown_user_median_time_close_to_wrong_password(
        self, username_strategy, saved_user
    ):
        unknown = UsernamePasswordCredentials(username="nobody", password=TEST_PASSWORD)
        wrong = UsernamePasswordCredentials(username="alice", password="Wr0ng-pass!")

        async def median_seconds(credentials, runs=5):
            samples = []
            for _ in range(runs):
                started = time.perf_counter()
                assert await username_strategy.authenticate(credentials) is None
                samples.append(time.perf_counter() - started)
            return statistics.median(samples)

        # Warm-up builds the dummy hash once
        await username_strategy.authenticate(unknown)

        unknown_median = await median_seconds(unknown)
        wrong_median = await median_seconds(wrong)

        assert unknown_median <= 2 * wrong_median
        assert wrong_median <= 2 * unknown_median
