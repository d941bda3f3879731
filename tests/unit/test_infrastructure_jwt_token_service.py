"""Unit tests for JwtTokenService over the in-memory token store."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import jwt
import pytest
from freezegun import freeze_time

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.errors import TransientStorageError
from src.infrastructure.errors import CacheError
from src.infrastructure.security.jwt_token_service import (
    JwtTokenService,
    revoked_key,
    user_index_key,
)
from tests.conftest import TEST_SECRET


@pytest.fixture
def user(make_user):
    return make_user(roles=("user", "admin"))


@pytest.mark.unit
class TestConstruction:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"secret_key": "too-short"},
            {"secret_key": TEST_SECRET, "access_token_ttl": 0},
            {"secret_key": TEST_SECRET, "refresh_token_ttl": -1},
            {"secret_key": TEST_SECRET, "algorithm": "RS256"},
        ],
    )
    def test_rejects_bad_configuration(self, token_store, kwargs):
        with pytest.raises(ValueError):
            JwtTokenService(token_store=token_store, **kwargs)


@pytest.mark.unit
class TestAccessTokens:
    def test_claims(self, token_service, user):
        token = token_service.generate_access_token(user)
        payload = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])

        assert payload["sub"] == str(user.id)
        assert payload["typ"] == "access"
        assert payload["roles"] == ["admin", "user"]
        assert payload["exp"] - payload["iat"] == 900
        assert payload["jti"]

    def test_extractors(self, token_service, user):
        token = token_service.generate_access_token(user)

        assert token_service.extract_user_id(token) == user.id
        assert token_service.extract_username(token) == "alice"
        assert token_service.extract_roles(token) == frozenset({"user", "admin"})
        assert token_service.get_expiration_time(token) > datetime.now(UTC)
        assert token_service.get_issue_time(token) <= datetime.now(UTC)

    def test_tokens_minted_together_differ(self, token_service, user):
        assert token_service.generate_access_token(
            user
        ) != token_service.generate_access_token(user)

    def test_extra_claims_never_override_standard_claims(self, token_service, user):
        token = token_service.generate_access_token(
            user, extra_claims={"sub": "someone-else", "tenant": "acme"}
        )

        assert token_service.extract_user_id(token) == user.id
        assert token_service.extract_claim(token, "tenant") == "acme"

    async def test_expired_token(self, token_service, user):
        token = token_service.generate_access_token(user, ttl=-10)

        assert token_service.is_token_valid(token)
        assert token_service.is_token_signature_valid(token)
        assert not await token_service.is_token_valid_and_not_expired(token)
        assert token_service.extract_username(token) == "alice"

    async def test_access_token_expires_after_ttl(self, token_service, user):
        with freeze_time("2026-01-01 00:00:00") as frozen:
            token = token_service.generate_access_token(user)

            assert token_service.get_expiration_time(token) == datetime(
                2026, 1, 1, 0, 15, tzinfo=UTC
            )
            assert await token_service.is_token_valid_and_not_expired(token)

            frozen.tick(timedelta(seconds=901))

            assert not await token_service.is_token_valid_and_not_expired(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    async def test_garbage_tokens(self, token_service, token):
        assert not token_service.is_token_valid(token)
        assert not token_service.is_token_signature_valid(token)
        assert not await token_service.is_token_valid_and_not_expired(token)
        assert token_service.extract_user_id(token) is None
        assert token_service.extract_roles(token) is None

    def test_foreign_signature_rejected(self, token_service, token_store, user):
        other = JwtTokenService(
            secret_key="another-secret-key-that-is-32-bytes-or-more",
            token_store=token_store,
        )
        token = other.generate_access_token(user)

        assert not token_service.is_token_signature_valid(token)
        assert token_service.extract_user_id(token) is None


@pytest.mark.unit
class TestRefreshTokens:
    async def test_refresh_token_is_indexed(self, token_service, token_store, user):
        token = await token_service.generate_refresh_token(user)

        assert await token_store.exists(user_index_key(user.id, token)) == Success(
            value=True
        )
        assert token_service.extract_claim(token, "typ") == "refresh"
        assert await token_service.is_token_valid_and_not_expired(token)

    async def test_refresh_access_token_copies_claims(self, token_service, user):
        refresh = await token_service.generate_refresh_token(user)

        access = await token_service.refresh_access_token(refresh)

        assert access is not None
        assert token_service.extract_claim(access, "typ") == "access"
        assert token_service.extract_user_id(access) == user.id
        assert token_service.extract_username(access) == "alice"
        assert token_service.extract_roles(access) == frozenset({"user", "admin"})

    async def test_access_token_cannot_refresh(self, token_service, user):
        access = token_service.generate_access_token(user)

        assert await token_service.refresh_access_token(access) is None

    async def test_expired_refresh_token_cannot_refresh(self, token_service, user):
        refresh = await token_service.generate_refresh_token(user, ttl=-5)

        assert await token_service.refresh_access_token(refresh) is None

    async def test_unindexed_refresh_token_cannot_refresh(
        self, token_service, token_store, user
    ):
        refresh = await token_service.generate_refresh_token(user)
        await token_store.delete(user_index_key(user.id, refresh))

        assert await token_service.refresh_access_token(refresh) is None

    async def test_revoke_single_token(self, token_service, token_store, user):
        refresh = await token_service.generate_refresh_token(user)
        other = await token_service.generate_refresh_token(user)

        await token_service.revoke_refresh_token(refresh)
        await token_service.revoke_refresh_token(refresh)

        assert await token_service.is_refresh_token_revoked(refresh)
        assert not await token_service.is_refresh_token_revoked(other)
        assert await token_service.refresh_access_token(refresh) is None
        assert await token_service.refresh_access_token(other) is not None
        marker_ttl = (await token_store.ttl(revoked_key(refresh))).value
        assert 0 < marker_ttl <= token_service.refresh_token_ttl

    async def test_revoke_all_tokens_for_user(self, token_service, make_user, user):
        bob = make_user(email="bob@example.com", username="bob")
        tokens = [await token_service.generate_refresh_token(user) for _ in range(3)]
        bobs = await token_service.generate_refresh_token(bob)

        await token_service.revoke_all_tokens_for_user(user.id)

        for token in tokens:
            assert await token_service.is_refresh_token_revoked(token)
            assert not await token_service.is_token_valid_and_not_expired(token)
        assert not await token_service.is_refresh_token_revoked(bobs)

    async def test_revoke_all_is_idempotent(self, token_service, token_store, user):
        await token_service.generate_refresh_token(user)
        await token_service.revoke_all_tokens_for_user(user.id)
        entries = len(token_store)

        await token_service.revoke_all_tokens_for_user(user.id)

        assert len(token_store) == entries


@pytest.mark.unit
class TestStoreFailures:
    @pytest.fixture
    def failing_store(self):
        failure = Failure(
            error=CacheError(code=ErrorCode.TRANSIENT_STORAGE, message="down")
        )
        store = AsyncMock()
        for method in ("get", "set", "delete", "exists", "ttl", "scan_prefix", "apply_batch"):
            getattr(store, method).return_value = failure
        return store

    @pytest.fixture
    def service(self, failing_store):
        return JwtTokenService(secret_key=TEST_SECRET, token_store=failing_store)

    async def test_issue_raises_transient_storage(self, service, user):
        with pytest.raises(TransientStorageError, match="down"):
            await service.generate_refresh_token(user)

    async def test_revocation_lookup_raises_transient_storage(self, service, user):
        token = service.generate_access_token(user)

        with pytest.raises(TransientStorageError):
            await service.is_refresh_token_revoked(token)

    async def test_revoke_all_raises_transient_storage(self, service, user):
        with pytest.raises(TransientStorageError):
            await service.revoke_all_tokens_for_user(user.id)
