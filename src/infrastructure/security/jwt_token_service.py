"""JWT token service (adapter).

Implements TokenServiceProtocol using PyJWT (HMAC-SHA2) and a token store for
refresh-token indexing and revocation.

Architecture:
    - Implements TokenServiceProtocol (no inheritance required)
    - Structural typing via Protocol
    - Injected via dependency container

Security:
    - HMAC-SHA256 (HS256) by default, HS384/HS512 allowed
    - 256-bit secret key minimum
    - Unique JWT ID (jti) per token, so two tokens minted in the same second
      never collide in the store

Token store keys:
    user:<user-id>:<refresh-token>  live refresh tokens of a user
    revoked:<refresh-token>         revocation marker (TTL = remaining lifetime)

Concurrency:
    Issue and revoke operations for the same user are serialized by a
    per-user lock; revoke-all is applied as one atomic store batch.
"""

import asyncio
import math
import weakref
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError
from uuid_extensions import uuid7

from src.core.result import Failure, Result
from src.domain.entities.user import UserRecord
from src.domain.errors import TransientStorageError
from src.domain.protocols.token_store_protocol import TokenStoreProtocol
from src.domain.value_objects import UserId

T = TypeVar("T")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

REVOKED_PREFIX = "revoked:"
USER_INDEX_PREFIX = "user:"

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")

# Claims that are regenerated on every mint and never copied on refresh
_MINTED_CLAIMS = frozenset({"sub", "typ", "iat", "exp", "nbf", "jti"})
_REQUIRED_CLAIMS = ["sub", "iat", "exp"]

_MARKER = "1"


def user_index_prefix(user_id: UUID) -> str:
    return f"{USER_INDEX_PREFIX}{user_id}:"


def user_index_key(user_id: UUID, token: str) -> str:
    return f"{user_index_prefix(user_id)}{token}"


def revoked_key(token: str) -> str:
    return f"{REVOKED_PREFIX}{token}"


class JwtTokenService:
    """JWT access/refresh token service.

    Usage:
        # Via dependency injection
        from src.core.container import get_token_service

        token_service = get_token_service()

        access = token_service.generate_access_token(user)
        refresh = await token_service.generate_refresh_token(user)

        new_access = await token_service.refresh_access_token(refresh)
        await token_service.revoke_all_tokens_for_user(user.id)
    """

    def __init__(
        self,
        *,
        secret_key: str,
        token_store: TokenStoreProtocol,
        access_token_ttl: int = 900,
        refresh_token_ttl: int = 7 * 24 * 3600,
        token_type: str = "Bearer",
        algorithm: str = "HS256",
    ) -> None:
        """Initialize JWT service.

        Args:
            secret_key: Secret key for HMAC signing.
                MUST be at least 256 bits (32 bytes) for security.
            token_store: Store for refresh-token index and revocation markers.
            access_token_ttl: Access token lifetime in seconds.
            refresh_token_ttl: Refresh token lifetime in seconds.
            token_type: Label returned to clients alongside tokens.
            algorithm: HMAC algorithm (HS256, HS384, HS512).

        Raises:
            ValueError: If secret_key is too short, a TTL is not positive, or
                the algorithm is not an HMAC-SHA2 variant.
        """
        if len(secret_key.encode("utf-8")) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)
        if access_token_ttl <= 0 or refresh_token_ttl <= 0:
            msg = "Token lifetimes must be positive"
            raise ValueError(msg)
        if algorithm not in SUPPORTED_ALGORITHMS:
            msg = f"Unsupported JWT algorithm: {algorithm}"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._store = token_store
        self._access_ttl = access_token_ttl
        self._refresh_ttl = refresh_token_ttl
        self._token_type = token_type
        self._algorithm = algorithm
        self._user_locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def token_type(self) -> str:
        return self._token_type

    @property
    def access_token_ttl(self) -> int:
        return self._access_ttl

    @property
    def refresh_token_ttl(self) -> int:
        return self._refresh_ttl

    # ------------------------------------------------------------------
    # Issue
    # ------------------------------------------------------------------

    def generate_access_token(
        self,
        user: UserRecord,
        *,
        ttl: int | None = None,
        extra_claims: Mapping[str, Any] | None = None,
    ) -> str:
        """Generate JWT access token.

        Args:
            user: Token subject.
            ttl: Lifetime in seconds (default: configured access TTL).
            extra_claims: Additional claims; standard claims always win.

        Returns:
            JWT access token string.

        Example:
            >>> token = service.generate_access_token(user)
            >>> service.extract_username(token) == user.username
            True
        """
        claims: dict[str, Any] = dict(extra_claims or {})
        claims.update(
            sub=str(user.id),
            username=user.username,
            roles=sorted(user.roles),
            typ=ACCESS_TOKEN_TYPE,
        )
        return self._encode(claims, self._access_ttl if ttl is None else ttl)

    async def generate_refresh_token(
        self, user: UserRecord, *, ttl: int | None = None
    ) -> str:
        """Generate JWT refresh token and index it in the token store.

        The refresh token also carries ``username`` and ``roles`` so access
        tokens minted from it have the full claim set.

        Args:
            user: Token subject.
            ttl: Lifetime in seconds (default: configured refresh TTL).

        Returns:
            JWT refresh token string.

        Raises:
            TransientStorageError: If the index entry cannot be written.
        """
        lifetime = self._refresh_ttl if ttl is None else ttl
        token = self._encode(
            {
                "sub": str(user.id),
                "username": user.username,
                "roles": sorted(user.roles),
                "typ": REFRESH_TOKEN_TYPE,
            },
            lifetime,
        )

        async with self._lock_for(user.id):
            result = await self._store.set(
                user_index_key(user.id, token), _MARKER, ttl=max(lifetime, 1)
            )
        self._unwrap(result)
        return token

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def is_token_valid(self, token: str) -> bool:
        """Signature verifies and the claim set is well-formed (expiry ignored)."""
        payload = self._decode(token, verify_exp=False)
        return payload is not None and payload.get("typ") in (
            ACCESS_TOKEN_TYPE,
            REFRESH_TOKEN_TYPE,
        )

    async def is_token_valid_and_not_expired(self, token: str) -> bool:
        """Valid, ``exp`` in the future and, for refresh tokens, not revoked.

        Raises:
            TransientStorageError: If the revocation lookup fails.
        """
        payload = self._decode(token, verify_exp=True)
        if payload is None:
            return False
        typ = payload.get("typ")
        if typ == REFRESH_TOKEN_TYPE:
            return not await self.is_refresh_token_revoked(token)
        return typ == ACCESS_TOKEN_TYPE

    def is_token_signature_valid(self, token: str) -> bool:
        """Signature-only check; expired but well-signed tokens return True."""
        if not token:
            return False
        try:
            jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except InvalidTokenError:
            return False
        return True

    # ------------------------------------------------------------------
    # Claim extraction (works on expired tokens too)
    # ------------------------------------------------------------------

    def extract_claim(self, token: str, name: str) -> Any | None:
        payload = self._decode(token, verify_exp=False)
        if payload is None:
            return None
        return payload.get(name)

    def extract_user_id(self, token: str) -> UUID | None:
        subject = self.extract_claim(token, "sub")
        if subject is None:
            return None
        try:
            return UserId.of(subject).value
        except ValueError:
            return None

    def extract_username(self, token: str) -> str | None:
        username = self.extract_claim(token, "username")
        return username if isinstance(username, str) else None

    def extract_roles(self, token: str) -> frozenset[str] | None:
        roles = self.extract_claim(token, "roles")
        if not isinstance(roles, list):
            return None
        return frozenset(str(role) for role in roles)

    def get_expiration_time(self, token: str) -> datetime | None:
        return self._timestamp_claim(token, "exp")

    def get_issue_time(self, token: str) -> datetime | None:
        return self._timestamp_claim(token, "iat")

    # ------------------------------------------------------------------
    # Refresh and revocation
    # ------------------------------------------------------------------

    async def refresh_access_token(self, refresh_token: str) -> str | None:
        """Mint a new access token from a live refresh token.

        Flow:
        1. Verify signature and expiry
        2. Verify typ=refresh and a parsable subject
        3. Verify no revocation marker exists
        4. Verify the user index entry exists
        5. Copy non-standard claims (username, roles) into a fresh access token

        The refresh token itself is not rotated.

        Returns:
            New access token, or None if the refresh token is not usable.

        Raises:
            TransientStorageError: If the token store fails.
        """
        payload = self._decode(refresh_token, verify_exp=True)
        if payload is None or payload.get("typ") != REFRESH_TOKEN_TYPE:
            return None

        user_id = self._parse_subject(payload)
        if user_id is None:
            return None

        if await self.is_refresh_token_revoked(refresh_token):
            return None

        indexed = self._unwrap(
            await self._store.exists(user_index_key(user_id, refresh_token))
        )
        if not indexed:
            return None

        claims = {k: v for k, v in payload.items() if k not in _MINTED_CLAIMS}
        claims.update(sub=str(user_id), typ=ACCESS_TOKEN_TYPE)
        return self._encode(claims, self._access_ttl)

    async def revoke_refresh_token(self, refresh_token: str) -> None:
        """Revoke a single refresh token.

        Idempotent: invalid, expired or already revoked tokens are a no-op.

        Raises:
            TransientStorageError: If the token store fails.
        """
        payload = self._decode(refresh_token, verify_exp=False)
        if payload is None or payload.get("typ") != REFRESH_TOKEN_TYPE:
            return

        user_id = self._parse_subject(payload)
        remaining = self._remaining_lifetime(payload)
        if user_id is None or remaining <= 0:
            return

        async with self._lock_for(user_id):
            if await self.is_refresh_token_revoked(refresh_token):
                return
            result = await self._store.apply_batch(
                set_entries={revoked_key(refresh_token): (_MARKER, remaining)},
                delete_keys=[user_index_key(user_id, refresh_token)],
            )
        self._unwrap(result)

    async def revoke_all_tokens_for_user(self, user_id: UUID) -> None:
        """Revoke every indexed refresh token of a user.

        Writes a revocation marker for each indexed token (TTL = remaining
        lifetime) and removes the index entries in one atomic batch.
        Idempotent: with no indexed tokens nothing is written.

        Raises:
            TransientStorageError: If the token store fails.
        """
        prefix = user_index_prefix(user_id)
        async with self._lock_for(user_id):
            keys = self._unwrap(await self._store.scan_prefix(prefix))
            if not keys:
                return

            markers: dict[str, tuple[str, int]] = {}
            for key in keys:
                token = key[len(prefix) :]
                payload = self._decode(token, verify_exp=False)
                remaining = 0 if payload is None else self._remaining_lifetime(payload)
                if remaining > 0:
                    markers[revoked_key(token)] = (_MARKER, remaining)

            result = await self._store.apply_batch(
                set_entries=markers, delete_keys=keys
            )
        self._unwrap(result)

    async def is_refresh_token_revoked(self, refresh_token: str) -> bool:
        """Check for a revocation marker.

        Raises:
            TransientStorageError: If the token store fails.
        """
        if not refresh_token:
            return False
        return bool(self._unwrap(await self._store.exists(revoked_key(refresh_token))))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _encode(self, claims: Mapping[str, Any], ttl: int) -> str:
        now = datetime.now(UTC)
        payload = {
            **claims,
            "iat": int(now.timestamp()),  # Issued at
            "exp": int((now + timedelta(seconds=ttl)).timestamp()),  # Expires at
            "jti": str(uuid7()),  # JWT ID (unique identifier)
        }
        token: str = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token

    def _decode(self, token: str, *, verify_exp: bool) -> dict[str, Any] | None:
        if not token:
            return None
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": verify_exp, "require": _REQUIRED_CLAIMS},
            )
        except InvalidTokenError:
            return None
        return payload

    def _timestamp_claim(self, token: str, name: str) -> datetime | None:
        value = self.extract_claim(token, name)
        if not isinstance(value, (int, float)):
            return None
        return datetime.fromtimestamp(value, UTC)

    @staticmethod
    def _parse_subject(payload: Mapping[str, Any]) -> UUID | None:
        try:
            return UserId.of(payload.get("sub")).value  # type: ignore[arg-type]
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _remaining_lifetime(payload: Mapping[str, Any]) -> int:
        exp = payload.get("exp")
        if not isinstance(exp, (int, float)):
            return 0
        return math.ceil(exp - datetime.now(UTC).timestamp())

    def _lock_for(self, user_id: UUID) -> asyncio.Lock:
        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._user_locks[user_id] = lock
        return lock

    @staticmethod
    def _unwrap(result: Result[T, Any]) -> T:
        if isinstance(result, Failure):
            raise TransientStorageError(result.error.message)
        return result.value
