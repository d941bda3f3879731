"""Redis token store implementing TokenStoreProtocol.

This adapter wraps an async Redis client and handles all Redis-specific
operations and error mapping.

Architecture:
- Implements TokenStoreProtocol without inheritance (structural typing)
- Maps Redis exceptions to CacheError with ErrorCode.TRANSIENT_STORAGE
- Returns Result types for all operations
- Batches run in a MULTI/EXEC transaction (all-or-nothing)
"""

from collections.abc import Mapping, Sequence

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError


def _decode(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def _cache_error(
    infrastructure_code: InfrastructureErrorCode,
    message: str,
    error: Exception,
    **details: object,
) -> Failure[CacheError]:
    return Failure(
        error=CacheError(
            code=ErrorCode.TRANSIENT_STORAGE,
            infrastructure_code=infrastructure_code,
            message=message,
            details={**details, "error": str(error), "type": type(error).__name__},
        )
    )


class RedisTokenStore:
    """Redis implementation of TokenStoreProtocol.

    Note: Does NOT inherit from TokenStoreProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client instance.
        _scan_count: COUNT hint for SCAN iterations.
    """

    def __init__(self, redis_client: Redis, scan_count: int = 500) -> None:
        """Initialize Redis token store.

        Args:
            redis_client: Async Redis client instance.
            scan_count: COUNT hint used when scanning key prefixes.
        """
        self._redis = redis_client
        self._scan_count = scan_count

    async def get(self, key: str) -> Result[str | None, CacheError]:
        """Get value from Redis.

        Returns:
            Result with value if found, None if not found, or CacheError.
        """
        try:
            value = await self._redis.get(key)
            if value is None:
                return Success(value=None)
            return Success(value=_decode(value))
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_GET_ERROR,
                f"Failed to get key '{key}' from token store",
                e,
                key=key,
            )

    async def set(self, key: str, value: str, ttl: int) -> Result[None, CacheError]:
        """Set value in Redis with expiration.

        Returns:
            Result with None on success, or CacheError.
        """
        try:
            await self._redis.setex(key, ttl, value)
            return Success(value=None)
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_SET_ERROR,
                f"Failed to set key '{key}' in token store",
                e,
                key=key,
                ttl=ttl,
            )

    async def delete(self, key: str) -> Result[bool, CacheError]:
        """Delete key from Redis.

        Returns:
            Result with True if deleted, False if key didn't exist, or CacheError.
        """
        try:
            deleted_count = await self._redis.delete(key)
            return Success(value=deleted_count > 0)
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_DELETE_ERROR,
                f"Failed to delete key '{key}' from token store",
                e,
                key=key,
            )

    async def exists(self, key: str) -> Result[bool, CacheError]:
        """Check if key exists in Redis."""
        try:
            exists_count = await self._redis.exists(key)
            return Success(value=exists_count > 0)
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_GET_ERROR,
                f"Failed to check existence of key '{key}'",
                e,
                key=key,
            )

    async def ttl(self, key: str) -> Result[int | None, CacheError]:
        """Get time to live for key in Redis.

        Returns:
            Result with seconds until expiration, None if no TTL or key
            doesn't exist, or CacheError.
        """
        try:
            ttl_value = await self._redis.ttl(key)
            # Redis returns -2 if key doesn't exist, -1 if no expiration
            if ttl_value < 0:
                return Success(value=None)
            return Success(value=ttl_value)
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_GET_ERROR,
                f"Failed to get TTL for key '{key}'",
                e,
                key=key,
            )

    async def scan_prefix(self, prefix: str) -> Result[list[str], CacheError]:
        """List keys starting with prefix using SCAN (non-blocking)."""
        try:
            keys = [
                _decode(key)
                async for key in self._redis.scan_iter(
                    match=f"{prefix}*", count=self._scan_count
                )
            ]
            return Success(value=keys)
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_SCAN_ERROR,
                f"Failed to scan keys with prefix '{prefix}'",
                e,
                prefix=prefix,
            )

    async def apply_batch(
        self,
        *,
        set_entries: Mapping[str, tuple[str, int]],
        delete_keys: Sequence[str],
    ) -> Result[None, CacheError]:
        """Apply writes and deletes in a single MULTI/EXEC transaction."""
        if not set_entries and not delete_keys:
            return Success(value=None)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                for key, (value, ttl) in set_entries.items():
                    pipe.setex(key, ttl, value)
                if delete_keys:
                    pipe.delete(*delete_keys)
                await pipe.execute()
            return Success(value=None)
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_SET_ERROR,
                "Failed to apply token store batch",
                e,
                set_count=len(set_entries),
                delete_count=len(delete_keys),
            )

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity."""
        try:
            return Success(value=bool(await self._redis.ping()))
        except RedisError as e:
            return _cache_error(
                InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
                "Token store ping failed",
                e,
            )

    async def close(self) -> None:
        await self._redis.aclose()
