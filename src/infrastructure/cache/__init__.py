"""Token store implementations.

Architecture:
- RedisTokenStore: Redis implementation of TokenStoreProtocol
- InMemoryTokenStore: In-process implementation (no Redis configured)
- Use src.core.container.get_token_store() for dependency injection
"""

from src.infrastructure.cache.in_memory_token_store import InMemoryTokenStore
from src.infrastructure.cache.redis_token_store import RedisTokenStore

__all__ = [
    "InMemoryTokenStore",
    "RedisTokenStore",
]
