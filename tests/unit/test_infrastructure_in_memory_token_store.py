"""Unit tests for InMemoryTokenStore (fake monotonic clock)."""

import pytest

from src.core.result import Success
from src.infrastructure.cache import InMemoryTokenStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryTokenStore(clock=clock)


@pytest.mark.unit
class TestInMemoryTokenStore:
    async def test_set_get_and_expire(self, store, clock):
        await store.set("k", "v", ttl=10)

        assert await store.get("k") == Success(value="v")
        assert await store.ttl("k") == Success(value=10)

        clock.advance(10)

        assert await store.get("k") == Success(value=None)
        assert await store.exists("k") == Success(value=False)
        assert await store.ttl("k") == Success(value=None)
        assert len(store) == 0

    async def test_delete_reports_existence(self, store):
        await store.set("k", "v", ttl=10)

        assert await store.delete("k") == Success(value=True)
        assert await store.delete("k") == Success(value=False)

    async def test_scan_prefix_skips_expired(self, store, clock):
        await store.set("user:1:a", "1", ttl=5)
        await store.set("user:1:b", "1", ttl=50)
        await store.set("user:2:c", "1", ttl=50)
        clock.advance(6)

        result = await store.scan_prefix("user:1:")

        assert result == Success(value=["user:1:b"])

    async def test_apply_batch_sets_and_deletes(self, store):
        await store.set("user:1:a", "1", ttl=50)

        await store.apply_batch(
            set_entries={"revoked:a": ("1", 30)}, delete_keys=["user:1:a", "missing"]
        )

        assert await store.exists("user:1:a") == Success(value=False)
        assert await store.ttl("revoked:a") == Success(value=30)

    async def test_writes_purge_expired_entries_never_read_again(self, store, clock):
        for i in range(1000):
            await store.set(f"revoked:old-{i}", "1", ttl=1)
        clock.advance(10)

        for i in range(1000):
            await store.set(f"revoked:new-{i}", "1", ttl=60)

        assert len(store._entries) == 1000
        assert all(key.startswith("revoked:new-") for key in store._entries)

    async def test_batch_purges_expired_entries(self, store, clock):
        await store.set("user:1:a", "1", ttl=1)
        clock.advance(2)

        await store.apply_batch(set_entries={"revoked:b": ("1", 30)}, delete_keys=[])

        assert list(store._entries) == ["revoked:b"]

    async def test_rewritten_key_keeps_its_later_expiry(self, store, clock):
        await store.set("k", "old", ttl=1)
        await store.set("k", "new", ttl=60)
        clock.advance(5)

        await store.set("other", "1", ttl=60)

        assert await store.get("k") == Success(value="new")
