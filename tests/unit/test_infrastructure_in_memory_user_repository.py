"""Unit tests for InMemoryUserRepository."""

from dataclasses import replace
from datetime import timedelta

import pytest
import pytest_asyncio

from src.domain.errors import (
    ConcurrentUpdateError,
    UserAlreadyExistsError,
    UserNotFoundError,
)


@pytest.fixture
def bob(make_user):
    return make_user(email="bob@example.com", username="bob", roles=("user", "admin"))


@pytest.mark.unit
class TestSaveAndFind:
    async def test_find_by_keys(self, user_repo, saved_user):
        assert await user_repo.find_by_id(saved_user.id) == saved_user
        assert await user_repo.find_by_email("ALICE@example.com ") == saved_user
        assert await user_repo.find_by_username("alice") == saved_user
        assert await user_repo.find_by_username("Alice") is None
        assert await user_repo.exists_by_id(saved_user.id)
        assert await user_repo.exists_by_email("alice@example.com")
        assert await user_repo.exists_by_username("alice")

    @pytest.mark.parametrize(
        ("email", "username"),
        [("alice@example.com", "other"), ("other@example.com", "alice")],
    )
    async def test_save_rejects_duplicates(
        self, user_repo, saved_user, make_user, email, username
    ):
        with pytest.raises(UserAlreadyExistsError):
            await user_repo.save(make_user(email=email, username=username))

        assert await user_repo.count() == 1

    async def test_save_rejects_duplicate_id(self, user_repo, saved_user):
        with pytest.raises(UserAlreadyExistsError):
            await user_repo.save(saved_user)


@pytest.mark.unit
class TestUpdate:
    async def test_update_replaces_record_and_indexes(
        self, user_repo, user_factory, saved_user
    ):
        locked = user_factory.lock_user(saved_user)

        assert await user_repo.update(locked) == locked
        assert (await user_repo.find_by_username("alice")).locked

    async def test_update_unknown_user(self, user_repo, make_user):
        with pytest.raises(UserNotFoundError):
            await user_repo.update(make_user())

    async def test_update_rejects_taken_username(
        self, user_repo, saved_user, bob
    ):
        await user_repo.save(bob)

        with pytest.raises(UserAlreadyExistsError):
            await user_repo.update(replace(saved_user, username="bob"))

        assert (await user_repo.find_by_username("alice")).id == saved_user.id

    async def test_conditional_update_matches_stored_version(
        self, user_repo, user_factory, saved_user
    ):
        locked = user_factory.lock_user(saved_user)

        await user_repo.update(locked, expected_updated_at=saved_user.updated_at)

        assert (await user_repo.find_by_id(saved_user.id)).locked

    async def test_conditional_update_rejects_stale_record(
        self, user_repo, user_factory, saved_user
    ):
        await user_repo.update(user_factory.disable_user(saved_user))
        stale = user_factory.add_attribute(saved_user, "lastLogin", "now")

        with pytest.raises(ConcurrentUpdateError):
            await user_repo.update(stale, expected_updated_at=saved_user.updated_at)

        stored = await user_repo.find_by_id(saved_user.id)
        assert not stored.enabled
        assert stored.get_attribute("lastLogin") is None


@pytest.mark.unit
class TestQueries:
    @pytest_asyncio.fixture
    async def population(self, user_repo, user_factory, make_user, saved_user, bob):
        await user_repo.save(bob)
        carol = user_factory.disable_user(
            make_user(email="carol@example.com", username="carol", roles=("viewer",))
        )
        dave = user_factory.lock_user(
            make_user(email="dave@example.com", username="dave", team="blue")
        )
        await user_repo.save(carol)
        await user_repo.save(dave)
        return saved_user, bob, carol, dave

    async def test_role_queries(self, user_repo, population):
        alice, bob, carol, dave = population

        assert await user_repo.find_by_role("admin") == [bob]
        assert await user_repo.find_by_roles(["admin", "viewer"]) == [bob, carol]
        assert await user_repo.count_by_role("user") == 3

    async def test_status_queries(self, user_repo, population):
        alice, bob, carol, dave = population

        assert await user_repo.find_all_disabled() == [carol]
        assert await user_repo.find_all_locked() == [dave]
        assert await user_repo.count_enabled() == 3
        assert await user_repo.count_disabled() == 1
        assert await user_repo.count() == 4

    async def test_attribute_queries(self, user_repo, population):
        *_, dave = population

        assert await user_repo.find_by_attribute("team", "blue") == [dave]
        assert await user_repo.find_by_attributes({"team": "red"}) == []

    async def test_created_after(self, user_repo, population):
        alice, *rest = population

        found = await user_repo.find_users_created_after(
            alice.created_at - timedelta(seconds=1)
        )

        assert alice in found and len(found) == 4

    async def test_paging(self, user_repo, population):
        first = await user_repo.find_all(0, 3)
        second = await user_repo.find_all(1, 3)

        assert len(first) == 3 and len(second) == 1
        assert {u.id for u in first}.isdisjoint({u.id for u in second})

    async def test_username_containing_is_case_insensitive(self, user_repo, population):
        found = await user_repo.find_by_username_containing("A", 0, 10)

        assert {u.username for u in found} == {"alice", "carol", "dave"}

    @pytest.mark.parametrize(("page", "size"), [(-1, 10), (0, 0)])
    async def test_invalid_paging(self, user_repo, page, size):
        with pytest.raises(ValueError):
            await user_repo.find_all(page, size)


@pytest.mark.unit
class TestDelete:
    async def test_delete_frees_email_and_username(
        self, user_repo, saved_user, make_user
    ):
        assert await user_repo.delete(saved_user)
        assert not await user_repo.delete_by_id(saved_user.id)

        assert await user_repo.find_by_email("alice@example.com") is None
        await user_repo.save(make_user())
        assert await user_repo.count() == 1
