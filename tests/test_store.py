"""Tests for the user and key stores."""
import asyncio

import pytest

from store import keys, users
from store.models import unix_now


def _user(**overrides):
    fields = {
        "username": "alice123",
        "password": "$2b$10$" + "a" * 53,
        "discord_user_id": "d1",
        "email": None,
        "create_max_proxy_count": 5,
        "speed_limit": 3096,
        "is_admin": False,
        "use_totp": False,
        "created_at": unix_now(),
        "updated_at": unix_now(),
    }
    fields.update(overrides)
    return fields


@pytest.mark.asyncio
async def test_insert_and_find_by_username():
    user_id = await users.insert_user(**_user())
    assert isinstance(user_id, int)

    user = await users.find_by_username("alice123")
    assert user is not None
    assert user.id == user_id
    assert user.discord_user_id == "d1"
    assert await users.find_by_username("nobody") is None


@pytest.mark.asyncio
async def test_find_by_username_or_discord_id_matches_either():
    await users.insert_user(**_user())
    assert (await users.find_by_username_or_discord_id("alice123", "other")).username == "alice123"
    assert (await users.find_by_username_or_discord_id("other", "d1")).username == "alice123"
    assert await users.find_by_username_or_discord_id("other", "d2") is None


@pytest.mark.asyncio
async def test_insert_generates_distinct_ids():
    first = await users.insert_user(**_user())
    second = await users.insert_user(**_user(username="bob_user", discord_user_id="d2"))
    assert first != second


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"discord_user_id": "d2"},  # same username
        {"username": "bob_user"},  # same discord id
    ],
)
async def test_unique_constraint_is_enforced_by_store(overrides):
    """A second insert with a taken key raises ConstraintViolation, not a duplicate row."""
    await users.insert_user(**_user())
    with pytest.raises(users.ConstraintViolation):
        await users.insert_user(**_user(**overrides))
    assert await users.find_by_username("bob_user") is None


@pytest.mark.asyncio
async def test_untrusted_values_are_bound_not_interpolated():
    """Quote characters in lookups are treated as data."""
    await users.insert_user(**_user())
    assert await users.find_by_username("' OR '1'='1") is None
    assert await users.find_by_username_or_discord_id("x' OR 1=1 --", "y") is None


@pytest.mark.asyncio
async def test_seeded_key_exists():
    assert await keys.key_exists("test-key")
    assert await keys.key_exists("second-key")
    assert not await keys.key_exists("missing")


@pytest.mark.asyncio
async def test_add_api_key_is_idempotent():
    assert await keys.add_api_key("new-key") is True
    assert await keys.add_api_key("new-key") is False
    assert await keys.key_exists("new-key")
    assert await keys.seed_api_keys(["new-key", "test-key"]) == 0


@pytest.mark.asyncio
async def test_duplicate_key_insert_returns_false_without_raising():
    """A key already present is rejected by the unique index, not an exception."""
    assert await keys.add_api_key("test-key") is False
    assert await keys.key_exists("test-key")


@pytest.mark.asyncio
async def test_concurrent_key_seeding(tmp_path, monkeypatch):
    """Workers seeding the same key at once: one insert wins, the rest return False."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

    from store.models import Base

    file_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'keys.db'}")
    async with file_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    monkeypatch.setattr(
        keys,
        "async_session_factory",
        async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False),
    )
    try:
        results = await asyncio.gather(*(keys.add_api_key("shared") for _ in range(5)))
        assert sorted(results) == [False, False, False, False, True]
        assert await keys.key_exists("shared")
    finally:
        await file_engine.dispose()


@pytest.mark.asyncio
async def test_insert_store_failure_maps_to_store_error(monkeypatch):
    """A non-integrity database error on commit surfaces as StoreError and writes nothing."""
    from sqlalchemy.exc import OperationalError
    from sqlalchemy.ext.asyncio import AsyncSession

    async def _commit(self):
        raise OperationalError("INSERT INTO users", {}, Exception("disk I/O error"))

    monkeypatch.setattr(AsyncSession, "commit", _commit)
    with pytest.raises(users.StoreError) as info:
        await users.insert_user(**_user())
    assert not isinstance(info.value, users.ConstraintViolation)

    monkeypatch.undo()
    assert await users.find_by_username("alice123") is None
