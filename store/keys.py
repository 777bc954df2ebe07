"""Key store: existence checks for pre-shared API keys."""
from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from store.models import KVEntry
from store.models.base import async_session_factory

logger = logging.getLogger("taiwanfrp.store")


def api_key_name(value: str) -> str:
    return f"key:{value}"


async def key_exists(value: str) -> bool:
    """True if `key:<value>` is present. The stored value is ignored."""
    async with async_session_factory() as session:
        result = await session.execute(
            select(KVEntry.id).where(KVEntry.key == api_key_name(value)).limit(1)
        )
        return result.first() is not None


async def add_api_key(value: str, label: str = "") -> bool:
    """Store an API key. Returns False if it was already present.

    The unique index on `key` decides; a concurrent insert of the same key
    also returns False.
    """
    async with async_session_factory() as session:
        session.add(KVEntry(key=api_key_name(value), value=label))
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            return False
        return True


async def seed_api_keys(values: Iterable[str]) -> int:
    """Bootstrap keys from configuration. Returns how many were added."""
    added = 0
    for value in values:
        if await add_api_key(value, label="bootstrap"):
            added += 1
    if added:
        logger.info("Seeded %d API key(s)", added)
    return added
