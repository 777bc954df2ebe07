"""User store: lookups and inserts against the `users` table."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from store.models import User
from store.models.base import async_session_factory

logger = logging.getLogger("taiwanfrp.store")


class StoreError(Exception):
    """The backing store did not confirm a write."""


class ConstraintViolation(StoreError):
    """A unique key (username or discord_user_id) already exists."""


async def find_by_username(username: str) -> Optional[User]:
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()


async def find_by_username_or_discord_id(username: str, discord_user_id: str) -> Optional[User]:
    """Return any user holding either unique key, or None."""
    async with async_session_factory() as session:
        result = await session.execute(
            select(User)
            .where(or_(User.username == username, User.discord_user_id == discord_user_id))
            .limit(1)
        )
        return result.scalars().first()


async def insert_user(
    *,
    username: str,
    password: str,
    discord_user_id: str,
    email: Optional[str] = None,
    create_max_proxy_count: int,
    speed_limit: int,
    is_admin: bool,
    use_totp: bool,
    created_at: int,
    updated_at: int,
) -> int:
    """Insert a user and return its id. `password` must already be a digest."""
    user = User(
        username=username,
        email=email,
        password=password,
        discord_user_id=discord_user_id,
        create_max_proxy_count=create_max_proxy_count,
        speed_limit=speed_limit,
        is_admin=is_admin,
        use_totp=use_totp,
        created_at=created_at,
        updated_at=updated_at,
    )
    async with async_session_factory() as session:
        session.add(user)
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise ConstraintViolation("username or discord_user_id already exists") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Insert into users failed")
            raise StoreError("insert did not complete") from e
        return user.id
