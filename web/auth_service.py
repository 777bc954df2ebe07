"""Register and login flows on top of the user store and password hasher."""
from __future__ import annotations

import logging

from store import users
from store.models import unix_now
from web.api.schemas import LoginRequest, RegisterRequest
from web.auth import hash_password, verify_password

logger = logging.getLogger("taiwanfrp.auth")


class AuthError(Exception):
    """Request-terminal failure with the HTTP status it maps to."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(AuthError):
    status_code = 401


class InvalidCredential(Unauthorized):
    pass


class NotFound(AuthError):
    status_code = 404


class Conflict(AuthError):
    status_code = 409


class StoreFailure(AuthError):
    status_code = 500


async def register(body: RegisterRequest) -> int:
    """Create a user and return its id."""
    if await users.find_by_username_or_discord_id(body.username, body.discord_user_id):
        raise Conflict("User already exists")

    now = unix_now()
    try:
        user_id = await users.insert_user(
            username=body.username,
            email=body.email,
            password=hash_password(body.password),
            discord_user_id=body.discord_user_id,
            create_max_proxy_count=body.create_max_proxy_count,
            speed_limit=body.speed_limit,
            is_admin=body.is_admin,
            use_totp=body.use_totp,
            created_at=now,
            updated_at=now,
        )
    except users.ConstraintViolation:
        # Lost a race with a concurrent registration after the pre-check passed
        raise Conflict("User already exists")
    except users.StoreError:
        raise StoreFailure("Failed to register user")

    logger.info("Registered user %s (id=%s)", body.username, user_id)
    return user_id


async def login(body: LoginRequest) -> dict:
    """Check credentials and return the user's public fields."""
    user = await users.find_by_username(body.username)
    if not user:
        raise NotFound("User not found")
    if not verify_password(body.password, user.password):
        logger.info("Login failed for %s: wrong password", body.username)
        raise InvalidCredential("Invalid password")
    logger.info("Login: %s (id=%s)", user.username, user.id)
    return user.to_public_dict()
