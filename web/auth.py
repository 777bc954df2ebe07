"""Authentication for web API: password hashing, API key gate."""
from __future__ import annotations

import hashlib
import logging

from passlib.context import CryptContext
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

import config
from store.keys import key_exists

logger = logging.getLogger("taiwanfrp.auth")

BCRYPT_MIN_ROUNDS = 4
BCRYPT_MAX_ROUNDS = 31


def validate_cost(rounds: int) -> int:
    """Reject bcrypt work factors outside 4..31."""
    if not isinstance(rounds, int) or isinstance(rounds, bool):
        raise ValueError(f"bcrypt cost must be an integer, got {rounds!r}")
    if not BCRYPT_MIN_ROUNDS <= rounds <= BCRYPT_MAX_ROUNDS:
        raise ValueError(
            f"bcrypt cost must be between {BCRYPT_MIN_ROUNDS} and {BCRYPT_MAX_ROUNDS}, got {rounds}"
        )
    return rounds


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=validate_cost(config.BCRYPT_ROUNDS),
)


def _prepare_password(password: str) -> str:
    """Bcrypt has a 72-byte limit and rejects NUL bytes. Pre-hash such passwords with SHA256."""
    encoded = password.encode("utf-8")
    if len(encoded) > 72 or b"\x00" in encoded:
        return hashlib.sha256(encoded).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prepare_password(password))


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time check of `plain` against a stored digest. Malformed digests never match."""
    try:
        return pwd_context.verify(_prepare_password(plain), hashed)
    except (ValueError, TypeError):
        return False


def _normalize_path(path: str) -> str:
    return path.rstrip("/") or "/"


class ApiKeyGateMiddleware(BaseHTTPMiddleware):
    """Reject requests to gated paths that lack a known pre-shared key.

    Runs before routing and body parsing. This is a flat allow-list: any
    stored key opens every gated path, with no scoping or expiry.
    """

    def __init__(self, app, header: str = config.API_KEY_HEADER, paths=None):
        super().__init__(app)
        self.header = header
        self.paths = {_normalize_path(p) for p in (config.GATED_PATHS if paths is None else paths)}

    async def dispatch(self, request, call_next):
        if _normalize_path(request.url.path) not in self.paths:
            return await call_next(request)
        api_key = request.headers.get(self.header)
        if not api_key:
            logger.info("Rejected %s %s: no API key", request.method, request.url.path)
            return JSONResponse({"error": "API key is required"}, status_code=401)
        if not await key_exists(api_key):
            logger.warning("Rejected %s %s: unknown API key", request.method, request.url.path)
            return JSONResponse({"error": "Invalid API key"}, status_code=401)
        return await call_next(request)
