"""Configuration for the TaiwanFRP auth API."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _parse_list(value: str) -> list[str]:
    if not value:
        return []
    return [x.strip() for x in value.split(",") if x.strip()]


# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'taiwanfrp.db'}",
)

# API gate: header carrying the pre-shared key and the paths it protects
API_KEY_HEADER = os.getenv("API_KEY_HEADER", "X-API-Key")
GATED_PATHS = set(_parse_list(os.getenv("GATED_PATHS", "/register,/login")))

# Keys seeded into the key store on startup (comma-separated)
INITIAL_API_KEYS = _parse_list(os.getenv("INITIAL_API_KEYS", ""))

# Password hashing work factor (bcrypt log2 rounds)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
CORS_ORIGINS = _parse_list(os.getenv("CORS_ORIGINS", "*"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
