"""Database models."""
from store.models.base import Base, init_db
from store.models.kv_entry import KVEntry
from store.models.user import USER_DEFAULTS, User, UserDefaults, unix_now

__all__ = [
    "Base",
    "KVEntry",
    "User",
    "UserDefaults",
    "USER_DEFAULTS",
    "init_db",
    "unix_now",
]
