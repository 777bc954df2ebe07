"""User account model."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from store.models.base import Base


@dataclass(frozen=True)
class UserDefaults:
    """Values applied when a registration omits the optional account fields."""

    create_max_proxy_count: int = 5
    speed_limit: int = 3096
    is_admin: bool = False
    use_totp: bool = False


USER_DEFAULTS = UserDefaults()


def unix_now() -> int:
    return int(datetime.now(timezone.utc).timestamp())


class User(Base):
    """Proxy account. `password` holds a bcrypt digest, never plaintext."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    password: Mapped[str] = mapped_column(String(128), nullable=False)
    discord_user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    create_max_proxy_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=USER_DEFAULTS.create_max_proxy_count
    )
    speed_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=USER_DEFAULTS.speed_limit)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=USER_DEFAULTS.is_admin)
    use_totp: Mapped[bool] = mapped_column(Boolean, nullable=False, default=USER_DEFAULTS.use_totp)  # stored only
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now)  # unix seconds
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now, onupdate=unix_now)

    def to_public_dict(self) -> dict:
        """Account fields safe to return to clients (no password digest)."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "discord_user_id": self.discord_user_id,
            "create_max_proxy_count": self.create_max_proxy_count,
            "speed_limit": self.speed_limit,
            "is_admin": self.is_admin,
            "use_totp": self.use_totp,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
