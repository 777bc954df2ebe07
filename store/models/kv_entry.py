"""Key-value entries (API keys live here under `key:<value>`)."""
from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from store.models.base import Base


class KVEntry(Base):
    """Namespaced key with an opaque value. Presence is what the API gate checks."""

    __tablename__ = "kv_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
