"""Database layer - session management and base models."""

from sekolah.core.database.base import Base, TimestampMixin, UUIDMixin
from sekolah.core.database.session import (
    async_engine,
    async_session_factory,
    get_db,
)


__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "async_engine",
    "async_session_factory",
    "get_db",
]
