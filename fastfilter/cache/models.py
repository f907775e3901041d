"""SQLAlchemy models for the database cache backend."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fastfilter.infrastructure.database import Base


class CacheEntryRecord(Base):
    """One cached value.

    Attributes:
        key: Full storage key (namespace and version included).
        value: JSON-encoded value.
        expires_at: Expiry timestamp; expired rows read as misses.
    """

    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CacheEntryRecord(key={self.key}, expires_at={self.expires_at})>"


class CacheVersionRecord(Base):
    """Generation counter of a cache namespace."""

    __tablename__ = "cache_versions"

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        """String representation."""
        return f"<CacheVersionRecord(name={self.name}, version={self.version})>"
