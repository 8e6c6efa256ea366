"""Persistence models for the versioned event store."""

from __future__ import annotations

import datetime as dt
import typing as typ

from sqlalchemy import JSON, DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Dialect
    from sqlalchemy.ext.asyncio import AsyncEngine

from tourneybot.common.time import ensure_utc, utcnow


class Base(DeclarativeBase):
    """Base declarative class for event models."""


class UTCDateTime(TypeDecorator[dt.datetime]):
    """DateTime wrapper that round-trips UTC tzinfo even on SQLite and MySQL."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Force bound datetime values to UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            msg = "ctime must be timezone aware"
            raise ValueError(msg)
        return value.astimezone(dt.UTC)

    def process_result_value(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Ensure result datetimes are UTC and timezone aware."""
        if value is None:
            return None
        return ensure_utc(value)


class EventVersionRecord(Base):
    """Append-only row holding one version of one event."""

    __tablename__ = "event_versions"
    __table_args__ = (
        UniqueConstraint("slug", "version", name="uq_event_versions_slug_version"),
        Index("ix_event_versions_slug_version", "slug", "version"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(128))
    version: Mapped[int] = mapped_column(Integer)
    payload: Mapped[dict[str, typ.Any]] = mapped_column(JSON)
    ctime: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)


async def init_event_storage(engine: AsyncEngine) -> None:
    """Create the event tables if they are absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = ["Base", "EventVersionRecord", "UTCDateTime", "init_event_storage"]
