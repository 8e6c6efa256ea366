"""SQLAlchemy-backed version store.

Each version is one row in ``event_versions``. The unique constraint on
``(slug, version)`` is what makes compare-and-append atomic: the append
reads the current maximum and inserts the next version in one transaction,
and if a concurrent writer inserted that version first the commit fails
with an ``IntegrityError`` that is reported as a version conflict.

The store opens a short-lived session per operation, so it works with any
async driver SQLAlchemy supports (``sqlite+aiosqlite``, ``mysql+aiomysql``,
``postgresql+asyncpg``).
"""

from __future__ import annotations

import copy
import typing as typ

from sqlalchemy import func, select
from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from tourneybot.common.time import utcnow
from tourneybot.events.errors import StoreUnavailableError, VersionConflictError
from tourneybot.events.models import EventVersion
from tourneybot.events.storage import EventVersionRecord
from tourneybot.events.store import check_expected_version

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from tourneybot.events.models import Payload

_UNAVAILABLE = (OperationalError, InterfaceError, PoolTimeoutError)


def _to_version(record: EventVersionRecord) -> EventVersion:
    return EventVersion(
        slug=record.slug,
        version=record.version,
        payload=copy.deepcopy(record.payload),
        ctime=record.ctime,
    )


class SqlVersionStore:
    """Append-only version store on a relational database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for every operation."""
        self._session_factory = session_factory

    async def get_latest(self, slug: str) -> EventVersion | None:
        """Return the highest-version row for *slug*, or None."""
        stmt = (
            select(EventVersionRecord)
            .where(EventVersionRecord.slug == slug)
            .order_by(EventVersionRecord.version.desc())
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                record = await session.scalar(stmt)
                return None if record is None else _to_version(record)
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError("get_latest") from exc

    async def list_versions(self, slug: str) -> list[int]:
        """Return all version numbers for *slug* in ascending order."""
        stmt = (
            select(EventVersionRecord.version)
            .where(EventVersionRecord.slug == slug)
            .order_by(EventVersionRecord.version)
        )
        try:
            async with self._session_factory() as session:
                return list(await session.scalars(stmt))
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError("list_versions") from exc

    async def append(
        self,
        slug: str,
        expected_prior_version: int,
        payload: Payload,
    ) -> EventVersion:
        """Insert ``expected_prior_version + 1`` for *slug* if it is next.

        The payload is deep-copied before it is handed to the ORM so later
        caller-side mutation cannot leak into the stored row.
        """
        check_expected_version(expected_prior_version)
        new_version = EventVersion(
            slug=slug,
            version=expected_prior_version + 1,
            payload=copy.deepcopy(payload),
            ctime=utcnow(),
        )

        try:
            async with self._session_factory() as session:
                await self._insert_next(session, new_version, expected_prior_version)
        except _UNAVAILABLE as exc:
            raise StoreUnavailableError("append") from exc

        return new_version

    @staticmethod
    async def _insert_next(
        session: AsyncSession,
        new_version: EventVersion,
        expected_prior_version: int,
    ) -> None:
        slug = new_version.slug
        latest = await session.scalar(
            select(func.max(EventVersionRecord.version)).where(
                EventVersionRecord.slug == slug
            )
        )
        current = latest or 0
        if current != expected_prior_version:
            raise VersionConflictError(slug, expected_prior_version, current)

        session.add(
            EventVersionRecord(
                slug=slug,
                version=new_version.version,
                payload=copy.deepcopy(new_version.payload),
                ctime=new_version.ctime,
            )
        )
        try:
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            raise VersionConflictError(slug, expected_prior_version, None) from exc


__all__ = ["SqlVersionStore"]
