"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from tourneybot.config import StoreKind, TourneyBotConfig
from tourneybot.events import (
    EventUpdateService,
    FileVersionStore,
    SqlVersionStore,
    init_event_storage,
)

from tests.helpers.documents import TEST_PASSWORD

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tourneybot.events.store import VersionStore


@pytest_asyncio.fixture
async def session_factory(
    tmp_path: Path,
) -> typ.AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Yield a session factory backed by a fresh SQLite database.

    ``NullPool`` gives every session its own connection, so steps that drive
    the store through ``asyncio.run`` never reuse a connection created on
    another event loop.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tourneybot_test.db'}",
        poolclass=NullPool,
    )
    try:
        await init_event_storage(engine)
    except Exception:
        await engine.dispose()
        raise

    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest.fixture
def sql_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlVersionStore:
    """Return a SQL version store on the test database."""
    return SqlVersionStore(session_factory)


@pytest.fixture
def file_store(tmp_path: Path) -> FileVersionStore:
    """Return a file version store rooted in a temporary directory."""
    return FileVersionStore(tmp_path / "events")


@pytest.fixture(params=[StoreKind.SQL, StoreKind.FILE], ids=["sql", "file"])
def store(request: pytest.FixtureRequest) -> VersionStore:
    """Return each version store backend in turn."""
    if request.param is StoreKind.SQL:
        return request.getfixturevalue("sql_store")
    return request.getfixturevalue("file_store")


@pytest.fixture
def config(tmp_path: Path) -> TourneyBotConfig:
    """Return a configuration with the shared test password."""
    return TourneyBotConfig(
        password=TEST_PASSWORD,
        store=StoreKind.FILE,
        data_dir=tmp_path / "events",
    )


@pytest.fixture
def update_service(store: VersionStore, config: TourneyBotConfig) -> EventUpdateService:
    """Return an update service over the parametrised store."""
    return EventUpdateService(store, config)
