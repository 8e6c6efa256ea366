"""Factories for building the version store and update service from config.

This module turns a ``TourneyBotConfig`` into the collaborators the API
needs. The storage backend is chosen here and nowhere else, so the update
service never knows whether it is writing rows or files.

Usage
-----
Build application dependencies for the API layer::

    from tourneybot.api.factory import build_app_dependencies

    deps = build_app_dependencies(TourneyBotConfig.from_env())
    app = create_app(deps)

"""

from __future__ import annotations

import asyncio
import typing as typ

from tourneybot.api.app import AppDependencies
from tourneybot.config import StoreKind
from tourneybot.events.service import EventUpdateService
from tourneybot.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tourneybot.config import TourneyBotConfig
    from tourneybot.events.store import VersionStore

__all__ = ["build_app_dependencies", "build_version_store", "prepare_storage"]

logger = get_logger(__name__)


def build_version_store(config: TourneyBotConfig) -> VersionStore:
    """Create the version store selected by ``config.store``.

    Parameters
    ----------
    config
        Runtime configuration naming the backend and its location.

    Returns
    -------
    VersionStore
        A ``SqlVersionStore`` or ``FileVersionStore``.

    """
    if config.store is StoreKind.FILE:
        from tourneybot.events.file_store import FileVersionStore

        data_dir = typ.cast("Path", config.data_dir)
        return FileVersionStore(data_dir)

    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from tourneybot.events.sql_store import SqlVersionStore

    engine = create_async_engine(
        typ.cast("str", config.database_url), pool_pre_ping=True
    )
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    return SqlVersionStore(session_factory)


def build_app_dependencies(config: TourneyBotConfig) -> AppDependencies:
    """Assemble ``AppDependencies`` for *config*.

    Returns health-only dependencies when no password is configured.
    """
    if not config.has_event_endpoints:
        return AppDependencies()

    store = build_version_store(config)
    return AppDependencies(
        store=store,
        update_service=EventUpdateService(store, config),
    )


async def prepare_storage(config: TourneyBotConfig) -> None:
    """Create the event table or data directory before serving traffic."""
    if not config.has_event_endpoints:
        return

    if config.store is StoreKind.FILE:
        data_dir = typ.cast("Path", config.data_dir)
        await asyncio.to_thread(data_dir.mkdir, parents=True, exist_ok=True)
        log_info(logger, "Using file version store at %s", data_dir)
        return

    from sqlalchemy.ext.asyncio import create_async_engine

    from tourneybot.events.storage import init_event_storage

    engine = create_async_engine(typ.cast("str", config.database_url))
    try:
        await init_event_storage(engine)
    finally:
        await engine.dispose()
    log_info(logger, "Event storage initialised for %s", engine.url.render_as_string())

