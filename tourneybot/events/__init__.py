"""Tournament event documents: validation, versioned storage, and updates."""

from __future__ import annotations

from .errors import (
    EventError,
    EventNotFoundError,
    InvalidShapeError,
    MalformedShapeError,
    StaleVersionError,
    StoreError,
    StoreUnavailableError,
    UnauthorizedError,
    UpdateError,
    VersionConflictError,
)
from .file_store import FileVersionStore
from .models import EventDocument, EventVersion
from .service import EventUpdateService
from .sql_store import SqlVersionStore
from .storage import EventVersionRecord, init_event_storage
from .store import VersionStore
from .validation import decode_event, validate_event

__all__ = [
    "EventDocument",
    "EventError",
    "EventNotFoundError",
    "EventUpdateService",
    "EventVersion",
    "EventVersionRecord",
    "FileVersionStore",
    "InvalidShapeError",
    "MalformedShapeError",
    "SqlVersionStore",
    "StaleVersionError",
    "StoreError",
    "StoreUnavailableError",
    "UnauthorizedError",
    "UpdateError",
    "VersionConflictError",
    "VersionStore",
    "decode_event",
    "init_event_storage",
    "validate_event",
]
