r"""Filesystem adapter for the VersionStore protocol.

Stores every version as its own immutable JSON file with a predictable
layout::

    {root}/{slug}/v00000001.json
    {root}/{slug}/v00000002.json

Each file holds ``{"version": ..., "ctime": ..., "payload": ...}``. A new
version is written to a temporary file first and then hard-linked into
place; ``os.link`` refuses to replace an existing name, so two processes
racing for the same version cannot both succeed and readers never observe
a half-written file.

Usage
-----
>>> import asyncio
>>> from pathlib import Path
>>> store = FileVersionStore(Path("/var/lib/tourneybot/events"))
>>> asyncio.run(store.append("summer-2024", 0, {"title": "Summer Cup",
...                                             "teams": [], "games": {}}))

"""

from __future__ import annotations

import asyncio
import contextlib
import datetime as dt
import os
import re
import tempfile
import typing as typ

import msgspec

from tourneybot.common.slug import parse_event_slug
from tourneybot.common.time import ensure_utc, utcnow
from tourneybot.events.errors import StoreUnavailableError, VersionConflictError
from tourneybot.events.models import EventVersion
from tourneybot.events.store import check_expected_version

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tourneybot.events.models import Payload

_VERSION_FILE = re.compile(r"^v(\d{8})\.json$")


class _StoredVersion(msgspec.Struct, kw_only=True):
    """On-disk representation of one version."""

    version: int
    ctime: dt.datetime
    payload: dict[str, typ.Any]


def _file_name(version: int) -> str:
    return f"v{version:08d}.json"


class FileVersionStore:
    """Append-only version store on the local filesystem.

    Parameters
    ----------
    root
        Directory under which one subdirectory per slug is created.

    """

    def __init__(self, root: Path) -> None:
        """Initialise the store with its root directory."""
        self._root = root

    def _slug_dir(self, slug: str) -> Path:
        return self._root / parse_event_slug(slug)

    @staticmethod
    def _version_numbers(slug_dir: Path) -> list[int]:
        if not slug_dir.is_dir():
            return []
        numbers = []
        for entry in slug_dir.iterdir():
            match = _VERSION_FILE.match(entry.name)
            if match is not None:
                numbers.append(int(match.group(1)))
        return sorted(numbers)

    def _read_latest(self, slug: str) -> EventVersion | None:
        slug_dir = self._slug_dir(slug)
        numbers = self._version_numbers(slug_dir)
        if not numbers:
            return None
        raw = (slug_dir / _file_name(numbers[-1])).read_bytes()
        stored = msgspec.json.decode(raw, type=_StoredVersion)
        return EventVersion(
            slug=slug,
            version=stored.version,
            payload=stored.payload,
            ctime=ensure_utc(stored.ctime),
        )

    def _write_next(self, new_version: EventVersion, expected_prior_version: int) -> None:
        slug = new_version.slug
        slug_dir = self._slug_dir(slug)
        slug_dir.mkdir(parents=True, exist_ok=True)

        numbers = self._version_numbers(slug_dir)
        current = numbers[-1] if numbers else 0
        if current != expected_prior_version:
            raise VersionConflictError(slug, expected_prior_version, current)

        encoded = msgspec.json.encode(
            _StoredVersion(
                version=new_version.version,
                ctime=new_version.ctime,
                payload=new_version.payload,
            )
        )
        with tempfile.NamedTemporaryFile(
            dir=slug_dir, prefix=".pending-", suffix=".tmp", delete=False
        ) as handle:
            pending = handle.name
            try:
                handle.write(encoded)
                handle.flush()
                os.fsync(handle.fileno())
            except OSError:
                os.unlink(pending)
                raise

        try:
            os.link(pending, slug_dir / _file_name(new_version.version))
        except FileExistsError as exc:
            raise VersionConflictError(slug, expected_prior_version, None) from exc
        finally:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(pending)

    async def get_latest(self, slug: str) -> EventVersion | None:
        """Return the newest version file for *slug*, or None."""
        try:
            return await asyncio.to_thread(self._read_latest, slug)
        except (OSError, msgspec.DecodeError) as exc:
            raise StoreUnavailableError("get_latest") from exc

    async def list_versions(self, slug: str) -> list[int]:
        """Return the version numbers present on disk for *slug*."""
        try:
            return await asyncio.to_thread(self._version_numbers, self._slug_dir(slug))
        except OSError as exc:
            raise StoreUnavailableError("list_versions") from exc

    async def append(
        self,
        slug: str,
        expected_prior_version: int,
        payload: Payload,
    ) -> EventVersion:
        """Write ``expected_prior_version + 1`` for *slug* if it is next."""
        check_expected_version(expected_prior_version)
        new_version = EventVersion(
            slug=slug,
            version=expected_prior_version + 1,
            payload=msgspec.json.decode(msgspec.json.encode(payload)),
            ctime=utcnow(),
        )
        try:
            await asyncio.to_thread(self._write_next, new_version, expected_prior_version)
        except OSError as exc:
            raise StoreUnavailableError("append") from exc
        return new_version


__all__ = ["FileVersionStore"]
