"""VersionStore protocol for append-only event persistence.

This module defines the port the update service depends on. Adapters keep
an ordered, gap-free sequence of immutable versions per slug and expose a
single concurrency-sensitive operation: compare-and-append.

The protocol is ``runtime_checkable`` to support ``isinstance`` checks
when wiring dependencies.

Usage
-----
>>> from tourneybot.events.store import VersionStore
>>> from tourneybot.events.file_store import FileVersionStore
>>> isinstance(FileVersionStore(Path(".")), VersionStore)
True

"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from tourneybot.events.models import EventVersion, Payload


@typ.runtime_checkable
class VersionStore(typ.Protocol):
    """Protocol for durable, versioned event storage."""

    async def get_latest(self, slug: str) -> EventVersion | None:
        """Return the highest stored version for *slug*, or None."""
        ...

    async def append(
        self,
        slug: str,
        expected_prior_version: int,
        payload: Payload,
    ) -> EventVersion:
        """Append ``expected_prior_version + 1`` if it is the next version.

        Parameters
        ----------
        slug
            Event key.
        expected_prior_version
            Version the caller believes is latest; ``0`` for a new slug.
        payload
            Document to store; implementations persist a copy.

        Raises
        ------
        VersionConflictError
            If the latest version is not *expected_prior_version*, or a
            concurrent append claimed the same version first.
        StoreUnavailableError
            If the underlying storage cannot be reached.

        """
        ...

    async def list_versions(self, slug: str) -> list[int]:
        """Return the stored version numbers for *slug* in ascending order."""
        ...


def check_expected_version(expected_prior_version: int) -> None:
    """Reject negative prior versions before touching storage.

    Raises
    ------
    ValueError
        If *expected_prior_version* is below zero.

    """
    if expected_prior_version < 0:
        msg = f"expected_prior_version must be >= 0, got {expected_prior_version}"
        raise ValueError(msg)


__all__ = ["VersionStore", "check_expected_version"]
