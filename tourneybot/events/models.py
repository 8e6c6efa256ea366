"""msgspec models for tournament event documents and stored versions."""

from __future__ import annotations

import copy
import datetime as dt
import typing as typ

import msgspec

Payload: typ.TypeAlias = dict[str, typ.Any]


class EventDocument(msgspec.Struct, kw_only=True, frozen=True):
    """Validated view over a submitted tournament document.

    Attributes
    ----------
    title
        Display title of the tournament.
    teams
        Ordered team records; contents are not inspected.
    games
        Game records keyed by game id, or a plain list of games.
    payload
        The complete document exactly as submitted, including any keys
        beyond the three checked ones.

    """

    title: str
    teams: list[typ.Any]
    games: dict[str, typ.Any] | list[typ.Any]
    payload: Payload


class EventVersion(msgspec.Struct, kw_only=True, frozen=True):
    """One immutable snapshot of an event as returned by a version store."""

    slug: str
    version: int
    payload: Payload
    ctime: dt.datetime

    def to_public(self) -> Payload:
        """Return the payload merged with ``version`` and ``ctime`` metadata.

        The payload is deep-copied so callers can never mutate a stored
        snapshot through the returned mapping.
        """
        document = copy.deepcopy(self.payload)
        document["version"] = self.version
        document["ctime"] = self.ctime.isoformat()
        return document


__all__ = ["EventDocument", "EventVersion", "Payload"]
