"""Shape validation for submitted tournament documents.

The checks are intentionally shallow: a document is accepted when it is a
JSON object with a string ``title``, a list of ``teams`` and an object or
list of ``games``. Team and game records are opaque.

Usage
-----
>>> document = validate_event({"title": "Summer Cup", "teams": [], "games": {}})
>>> document.title
'Summer Cup'
>>> validate_event({"title": 7, "teams": [], "games": {}})
Traceback (most recent call last):
    ...
tourneybot.events.errors.MalformedShapeError: title must be a string

"""

from __future__ import annotations

import typing as typ

import msgspec

from tourneybot.events.errors import MalformedShapeError
from tourneybot.events.models import EventDocument

if typ.TYPE_CHECKING:
    from tourneybot.events.models import Payload


def _require_object(payload: object) -> Payload:
    if not isinstance(payload, dict) or not all(isinstance(k, str) for k in payload):
        raise MalformedShapeError("payload")
    return typ.cast("Payload", payload)


def validate_event(payload: object) -> EventDocument:
    """Validate a decoded payload and return its typed view.

    Parameters
    ----------
    payload
        Decoded JSON value submitted by a client.

    Returns
    -------
    EventDocument
        Typed view retaining the original payload verbatim.

    Raises
    ------
    MalformedShapeError
        Naming the first field that failed, checked in the order
        payload, title, teams, games.

    """
    document = _require_object(payload)

    match document.get("title"):
        case str() as title:
            pass
        case _:
            raise MalformedShapeError("title")

    match document.get("teams"):
        case list() as teams:
            pass
        case _:
            raise MalformedShapeError("teams")

    match document.get("games"):
        case dict() | list() as games:
            pass
        case _:
            raise MalformedShapeError("games")

    return EventDocument(title=title, teams=teams, games=games, payload=document)


def decode_event(raw: bytes | str) -> EventDocument:
    """Decode a JSON document and validate its shape.

    Raises
    ------
    MalformedShapeError
        If *raw* is not valid JSON or fails :func:`validate_event`.

    """
    try:
        decoded = msgspec.json.decode(raw)
    except msgspec.DecodeError as exc:
        raise MalformedShapeError("payload") from exc
    return validate_event(decoded)


__all__ = ["decode_event", "validate_event"]
