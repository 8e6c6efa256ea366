"""Event API resources for reading and updating tournament state.

This module provides:

- ``EventResource``: ``GET /events/{slug}`` returns the latest version and
  ``POST /events/{slug}`` submits a new version.
- ``PasswordCheckResource``: ``POST /password-check`` lets the admin
  client verify the shared password before editing.

Request bodies are JSON and are decoded with msgspec; malformed bodies
raise ``InvalidInputError`` while document shape problems surface from the
update service as ``InvalidShapeError``.

Usage
-----
Register the resources on the Falcon app::

    app.add_route("/events/{slug}", EventResource(service))
    app.add_route("/password-check", PasswordCheckResource(service))

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from tourneybot.api.errors import InvalidInputError
from tourneybot.common.slug import is_event_slug

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from tourneybot.events.service import EventUpdateService

__all__ = ["EventResource", "PasswordCheckResource"]

T = typ.TypeVar("T")


class UpdateRequest(msgspec.Struct, kw_only=True, frozen=True):
    """Body of ``POST /events/{slug}``.

    ``data`` is left untyped so that document shape problems are reported
    by the event validator rather than as generic decode errors.
    """

    password: str
    version: int
    data: typ.Any = None


class PasswordCheckRequest(msgspec.Struct, kw_only=True, frozen=True):
    """Body of ``POST /password-check``."""

    password: str


async def _decode_body(req: Request, body_type: type[T]) -> T:
    """Read the request body and decode it as *body_type*.

    Raises
    ------
    InvalidInputError
        If the body is empty, not JSON, or does not match *body_type*.

    """
    raw = await req.stream.read()
    if not raw:
        msg = "request body must be a JSON object"
        raise InvalidInputError(msg, field="body")
    try:
        return msgspec.json.decode(raw, type=body_type)
    except msgspec.ValidationError as exc:
        raise InvalidInputError(str(exc), field="body") from exc
    except msgspec.DecodeError as exc:
        msg = "request body must be valid JSON"
        raise InvalidInputError(msg, field="body") from exc


def _require_slug(slug: str) -> str:
    if not is_event_slug(slug):
        msg = "must be lowercase letters, digits and hyphens"
        raise InvalidInputError(msg, field="slug")
    return slug


class EventResource:
    """Resource for one tournament event addressed by slug."""

    def __init__(self, service: EventUpdateService) -> None:
        """Configure the resource with the update service."""
        self._service = service

    async def on_get(self, _req: Request, resp: Response, *, slug: str) -> None:
        """Return the latest version merged with ``version`` and ``ctime``.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response object.
        slug
            Event slug from the URL path.

        """
        latest = await self._service.get_latest(_require_slug(slug))
        resp.media = latest.to_public()
        resp.status = falcon.HTTP_200

    async def on_post(self, req: Request, resp: Response, *, slug: str) -> None:
        """Submit a new version of the event.

        Parameters
        ----------
        req
            Falcon request carrying ``password``, ``version`` and ``data``.
        resp
            Falcon response object.
        slug
            Event slug from the URL path.

        """
        _require_slug(slug)
        body = await _decode_body(req, UpdateRequest)

        version = await self._service.submit_update(
            slug, body.password, body.version, body.data
        )

        resp.media = {"message": "event updated!", "slug": slug, "version": version}
        resp.status = falcon.HTTP_201


class PasswordCheckResource:
    """Resource that reports whether a password is the shared secret."""

    def __init__(self, service: EventUpdateService) -> None:
        """Configure the resource with the update service."""
        self._service = service

    async def on_post(self, req: Request, resp: Response) -> None:
        """Respond with ``{"valid": bool}`` for the submitted password."""
        body = await _decode_body(req, PasswordCheckRequest)
        resp.media = {"valid": self._service.check_password(body.password)}
        resp.status = falcon.HTTP_200
