"""Request exceptions and Falcon error handlers for the API layer.

This module defines ``InvalidInputError`` for malformed requests and the
Falcon error handler functions that translate it, and the domain errors
raised by the update service, into HTTP responses. Every error body carries
``title``, ``description`` and a machine-readable ``code`` so clients can
tell a stale version apart from a malformed document.

Usage
-----
Register all handlers on the Falcon app::

    from tourneybot.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from tourneybot.events.errors import (
    EventNotFoundError,
    InvalidShapeError,
    StaleVersionError,
    StoreUnavailableError,
    UnauthorizedError,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "InvalidInputError",
    "handle_event_not_found",
    "handle_invalid_input",
    "handle_invalid_shape",
    "handle_stale_version",
    "handle_store_unavailable",
    "handle_unauthorized",
    "register_error_handlers",
]

# Seconds clients should wait before retrying after a store outage
RETRY_AFTER_SECONDS = 1


class InvalidInputError(Exception):
    """Raised for malformed requests that should map to HTTP 400.

    Use this instead of ``ValueError`` so that only *intentional*
    validation failures are surfaced to the caller, while genuine
    programmer mistakes still propagate as unhandled 500s.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    code = "invalid_input"

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name.

        Parameters
        ----------
        reason
            Human-readable description of the validation failure.
        field
            Optional name of the input field that failed validation.

        """
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
        "code": ex.code,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_unauthorized(
    _req: Request,
    resp: Response,
    ex: UnauthorizedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UnauthorizedError`` to an HTTP 403 JSON response."""
    resp.status = falcon.HTTP_403
    resp.media = {
        "title": "Forbidden",
        "description": str(ex),
        "code": ex.code,
    }


async def handle_invalid_shape(
    _req: Request,
    resp: Response,
    ex: InvalidShapeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidShapeError`` to an HTTP 400 response naming the field.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The rejected update carrying the failing field.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    resp.media = {
        "title": "Invalid event format",
        "description": str(ex),
        "code": ex.code,
        "field": ex.field,
    }


async def handle_stale_version(
    _req: Request,
    resp: Response,
    ex: StaleVersionError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``StaleVersionError`` to an HTTP 400 response.

    The body includes ``latest_version`` when it is known so the client can
    re-fetch and resubmit with a corrected version.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The rejected update carrying claimed and latest versions.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    media: dict[str, typ.Any] = {
        "title": "Invalid version",
        "description": str(ex),
        "code": ex.code,
        "claimed_version": ex.claimed,
    }
    if ex.latest is not None:
        media["latest_version"] = ex.latest
    resp.media = media


async def handle_event_not_found(
    _req: Request,
    resp: Response,
    ex: EventNotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``EventNotFoundError`` to an HTTP 404 JSON response."""
    resp.status = falcon.HTTP_404
    resp.media = {
        "title": "Event not found",
        "description": str(ex),
        "code": ex.code,
    }


async def handle_store_unavailable(
    _req: Request,
    resp: Response,
    ex: StoreUnavailableError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``StoreUnavailableError`` to an HTTP 503 with ``Retry-After``."""
    resp.status = falcon.HTTP_503
    resp.set_header("Retry-After", str(RETRY_AFTER_SECONDS))
    resp.media = {
        "title": "Service unavailable",
        "description": str(ex),
        "code": ex.code,
    }


def register_error_handlers(app: App) -> None:
    """Register every domain error handler on *app*."""
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(UnauthorizedError, handle_unauthorized)
    app.add_error_handler(InvalidShapeError, handle_invalid_shape)
    app.add_error_handler(StaleVersionError, handle_stale_version)
    app.add_error_handler(EventNotFoundError, handle_event_not_found)
    app.add_error_handler(StoreUnavailableError, handle_store_unavailable)
