"""Health probe resources for liveness and readiness checks.

``HealthResource`` never touches storage. ``ReadyResource`` optionally
probes the version store so an orchestrator stops routing traffic while the
database or data directory is unreachable.

Usage
-----
Register health endpoints on the Falcon app::

    from tourneybot.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(store))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from tourneybot.events.errors import StoreUnavailableError
from tourneybot.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from tourneybot.events.store import VersionStore

__all__ = ["HealthResource", "ReadyResource"]

logger = get_logger(__name__)

# Slug read by the readiness probe; it never needs to exist.
PROBE_SLUG = "readiness-probe"


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource.

    Responds ``{"status": "ready"}`` with HTTP 200 when no store is
    configured or the store answers a read, and ``{"status":
    "unavailable"}`` with HTTP 503 when the store read fails.

    Parameters
    ----------
    store
        Version store to probe, or ``None`` in health-only mode.

    """

    def __init__(self, store: VersionStore | None = None) -> None:
        """Remember the store to probe on each request."""
        self._store = store

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        if self._store is not None:
            try:
                await self._store.get_latest(PROBE_SLUG)
            except StoreUnavailableError as exc:
                log_warning(logger, "Readiness probe failed: %s", exc)
                resp.media = {"status": "unavailable"}
                resp.status = HTTPStatus.SERVICE_UNAVAILABLE
                return

        resp.media = {"status": "ready"}
        resp.status = HTTPStatus.OK
