"""Application factory for the TourneyBot Falcon ASGI application.

This module provides ``create_app()`` which builds and configures the
Falcon ASGI application with health endpoints and, when an update service
is supplied, the event endpoints.

Usage
-----
Create a health-only app (no store)::

    app = create_app()

Create a full app with event endpoints::

    from tourneybot.api.app import AppDependencies, create_app

    deps = AppDependencies(store=store, update_service=service)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from tourneybot.api.errors import register_error_handlers
from tourneybot.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from tourneybot.events.service import EventUpdateService
    from tourneybot.events.store import VersionStore

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    When ``update_service`` is provided the application registers the
    event and password-check endpoints. ``store`` is probed by ``/ready``.

    Attributes
    ----------
    store
        Version store backing the update service.
    update_service
        Service that validates and appends event versions.

    """

    store: VersionStore | None = None
    update_service: EventUpdateService | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or missing an
        update service, only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    app = falcon.asgi.App()

    # Health endpoints are always available
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(deps.store))

    if deps.update_service is not None:
        from tourneybot.api.events.resources import (
            EventResource,
            PasswordCheckResource,
        )

        app.add_route("/events/{slug}", EventResource(deps.update_service))
        app.add_route("/password-check", PasswordCheckResource(deps.update_service))

    register_error_handlers(app)

    return app
