"""TourneyBot HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application exposing tournament state over HTTP.

Usage
-----
Create and run the application::

    from tourneybot.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with event endpoints

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with
    health endpoints and, when an update service is provided, the event
    and password-check endpoints.
"""

from tourneybot.api.app import create_app

__all__ = ["create_app"]
