"""TourneyBot runtime entrypoint.

This module provides the ASGI application factory used by Granian. It reads
``TourneyBotConfig`` from the environment once, builds the version store and
update service, and delegates to :func:`tourneybot.api.app.create_app`.

When ``TOURNEYBOT_PASSWORD`` is set the app serves the event endpoints;
otherwise it starts in health-only mode. See
:meth:`tourneybot.config.TourneyBotConfig.from_env` for every variable.

Run the service directly with ``python -m tourneybot.runtime``.
"""

from __future__ import annotations

import asyncio
import typing as typ

from tourneybot.config import ConfigError, TourneyBotConfig
from tourneybot.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "load_config", "main"]

logger = get_logger(__name__)


def load_config() -> TourneyBotConfig:
    """Read configuration from the environment or exit with status 1.

    Raises
    ------
    SystemExit
        If any ``TOURNEYBOT_*`` variable is invalid.

    """
    try:
        return TourneyBotConfig.from_env()
    except ConfigError as exc:
        # Use error() not exception() - validation failures need no traceback
        log_error(logger, "Invalid configuration: %s", exc)
        raise SystemExit(1) from exc


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    from tourneybot.api.app import create_app as _create_api_app
    from tourneybot.api.factory import build_app_dependencies

    return _create_api_app(build_app_dependencies(load_config()))


def main() -> None:
    """Prepare storage and start the TourneyBot server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    from tourneybot.api.factory import prepare_storage

    config = load_config()

    # Configure logging - validate log level and warn on invalid values
    normalized_level, invalid_level = configure_logging(config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid TOURNEYBOT_LOG_LEVEL %r, falling back to %s",
            config.log_level,
            normalized_level,
        )

    if not config.has_event_endpoints:
        log_warning(
            logger, "TOURNEYBOT_PASSWORD is not set; serving health endpoints only"
        )
    asyncio.run(prepare_storage(config))

    log_info(
        logger,
        "Starting TourneyBot on %s:%d (store=%s, log_level=%s)",
        config.host,
        config.port,
        config.store,
        normalized_level,
    )

    server = Granian(
        "tourneybot.runtime:create_app",
        address=config.host,
        port=config.port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
