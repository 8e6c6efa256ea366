"""Update service enforcing authentication, shape, and version ordering.

``EventUpdateService`` is the only path through which new event versions
are created. A submission must carry the shared password, a document that
passes :func:`~tourneybot.events.validation.validate_event`, and a claimed
version exactly one above the latest stored version. The last rule is the
optimistic-concurrency contract: the caller must have read the latest
version before submitting, and any interleaving update makes the
submission stale.

Usage
-----
>>> service = EventUpdateService(store, config)
>>> await service.submit_update("summer-2024", "s3cr3t", 1, document)
1

"""

from __future__ import annotations

import secrets
import typing as typ

from tourneybot.events.errors import (
    EventNotFoundError,
    InvalidShapeError,
    MalformedShapeError,
    StaleVersionError,
    StoreUnavailableError,
    UnauthorizedError,
    UpdateError,
    VersionConflictError,
)
from tourneybot.events.observability import EventUpdateEventLogger
from tourneybot.events.validation import validate_event

if typ.TYPE_CHECKING:
    from tourneybot.config import TourneyBotConfig
    from tourneybot.events.models import EventVersion
    from tourneybot.events.store import VersionStore

__all__ = ["EventUpdateService"]


class EventUpdateService:
    """Accept or reject event updates against a version store.

    Parameters
    ----------
    store
        Durable version store; the sole arbiter of append ordering.
    config
        Process configuration carrying the shared password.
    event_logger
        Optional structured event logger; a default is created when omitted.

    """

    def __init__(
        self,
        store: VersionStore,
        config: TourneyBotConfig,
        *,
        event_logger: EventUpdateEventLogger | None = None,
    ) -> None:
        """Bind the service to its store and configuration."""
        if config.password is None:
            msg = "EventUpdateService requires a configured password"
            raise ValueError(msg)
        self._store = store
        self._password = config.password
        self._event_logger = event_logger or EventUpdateEventLogger()

    def check_password(self, credential: str) -> bool:
        """Return whether *credential* matches the shared password."""
        return secrets.compare_digest(
            credential.encode("utf-8"), self._password.encode("utf-8")
        )

    async def get_latest(self, slug: str) -> EventVersion:
        """Return the latest version of *slug*.

        Raises
        ------
        EventNotFoundError
            If the slug has no stored versions.

        """
        latest = await self._store.get_latest(slug)
        if latest is None:
            raise EventNotFoundError(slug)
        return latest

    async def submit_update(
        self,
        slug: str,
        credential: str,
        claimed_version: int,
        payload: object,
    ) -> int:
        """Create version *claimed_version* of *slug* from *payload*.

        Parameters
        ----------
        slug
            Event key.
        credential
            Password supplied by the caller.
        claimed_version
            Version the caller is creating; must equal latest + 1.
        payload
            Decoded JSON document.

        Returns
        -------
        int
            The newly created version number.

        Raises
        ------
        UnauthorizedError
            If *credential* is wrong; the store is not touched.
        InvalidShapeError
            If *payload* fails shape validation; the store is not touched.
        StaleVersionError
            If *claimed_version* is not latest + 1, including when a
            concurrent update claimed the same version first.
        StoreUnavailableError
            If the store cannot be reached; safe to retry after re-reading.

        """
        try:
            version = await self._accept(slug, credential, claimed_version, payload)
        except UpdateError as exc:
            self._event_logger.log_update_rejected(
                slug=slug, claimed_version=claimed_version, error=exc
            )
            raise
        except StoreUnavailableError as exc:
            self._event_logger.log_update_failed(slug=slug, error=exc)
            raise

        self._event_logger.log_update_accepted(slug=slug, version=version)
        return version

    async def _accept(
        self,
        slug: str,
        credential: str,
        claimed_version: int,
        payload: object,
    ) -> int:
        if not self.check_password(credential):
            raise UnauthorizedError

        try:
            document = validate_event(payload)
        except MalformedShapeError as exc:
            raise InvalidShapeError.from_malformed(exc) from exc

        latest = await self._store.get_latest(slug)
        latest_version = 0 if latest is None else latest.version
        if claimed_version != latest_version + 1:
            raise StaleVersionError(slug, claimed_version, latest_version)

        try:
            created = await self._store.append(
                slug, latest_version, document.payload
            )
        except VersionConflictError as exc:
            raise StaleVersionError(slug, claimed_version, exc.actual) from exc
        return created.version
