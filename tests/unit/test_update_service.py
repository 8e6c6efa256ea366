"""Unit tests for EventUpdateService."""

from __future__ import annotations

import asyncio
import typing as typ
from unittest import mock

import pytest

from tourneybot.config import StoreKind, TourneyBotConfig
from tourneybot.events import (
    EventNotFoundError,
    EventUpdateService,
    InvalidShapeError,
    StaleVersionError,
    StoreUnavailableError,
    UnauthorizedError,
    VersionConflictError,
)
from tourneybot.events.observability import EventUpdateEventLogger

from tests.helpers.documents import (
    TEST_PASSWORD,
    TEST_SLUG,
    make_document,
    make_full_document,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tourneybot.events.store import VersionStore


class TestSubmitUpdate:
    """Tests for the accept and reject paths of submit_update."""

    @pytest.mark.asyncio
    async def test_first_update_creates_version_one(
        self, update_service: EventUpdateService
    ) -> None:
        """Claiming version 1 on a new slug succeeds."""
        version = await update_service.submit_update(
            TEST_SLUG, TEST_PASSWORD, 1, make_document()
        )
        assert version == 1

    @pytest.mark.asyncio
    async def test_summer_cup_scenario(self, update_service: EventUpdateService) -> None:
        """Submit v1, resubmit v1 (stale), then submit v2."""
        first = await update_service.submit_update(
            TEST_SLUG, TEST_PASSWORD, 1, make_document()
        )
        with pytest.raises(StaleVersionError) as excinfo:
            await update_service.submit_update(
                TEST_SLUG, TEST_PASSWORD, 1, make_document()
            )
        second = await update_service.submit_update(
            TEST_SLUG, TEST_PASSWORD, 2, make_document("Summer Cup Finals")
        )

        assert first == 1
        assert excinfo.value.latest == 1, "stale error reports the latest version"
        assert second == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("claimed", [0, -3, 3, 10])
    async def test_claim_other_than_next_is_stale(
        self, update_service: EventUpdateService, store: VersionStore, claimed: int
    ) -> None:
        """Only latest + 1 is accepted."""
        await update_service.submit_update(TEST_SLUG, TEST_PASSWORD, 1, make_document())

        with pytest.raises(StaleVersionError):
            await update_service.submit_update(
                TEST_SLUG, TEST_PASSWORD, claimed, make_document()
            )
        assert await store.list_versions(TEST_SLUG) == [1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [make_document(), {"title": None}, "not even an object"],
        ids=["valid", "invalid", "garbage"],
    )
    async def test_wrong_password_is_unauthorized(
        self,
        update_service: EventUpdateService,
        store: VersionStore,
        payload: object,
    ) -> None:
        """A bad credential fails regardless of payload and writes nothing."""
        with pytest.raises(UnauthorizedError):
            await update_service.submit_update(TEST_SLUG, "guess", 1, payload)
        assert await store.get_latest(TEST_SLUG) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "teams", "games"])
    async def test_missing_field_is_invalid_shape(
        self,
        update_service: EventUpdateService,
        store: VersionStore,
        missing: str,
    ) -> None:
        """A payload lacking a required key fails and writes nothing."""
        payload = make_document()
        del payload[missing]

        with pytest.raises(InvalidShapeError) as excinfo:
            await update_service.submit_update(TEST_SLUG, TEST_PASSWORD, 1, payload)

        assert excinfo.value.field == missing
        assert await store.get_latest(TEST_SLUG) is None

    @pytest.mark.asyncio
    async def test_payload_recoverable_via_get_latest(
        self, update_service: EventUpdateService
    ) -> None:
        """A submitted document reads back unchanged apart from metadata."""
        payload = make_full_document()
        await update_service.submit_update(TEST_SLUG, TEST_PASSWORD, 1, payload)

        latest = await update_service.get_latest(TEST_SLUG)
        public = latest.to_public()

        assert latest.payload == payload
        assert public.pop("version") == 1
        assert isinstance(public.pop("ctime"), str)
        assert public == payload

    @pytest.mark.asyncio
    async def test_concurrent_updates_have_one_winner(
        self, update_service: EventUpdateService, store: VersionStore
    ) -> None:
        """Two submits claiming the same version: one wins, one is stale."""
        await update_service.submit_update(TEST_SLUG, TEST_PASSWORD, 1, make_document())

        results = await asyncio.gather(
            update_service.submit_update(
                TEST_SLUG, TEST_PASSWORD, 2, make_document("A")
            ),
            update_service.submit_update(
                TEST_SLUG, TEST_PASSWORD, 2, make_document("B")
            ),
            return_exceptions=True,
        )

        assert sorted(map(type, results), key=lambda t: t.__name__) == [
            StaleVersionError,
            int,
        ], f"expected one success and one stale version, got {results!r}"
        assert await store.list_versions(TEST_SLUG) == [1, 2]


class TestLostRace:
    """Store-level conflicts after the version check map to StaleVersionError."""

    @pytest.mark.asyncio
    async def test_conflict_from_store_becomes_stale(self, config: TourneyBotConfig) -> None:
        """A VersionConflictError from append surfaces as StaleVersionError."""
        store = mock.AsyncMock()
        store.get_latest.return_value = None
        store.append.side_effect = VersionConflictError(TEST_SLUG, 0, None)
        service = EventUpdateService(store, config)

        with pytest.raises(StaleVersionError) as excinfo:
            await service.submit_update(TEST_SLUG, TEST_PASSWORD, 1, make_document())

        assert excinfo.value.latest is None
        assert isinstance(excinfo.value.__cause__, VersionConflictError)

    @pytest.mark.asyncio
    async def test_store_outage_propagates(self, config: TourneyBotConfig) -> None:
        """StoreUnavailableError is passed through for the caller to retry."""
        store = mock.AsyncMock()
        store.get_latest.side_effect = StoreUnavailableError("get_latest")
        service = EventUpdateService(store, config)

        with pytest.raises(StoreUnavailableError):
            await service.submit_update(TEST_SLUG, TEST_PASSWORD, 1, make_document())
        store.append.assert_not_awaited()


class TestEventLogging:
    """Tests for structured update events."""

    @pytest.fixture
    def event_logger(self) -> mock.MagicMock:
        """Return a mock standing in for EventUpdateEventLogger."""
        return mock.MagicMock(spec=EventUpdateEventLogger)

    @pytest.fixture
    def logged_service(
        self, file_store: VersionStore, config: TourneyBotConfig, event_logger: mock.MagicMock
    ) -> EventUpdateService:
        """Return a service wired to the mock event logger."""
        return EventUpdateService(file_store, config, event_logger=event_logger)

    @pytest.mark.asyncio
    async def test_accepted_update_logged(
        self, logged_service: EventUpdateService, event_logger: mock.MagicMock
    ) -> None:
        """Successful updates emit an accepted event."""
        await logged_service.submit_update(TEST_SLUG, TEST_PASSWORD, 1, make_document())
        event_logger.log_update_accepted.assert_called_once_with(slug=TEST_SLUG, version=1)

    @pytest.mark.asyncio
    async def test_rejected_update_logged(
        self, logged_service: EventUpdateService, event_logger: mock.MagicMock
    ) -> None:
        """Rejected updates emit a rejected event carrying the error."""
        with pytest.raises(UnauthorizedError):
            await logged_service.submit_update(TEST_SLUG, "nope", 1, make_document())

        event_logger.log_update_rejected.assert_called_once()
        kwargs = event_logger.log_update_rejected.call_args.kwargs
        assert kwargs["claimed_version"] == 1
        assert isinstance(kwargs["error"], UnauthorizedError)
        event_logger.log_update_accepted.assert_not_called()


class TestServiceQueries:
    """Tests for check_password, get_latest and construction."""

    def test_check_password(self, update_service: EventUpdateService) -> None:
        """Only the configured secret is accepted."""
        assert update_service.check_password(TEST_PASSWORD) is True
        assert update_service.check_password("S3CR3T") is False
        assert update_service.check_password("") is False

    @pytest.mark.asyncio
    async def test_get_latest_unknown_slug(self, update_service: EventUpdateService) -> None:
        """Unknown slugs raise EventNotFoundError."""
        with pytest.raises(EventNotFoundError) as excinfo:
            await update_service.get_latest("never-created")
        assert excinfo.value.slug == "never-created"

    def test_requires_password(self, file_store: VersionStore, tmp_path: Path) -> None:
        """A configuration without a password cannot build the service."""
        config = TourneyBotConfig(store=StoreKind.FILE, data_dir=tmp_path)
        with pytest.raises(ValueError, match="requires a configured password"):
            EventUpdateService(file_store, config)
