"""Emit structured observability events for event update submissions.

This module defines event identifiers and a logger wrapper used by
``EventUpdateService`` to record accepted, rejected, and failed updates.

Usage
-----
>>> event_logger = EventUpdateEventLogger()
>>> event_logger.log_update_accepted(slug="summer-2024", version=3)

"""

from __future__ import annotations

import enum
import typing as typ

from tourneybot.logging import get_logger, log_exception, log_info, log_warning

if typ.TYPE_CHECKING:
    from tourneybot.events.errors import StoreError, UpdateError

logger = get_logger(__name__)


class EventUpdateEventType(enum.StrEnum):
    """Structured log event types for update submissions."""

    UPDATE_ACCEPTED = "events.update.accepted"
    UPDATE_REJECTED = "events.update.rejected"
    UPDATE_FAILED = "events.update.failed"


class EventUpdateEventLogger:
    """Emit structured update events via femtologging."""

    def log_update_accepted(self, *, slug: str, version: int) -> None:
        """Log a durable new version for *slug*.

        Parameters
        ----------
        slug
            Event slug that received the new version.
        version
            Version number created by the update.

        """
        log_info(
            logger,
            "[%s] slug=%s version=%d",
            EventUpdateEventType.UPDATE_ACCEPTED,
            slug,
            version,
        )

    def log_update_rejected(
        self,
        *,
        slug: str,
        claimed_version: int,
        error: UpdateError,
    ) -> None:
        """Log a submission refused for bad credentials, shape, or version.

        The credential itself is never logged.

        Parameters
        ----------
        slug
            Event slug the submission targeted.
        claimed_version
            Version number the caller claimed to be creating.
        error
            The rejection raised back to the caller.

        """
        log_warning(
            logger,
            "[%s] slug=%s claimed_version=%d code=%s reason=%s",
            EventUpdateEventType.UPDATE_REJECTED,
            slug,
            claimed_version,
            error.code,
            error,
        )

    def log_update_failed(self, *, slug: str, error: StoreError) -> None:
        """Log a submission that failed because the store was unavailable."""
        message = (
            f"[{EventUpdateEventType.UPDATE_FAILED}] slug={slug} "
            f"error_type={type(error).__name__} error_message={error}"
        )
        log_exception(logger, message, error)


__all__ = ["EventUpdateEventLogger", "EventUpdateEventType"]
