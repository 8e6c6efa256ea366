"""Error taxonomy for event validation, storage, and updates.

Every error carries a stable ``code`` so the transport layer and clients can
decide whether to re-authenticate, fix their input, or re-read and retry.
"""

from __future__ import annotations

import typing as typ


class EventError(Exception):
    """Base class for event module errors."""

    code: typ.ClassVar[str] = "event_error"


class MalformedShapeError(EventError, ValueError):
    """Raised when a payload does not look like a tournament event.

    Attributes
    ----------
    field
        First field that failed the shape checks: ``payload``, ``title``,
        ``teams`` or ``games``.

    """

    code: typ.ClassVar[str] = "malformed_shape"

    _EXPECTATIONS: typ.ClassVar[dict[str, str]] = {
        "payload": "must be a JSON object",
        "title": "must be a string",
        "teams": "must be a list",
        "games": "must be an object or a list",
    }

    def __init__(self, field: str) -> None:
        """Build the message from the failing field name."""
        self.field = field
        self.reason = self._EXPECTATIONS.get(field, "is malformed")
        super().__init__(f"{field} {self.reason}")


# Store errors


class StoreError(EventError):
    """Base class for version store failures."""

    code: typ.ClassVar[str] = "store_error"


class VersionConflictError(StoreError):
    """Raised when the latest version differs from the caller's expectation."""

    code: typ.ClassVar[str] = "version_conflict"

    def __init__(self, slug: str, expected: int, actual: int | None) -> None:
        """Record both versions; ``actual`` is None when a racing write won."""
        self.slug = slug
        self.expected = expected
        self.actual = actual
        found = "a concurrent write" if actual is None else f"version {actual}"
        super().__init__(
            f"event {slug!r} expected latest version {expected} but found {found}"
        )


class StoreUnavailableError(StoreError):
    """Raised when the durable store cannot be reached; safe to retry."""

    code: typ.ClassVar[str] = "store_unavailable"

    def __init__(self, operation: str) -> None:
        """Name the store operation that failed."""
        self.operation = operation
        super().__init__(f"version store unavailable during {operation}")


class EventNotFoundError(EventError):
    """Raised when a slug has no stored versions."""

    code: typ.ClassVar[str] = "event_not_found"

    def __init__(self, slug: str) -> None:
        """Record the missing slug."""
        self.slug = slug
        super().__init__(f"No event matching {slug!r} exists.")


# Update errors


class UpdateError(EventError):
    """Base class for rejected update submissions."""

    code: typ.ClassVar[str] = "update_error"


class UnauthorizedError(UpdateError):
    """Raised when the submitted credential does not match the secret."""

    code: typ.ClassVar[str] = "unauthorized"

    def __init__(self) -> None:
        """Use the same message for every credential mismatch."""
        super().__init__("wrong password")


class InvalidShapeError(UpdateError):
    """Raised when an update payload fails the shape checks."""

    code: typ.ClassVar[str] = "invalid_shape"

    def __init__(self, field: str, reason: str) -> None:
        """Record the failing field and the expectation it missed."""
        self.field = field
        self.reason = reason
        super().__init__(f"invalid event format: {field} {reason}")

    @classmethod
    def from_malformed(cls, exc: MalformedShapeError) -> InvalidShapeError:
        """Translate a validator error into an update error."""
        return cls(exc.field, exc.reason)


class StaleVersionError(UpdateError):
    """Raised when the claimed version is not exactly ``latest + 1``."""

    code: typ.ClassVar[str] = "stale_version"

    def __init__(self, slug: str, claimed: int, latest: int | None) -> None:
        """Record the claimed version and the latest one observed."""
        self.slug = slug
        self.claimed = claimed
        self.latest = latest
        if latest is None:
            detail = "another update was accepted first"
        else:
            detail = f"latest is {latest}, expected {latest + 1}"
        super().__init__(f"invalid version {claimed} for {slug!r}: {detail}")


__all__ = [
    "EventError",
    "EventNotFoundError",
    "InvalidShapeError",
    "MalformedShapeError",
    "StaleVersionError",
    "StoreError",
    "StoreUnavailableError",
    "UnauthorizedError",
    "UpdateError",
    "VersionConflictError",
]
