"""Event slug utilities.

Event slugs are the human-readable keys tournaments are stored under, such as
``summer-2024``. The stores treat them as opaque strings; the HTTP layer uses
these helpers to reject slugs that would be unsafe in a URL or a directory
name.
"""

from __future__ import annotations

import re

EVENT_SLUG_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,126}[a-z0-9])?$")


def is_event_slug(slug: str) -> bool:
    """Return whether *slug* is a well-formed event slug.

    Examples
    --------
    >>> is_event_slug("summer-2024")
    True
    >>> is_event_slug("../etc")
    False

    """
    return EVENT_SLUG_PATTERN.fullmatch(slug) is not None


def parse_event_slug(slug: str) -> str:
    """Validate and return an event slug.

    Parameters
    ----------
    slug:
        Candidate slug, typically taken from a URL path segment.

    Returns
    -------
    str
        The unchanged slug.

    Raises
    ------
    ValueError
        If the slug is not lowercase alphanumerics separated by hyphens.

    Examples
    --------
    >>> parse_event_slug("summer-2024")
    'summer-2024'

    """
    if not is_event_slug(slug):
        msg = (
            "Invalid event slug: expected lowercase letters, digits and "
            f"hyphens, got {slug!r}"
        )
        raise ValueError(msg)
    return slug
