"""Miscellaneous helper functions."""

from __future__ import annotations

import datetime as dt
from typing import Optional


def utc_today() -> dt.date:
    """Return the current calendar date in UTC."""
    return dt.datetime.now(dt.timezone.utc).date()


def parse_iso_date(value: str | None) -> Optional[dt.date]:
    """Parse an ISO8601 date or datetime string into a :class:`date`.

    Models occasionally return a full timestamp instead of the requested
    ``YYYY-MM-DD``. Timestamps are accepted (a lowercase ``z`` UTC
    designator included) and truncated to their date part. Returns
    ``None`` if the value cannot be parsed.
    """
    if not value:
        return None
    value = value.strip()
    if value.endswith("z"):
        value = value[:-1] + "Z"
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(value).date()
    except ValueError:
        return None


def one_year_before(day: dt.date) -> dt.date:
    """Return the same calendar day one year earlier (Feb 29 maps to Feb 28)."""
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        return day.replace(year=day.year - 1, day=28)
