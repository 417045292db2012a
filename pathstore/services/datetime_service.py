"""Datetime parsing: lax input -> strict output."""

from __future__ import annotations

from datetime import datetime, timezone

import pendulum
from pendulum.parsing.exceptions import ParserError


def parse_datetime(value: str | datetime, default_tz: str = "UTC") -> datetime:
    """Parse a lax datetime value into a timezone-aware datetime.

    Accepts datetime objects (naive ones are assumed to be in default_tz)
    and strings such as:
    - 2026-02-02 22:21:29.975359+00
    - 2026-02-02 22:21:29
    - 2026-02-02
    - ISO 8601 variants with T separator

    Raises ValueError for unparseable strings.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            tz = pendulum.timezone(default_tz)
            value = value.replace(tzinfo=tz)  # type: ignore[arg-type]
        return value

    try:
        parsed = pendulum.parse(value.strip(), tz=default_tz, strict=False)
    except ParserError as exc:
        raise ValueError(f"Invalid datetime: {value!r}") from exc
    if not isinstance(parsed, pendulum.DateTime):
        if not isinstance(parsed, pendulum.Date):
            raise ValueError(f"Not a datetime: {value!r}")
        # pendulum.parse returns Date for date-only strings
        parsed = pendulum.datetime(parsed.year, parsed.month, parsed.day, tz=default_tz)
    return parsed


def to_timestamp(value: str | datetime) -> int:
    """Convert a stored timestamp to whole epoch seconds."""
    return int(parse_datetime(value).timestamp())


def now_utc() -> datetime:
    """Return the current UTC datetime truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)
