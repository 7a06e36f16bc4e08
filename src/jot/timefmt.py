"""Timestamp parsing and rendering helpers.

Timestamps are stored and sent over the wire as ISO 8601 UTC strings
("2026-01-13T15:00:00.000Z") and rendered in the user's IANA timezone.
"""

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/New_York"


def utc_now() -> datetime:
    """Get the current time as an aware UTC datetime, at millisecond precision.

    Matches the stored format so records compare equal after a reload.
    """
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def get_timezone(name: str | None) -> ZoneInfo:
    """Resolve an IANA timezone name.

    Args:
        name: Timezone name (e.g., "Europe/Berlin"). Empty means the default.

    Returns:
        ZoneInfo for the name, or UTC if the name is unknown.
    """
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, falling back to UTC")
        return ZoneInfo("UTC")


def local_now(timezone: str | None) -> datetime:
    """Get the current time in the given timezone."""
    return datetime.now(get_timezone(timezone))


def parse_timestamp(value: object) -> datetime | None:
    """Parse a stored or model-supplied timestamp.

    Accepts ISO 8601 strings (with "Z", an offset, or naive) and datetimes.
    Naive values are taken as UTC.

    Args:
        value: Raw timestamp value.

    Returns:
        Aware UTC datetime, or None if the value is missing or unparseable.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(dt: datetime | None) -> str | None:
    """Format a datetime as an ISO 8601 UTC string with millisecond precision."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    period = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {period}"


def format_due_local(dt: datetime, timezone: str | None) -> str:
    """Render a due date in the user's timezone.

    Example: "Tue, Jan 13, 3:00 PM".
    """
    local = dt.astimezone(get_timezone(timezone))
    return f"{local:%a, %b} {local.day}, {_clock(local)}"


def format_current_time(now_local: datetime) -> str:
    """Render the current local time for prompts.

    Example: "Sunday, October 18, 2026 at 3:05 PM".
    """
    return f"{now_local:%A, %B} {now_local.day}, {now_local.year} at {_clock(now_local)}"


__all__ = [
    "DEFAULT_TIMEZONE",
    "format_current_time",
    "format_due_local",
    "format_timestamp",
    "get_timezone",
    "local_now",
    "parse_timestamp",
    "utc_now",
]
