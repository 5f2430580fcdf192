from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

NOT_AVAILABLE = "N/A"

_TIME_LABEL = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(am|pm)?\s*$", re.IGNORECASE)


def parse_time_label(label: str | None) -> tuple[int, int] | None:
    """Parse "2:00 PM" (or 24h "14:00") into (hour, minute). None if invalid."""
    match = _TIME_LABEL.match(label or "")
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    period = (match.group(3) or "").lower()

    if period:
        if not 1 <= hour <= 12:
            return None
        if period == "pm" and hour != 12:
            hour += 12
        elif period == "am" and hour == 12:
            hour = 0

    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return (hour, minute)
    return None


def format_time_for_api(label: str) -> str:
    """ "2:00 PM" -> "14:00" """
    parsed = parse_time_label(label)
    if parsed is None:
        raise ValueError(f"Invalid time label: {label!r}")
    hour, minute = parsed
    return f"{hour:02d}:{minute:02d}"


def format_date_for_api(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_instant(value: object) -> datetime | None:
    """
    Parse a server timestamp into an aware UTC datetime.

    Accepts datetimes, ISO-8601 strings (with "Z" or an offset) and epoch
    seconds. Naive values are taken as UTC. Anything else yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_hms(delta: timedelta) -> str:
    total = max(0, int(delta.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_clock(instant: datetime, tz: ZoneInfo) -> str:
    """12-hour clock label, e.g. "02:00 PM"."""
    return instant.astimezone(tz).strftime("%I:%M %p")


def format_slot_window(start: datetime | None, end: datetime | None, tz: ZoneInfo) -> str:
    if start is None or end is None:
        return NOT_AVAILABLE
    return f"{format_clock(start, tz)} - {format_clock(end, tz)}"


def format_slot_date(start: datetime | None, tz: ZoneInfo) -> str:
    if start is None:
        return NOT_AVAILABLE
    local = start.astimezone(tz)
    return f"{local.strftime('%B').upper()} {local.day} {local.year}"
