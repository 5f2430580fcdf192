"""
Which (day, time) pairs may be picked in the booking form.

All functions take ``now`` in the viewer's local time zone. This only rules out
obviously invalid picks; the Scheduling API remains the authority on real
availability and rejects double bookings with a conflict error.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from mockprep.application.utils.time_format import parse_time_label
from mockprep.domain.entities.date_slot import DateSlotCandidate, TimeOption

TIME_SLOT_LABELS: tuple[str, ...] = (
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "1:00 PM",
    "2:00 PM",
    "3:00 PM",
    "4:00 PM",
    "5:00 PM",
)

BOOKING_WINDOW_DAYS = 7

_DAY_LABELS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")


def window_days(now: datetime, days: int = BOOKING_WINDOW_DAYS) -> list[date]:
    today = now.date()
    return [today + timedelta(days=i) for i in range(days)]


def slot_instant(day: date, label: str, now: datetime) -> datetime | None:
    parsed = parse_time_label(label)
    if parsed is None:
        return None
    hour, minute = parsed
    return datetime.combine(day, time(hour, minute), tzinfo=now.tzinfo)


def is_time_slot_disabled(day: date, label: str, now: datetime) -> bool:
    today = now.date()
    if day > today:
        return label not in TIME_SLOT_LABELS
    if day < today or label not in TIME_SLOT_LABELS:
        return True

    instant = slot_instant(day, label, now)
    return instant is None or instant <= now


def selectable_times(day: date, now: datetime) -> list[str]:
    return [label for label in TIME_SLOT_LABELS if not is_time_slot_disabled(day, label, now)]


def default_time_for(day: date, now: datetime) -> str:
    """First selectable label for the day, else the first label of the catalogue."""
    available = selectable_times(day, now)
    return available[0] if available else TIME_SLOT_LABELS[0]


def is_within_window(day: date, now: datetime, days: int = BOOKING_WINDOW_DAYS) -> bool:
    today = now.date()
    return today <= day < today + timedelta(days=days)


def is_bookable(day: date | None, label: str | None, now: datetime, days: int = BOOKING_WINDOW_DAYS) -> bool:
    if day is None or not label:
        return False
    return is_within_window(day, now, days) and not is_time_slot_disabled(day, label, now)


def booking_window(now: datetime, days: int = BOOKING_WINDOW_DAYS) -> list[DateSlotCandidate]:
    return [
        DateSlotCandidate(
            date=day,
            day_label=_DAY_LABELS[day.weekday()],
            times=tuple(
                TimeOption(label=label, selectable=not is_time_slot_disabled(day, label, now))
                for label in TIME_SLOT_LABELS
            ),
        )
        for day in window_days(now, days)
    ]
