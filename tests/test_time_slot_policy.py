from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from mockprep.application.policies.time_slot_policy import (
    TIME_SLOT_LABELS,
    booking_window,
    default_time_for,
    is_bookable,
    is_time_slot_disabled,
    selectable_times,
    slot_instant,
)
from mockprep.application.utils.draft_helpers import initial_draft, with_date, with_time
from mockprep.application.utils.time_format import format_date_for_api, format_time_for_api, parse_time_label

IST = ZoneInfo("Asia/Kolkata")


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 10, 19, hour, minute, tzinfo=IST)


def test_today_disables_times_already_passed():
    now = _at(14, 30)
    today = now.date()

    assert is_time_slot_disabled(today, "10:00 AM", now)
    assert is_time_slot_disabled(today, "2:00 PM", now)
    assert not is_time_slot_disabled(today, "3:00 PM", now)
    assert selectable_times(today, now) == ["3:00 PM", "4:00 PM", "5:00 PM"]


def test_slot_starting_exactly_now_is_disabled():
    now = _at(15, 0)
    assert is_time_slot_disabled(now.date(), "3:00 PM", now)
    assert not is_time_slot_disabled(now.date(), "4:00 PM", now)


def test_future_days_enable_every_label_and_past_days_none():
    now = _at(17, 45)
    tomorrow = now.date() + timedelta(days=1)
    yesterday = now.date() - timedelta(days=1)

    assert selectable_times(tomorrow, now) == list(TIME_SLOT_LABELS)
    assert selectable_times(yesterday, now) == []


def test_unknown_label_is_never_selectable():
    now = _at(9, 0)
    assert is_time_slot_disabled(now.date() + timedelta(days=2), "7:00 PM", now)
    assert is_time_slot_disabled(now.date(), "not a time", now)


def test_today_label_disabled_iff_its_instant_has_passed():
    """Walk the clock across the whole day in 10 minute steps."""
    current = _at(8, 0)
    while current < _at(19, 0):
        today = current.date()
        for label in TIME_SLOT_LABELS:
            instant = slot_instant(today, label, current)
            assert is_time_slot_disabled(today, label, current) == (instant <= current)
        current += timedelta(minutes=10)


def test_booking_window_covers_seven_days_from_today():
    now = _at(14, 30)
    window = booking_window(now)

    assert len(window) == 7
    assert window[0].date == date(2026, 10, 19)
    assert window[0].day_label == "MON"
    assert window[-1].date == date(2026, 10, 25)
    assert window[-1].day_label == "SUN"
    assert [t.label for t in window[0].times] == list(TIME_SLOT_LABELS)
    assert [t.label for t in window[0].times if t.selectable] == ["3:00 PM", "4:00 PM", "5:00 PM"]
    assert all(t.selectable for t in window[1].times)


def test_today_has_nothing_selectable_late_in_the_evening():
    window = booking_window(_at(18, 0))
    assert not window[0].is_selectable
    assert window[1].is_selectable


def test_default_time_is_first_open_label():
    now = _at(14, 30)
    assert default_time_for(now.date(), now) == "3:00 PM"
    assert default_time_for(now.date() + timedelta(days=1), now) == "10:00 AM"
    # Nothing left today, fall back to the first catalogue entry.
    assert default_time_for(now.date(), _at(18, 0)) == "10:00 AM"


def test_changing_date_resets_time():
    now = _at(14, 30)
    draft = with_time(initial_draft("Backend Engineer", ["Python"], now), "5:00 PM")

    moved = with_date(draft, now.date() + timedelta(days=3), now)

    assert moved.selected_date == date(2026, 10, 22)
    assert moved.selected_time == "10:00 AM"


def test_is_bookable_respects_window_and_clock():
    now = _at(14, 30)
    today = now.date()

    assert is_bookable(today, "4:00 PM", now)
    assert not is_bookable(today, "11:00 AM", now)
    assert is_bookable(today + timedelta(days=6), "10:00 AM", now)
    assert not is_bookable(today + timedelta(days=7), "10:00 AM", now)
    assert not is_bookable(None, "10:00 AM", now)
    assert not is_bookable(today, None, now)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("10:00 AM", "10:00"),
        ("12:00 PM", "12:00"),
        ("2:00 PM", "14:00"),
        ("5:00 PM", "17:00"),
        ("12:30 AM", "00:30"),
        ("14:00", "14:00"),
    ],
)
def test_time_label_wire_format(label, expected):
    assert format_time_for_api(label) == expected


def test_invalid_time_label_is_rejected():
    assert parse_time_label("13:00 PM") is None
    assert parse_time_label("") is None
    with pytest.raises(ValueError):
        format_time_for_api("noon")


def test_date_wire_format():
    assert format_date_for_api(date(2026, 1, 5)) == "2026-01-05"
