"""
Display status, list partitioning and offered actions for interview slots.

Server status and timestamps are combined here once so every screen shows the
same thing. Everything is a pure function of the slot and ``now``; missing
timestamps never raise.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable

from mockprep.domain.entities.interview_slot import (
    TERMINAL_STATUSES,
    DisplayStatus,
    InterviewSlot,
    LifecycleLabel,
    SlotStatus,
)

SLOT_DURATION = timedelta(hours=1)

PAST_STATUSES = frozenset({DisplayStatus.cancelled, DisplayStatus.completed, DisplayStatus.expired})

_FAR_PAST = datetime.min.replace(tzinfo=timezone.utc)


class SlotAction(str, Enum):
    PAY = "pay"
    CANCEL = "cancel"
    AWAITING_CONFIRMATION = "awaiting_confirmation"  # label only, not a button
    VIEW_DETAILS = "view_details"
    JOIN = "join"


def effective_end(slot: InterviewSlot) -> datetime | None:
    return slot.end_utc or slot.start_utc


def has_ended(slot: InterviewSlot, now: datetime) -> bool:
    end = effective_end(slot)
    return end is not None and end < now


def has_started(slot: InterviewSlot, now: datetime) -> bool:
    return slot.start_utc is not None and slot.start_utc <= now


def classify(slot: InterviewSlot, now: datetime) -> DisplayStatus:
    if slot.status in TERMINAL_STATUSES:
        return DisplayStatus(slot.status.value)
    if has_ended(slot, now):
        return DisplayStatus.expired
    return DisplayStatus(slot.status.value)


def lifecycle_label(start: datetime | None, end: datetime | None, now: datetime) -> LifecycleLabel:
    """upcoming / ongoing / ended from timestamps alone; a missing end means start + 1h."""
    if start is None:
        if end is not None and now >= end:
            return LifecycleLabel.ended
        return LifecycleLabel.upcoming
    if end is None:
        end = start + SLOT_DURATION
    if now >= end:
        return LifecycleLabel.ended
    if start <= now:
        return LifecycleLabel.ongoing
    return LifecycleLabel.upcoming


def display_label(slot: InterviewSlot, now: datetime) -> str:
    """Classified status for cancelled/completed/expired slots, else the time-derived label."""
    status = classify(slot, now)
    if status in PAST_STATUSES:
        return status.value
    return lifecycle_label(slot.start_utc, slot.end_utc, now).value


def badge_text(status: DisplayStatus) -> str:
    if status == DisplayStatus.waiting:
        return "PENDING"
    return status.value.upper()


def is_upcoming(slot: InterviewSlot, now: datetime) -> bool:
    if classify(slot, now) in PAST_STATUSES:
        return False
    return slot.start_utc is not None and slot.start_utc > now


def partition(slots: Iterable[InterviewSlot], now: datetime) -> tuple[list[InterviewSlot], list[InterviewSlot]]:
    """Split into (upcoming ascending by start, past most recently concluded first)."""
    upcoming: list[InterviewSlot] = []
    past: list[InterviewSlot] = []
    for slot in slots:
        (upcoming if is_upcoming(slot, now) else past).append(slot)

    upcoming.sort(key=lambda s: s.start_utc)
    past.sort(key=lambda s: effective_end(s) or _FAR_PAST, reverse=True)
    return upcoming, past


def available_actions(slot: InterviewSlot, now: datetime) -> tuple[SlotAction, ...]:
    ended = has_ended(slot, now)

    if slot.status in TERMINAL_STATUSES:
        return (SlotAction.VIEW_DETAILS,)

    if not slot.payment_done:
        if ended:
            return (SlotAction.PAY,)
        return (SlotAction.PAY, SlotAction.CANCEL)

    if ended:
        return (SlotAction.VIEW_DETAILS,)

    if slot.status in (SlotStatus.open, SlotStatus.waiting):
        return (SlotAction.AWAITING_CONFIRMATION, SlotAction.CANCEL)

    if has_started(slot, now):
        return (SlotAction.JOIN, SlotAction.VIEW_DETAILS, SlotAction.CANCEL)
    return (SlotAction.VIEW_DETAILS, SlotAction.CANCEL)


def can_cancel(slot: InterviewSlot, now: datetime) -> bool:
    return SlotAction.CANCEL in available_actions(slot, now)
