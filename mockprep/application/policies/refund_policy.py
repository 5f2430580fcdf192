from __future__ import annotations

from datetime import datetime, timedelta

from mockprep.domain.entities.interview_slot import InterviewSlot

REFUND_CUTOFF = timedelta(hours=3)
REFUND_PERCENT = 50


def refund_percent(
    slot: InterviewSlot,
    now: datetime,
    cutoff: timedelta = REFUND_CUTOFF,
    percent: int = REFUND_PERCENT,
) -> int:
    """Share of the price returned when a paid slot is cancelled at ``now``."""
    if not slot.payment_done or slot.start_utc is None:
        return 0
    if slot.start_utc - now >= cutoff:
        return percent
    return 0
