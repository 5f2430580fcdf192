from __future__ import annotations

from datetime import datetime

from mockprep.application.policies.experience_selector import MONTHS_RANGE, YEARS_RANGE, is_valid_selection
from mockprep.application.policies.time_slot_policy import BOOKING_WINDOW_DAYS, is_bookable
from mockprep.domain.entities.booking_draft import ROLE_NOT_FOUND, BookingDraft


def validation_errors(draft: BookingDraft, now: datetime, window_days: int = BOOKING_WINDOW_DAYS) -> list[str]:
    """Every rule is checked so the user sees all problems at once."""
    errors: list[str] = []

    role = (draft.role or "").strip()
    if not role or role == ROLE_NOT_FOUND:
        errors.append("Job Role is required")
    if draft.selected_date is None:
        errors.append("Date is required")
    if not draft.selected_time:
        errors.append("Time is required")
    if (
        draft.selected_date is not None
        and draft.selected_time
        and not is_bookable(draft.selected_date, draft.selected_time, now, window_days)
    ):
        errors.append("Selected time slot is unavailable.")
    if not draft.skills:
        errors.append("At least one skill is required")
    if not draft.has_experience_selection:
        errors.append("Experience is required")
    elif not (
        is_valid_selection(draft.years_selected, *YEARS_RANGE)
        and is_valid_selection(draft.months_selected, *MONTHS_RANGE)
    ):
        errors.append("Experience must be 0-20 years and 0-11 months")
    if draft.resume is None or not draft.resume.value:
        errors.append("A resume is required (select existing or upload new)")

    return errors
