from __future__ import annotations

from mockprep.application.exceptions import (
    BookingError,
    ConflictError,
    NetworkOrServerError,
    SchedulingApiError,
)

CONFLICT_ERROR_CODES = frozenset({"SLOT_CONFLICT", "SLOT_ALREADY_BOOKED"})

# Known server wordings, including a misspelling the backend actually emits.
_CONFLICT_PHRASES = ("already booked", "alredy booked", "slot overlap")


def is_conflict(error: SchedulingApiError) -> bool:
    if error.error_code and error.error_code.upper() in CONFLICT_ERROR_CODES:
        return True
    if error.status_code == 409:
        return True

    text = (error.message or "").lower()
    if any(phrase in text for phrase in _CONFLICT_PHRASES):
        return True
    return "slot" in text and any(word in text for word in ("already", "alredy", "overlap"))


def map_scheduling_error(error: Exception) -> BookingError:
    if isinstance(error, BookingError):
        return error
    if isinstance(error, SchedulingApiError):
        if is_conflict(error):
            return ConflictError(server_message=error.message)
        return NetworkOrServerError(error.message, status_code=error.status_code)
    return NetworkOrServerError(str(error) or None)
