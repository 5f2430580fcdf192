from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from mockprep.domain.entities.booking_draft import BookingDraft

if TYPE_CHECKING:
    from mockprep.application.exceptions import BookingError


class BookingPhase(str, Enum):
    FORM = "form"
    SUBMITTING = "submitting"
    AWAITING_PAYMENT = "awaiting_payment"
    CONFIRMING = "confirming"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    ERROR = "error"


TERMINAL_PHASES = frozenset({BookingPhase.CONFIRMED, BookingPhase.CANCELLED})
BUSY_PHASES = frozenset({BookingPhase.SUBMITTING, BookingPhase.CONFIRMING})


@dataclass(frozen=True)
class BookingState:
    phase: BookingPhase = BookingPhase.FORM
    draft: BookingDraft = BookingDraft()
    slot_id: str | None = None
    error: "BookingError | None" = None
    recover_to: BookingPhase | None = None  # only set while phase is ERROR

    @property
    def is_busy(self) -> bool:
        return self.phase in BUSY_PHASES

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def effective_phase(self) -> BookingPhase:
        """Phase the user is actually in, looking through a pending error."""
        if self.phase == BookingPhase.ERROR and self.recover_to is not None:
            return self.recover_to
        return self.phase

    def to(self, phase: BookingPhase, **changes) -> "BookingState":
        return replace(self, phase=phase, error=None, recover_to=None, **changes)

    def failed(self, error: "BookingError", recover_to: BookingPhase) -> "BookingState":
        return replace(self, phase=BookingPhase.ERROR, error=error, recover_to=recover_to)
