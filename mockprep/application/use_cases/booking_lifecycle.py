from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable

from mockprep.application.exceptions import (
    BookingError,
    CancellationNotAllowed,
    NetworkOrServerError,
    ValidationError,
)
from mockprep.application.policies.booking_validation import validation_errors
from mockprep.application.policies.refund_policy import REFUND_CUTOFF, REFUND_PERCENT, refund_percent
from mockprep.application.policies.slot_status import can_cancel, partition
from mockprep.application.policies.time_slot_policy import BOOKING_WINDOW_DAYS
from mockprep.application.ports.refresh_signal import RefreshSignalPort
from mockprep.application.ports.scheduling_api import SchedulingApiPort
from mockprep.application.utils.draft_helpers import build_create_payload
from mockprep.application.utils.error_mapping import map_scheduling_error
from mockprep.domain.entities.booking_draft import BookingDraft
from mockprep.domain.entities.booking_state import BookingPhase, BookingState
from mockprep.domain.entities.interview_slot import InterviewSlot, SlotStatus
from mockprep.domain.entities.session import SessionContext


@dataclass(frozen=True)
class CancellationResult:
    slot_id: str
    cancelled: bool
    refund_percent: int = 0
    error: BookingError | None = None


@dataclass(frozen=True)
class SlotListing:
    upcoming: list[InterviewSlot]
    past: list[InterviewSlot]


class BookingLifecycle:
    """
    Create -> pay -> confirm flow for one user session, plus cancellation.

    Mutating operations never raise: failures from the Scheduling API are
    mapped to the BookingError taxonomy and stored on the returned state.
    Reads (refresh, get_slot) raise the mapped BookingError instead.

    Only one submit/confirm may be in flight; calls made while busy are
    ignored and return the current state.
    """

    def __init__(
        self,
        session: SessionContext,
        api: SchedulingApiPort,
        signals: RefreshSignalPort,
        clock: Callable[[], datetime],
        price: str | None = None,
        window_days: int = BOOKING_WINDOW_DAYS,
        refund_cutoff: timedelta = REFUND_CUTOFF,
        refund_share: int = REFUND_PERCENT,
        draft: BookingDraft | None = None,
    ) -> None:
        self._session = session
        self._api = api
        self._signals = signals
        self._clock = clock
        self._price = price
        self._window_days = window_days
        self._refund_cutoff = refund_cutoff
        self._refund_share = refund_share
        self._state = BookingState(draft=draft or BookingDraft())
        self._busy = False
        self._cancelling: set[str] = set()
        self._slots: dict[str, InterviewSlot] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> BookingState:
        return self._state

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def is_busy(self) -> bool:
        return self._busy

    def cached_slots(self) -> list[InterviewSlot]:
        return list(self._slots.values())

    def update_draft(self, draft: BookingDraft) -> BookingState:
        if self._busy or self._state.effective_phase != BookingPhase.FORM:
            return self._state
        self._state = replace(self._state, draft=draft)
        return self._state

    def dismiss_error(self) -> BookingState:
        if self._state.phase == BookingPhase.ERROR and self._state.recover_to is not None:
            self._state = self._state.to(self._state.recover_to)
        elif self._state.error is not None:
            self._state = replace(self._state, error=None)
        return self._state

    def reset(self, draft: BookingDraft | None = None) -> BookingState:
        """Start over with a fresh draft. Ignored while a call is in flight."""
        if self._busy:
            return self._state
        self._state = BookingState(draft=draft or self._state.draft)
        return self._state

    async def submit(self, draft: BookingDraft | None = None) -> BookingState:
        if self._busy:
            self._logger.info("Submit ignored while busy", extra={"user_id": self._session.user_id})
            return self._state
        if self._state.effective_phase != BookingPhase.FORM:
            return self._state

        draft = draft or self._state.draft
        errors = validation_errors(draft, self._clock(), self._window_days)
        if errors:
            self._state = replace(
                self._state.to(BookingPhase.FORM, draft=draft),
                error=ValidationError(errors),
            )
            return self._state

        self._busy = True
        self._state = self._state.to(BookingPhase.SUBMITTING, draft=draft)
        try:
            slot_id = await self._api.create_slot(self._session, build_create_payload(draft))
            if not slot_id:
                raise NetworkOrServerError("Booking response did not include a slot id")
        except Exception as e:
            error = map_scheduling_error(e)
            self._logger.error(
                "Slot creation failed",
                extra={"user_id": self._session.user_id, "error": error.user_message},
            )
            self._state = self._state.failed(error, recover_to=BookingPhase.FORM)
            return self._state
        finally:
            self._busy = False

        self._state = self._state.to(BookingPhase.AWAITING_PAYMENT, slot_id=str(slot_id))
        self._logger.info(
            "Slot created",
            extra={"user_id": self._session.user_id, "slot_id": slot_id, "phase": self._state.phase.value},
        )
        self._signals.dispatch(self._session.user_id, "booked")
        return self._state

    async def resume_payment(self, slot_id: str) -> BookingState:
        """Take an unpaid slot from the list views straight to payment."""
        if self._busy or not slot_id:
            return self._state
        self.dismiss_error()

        try:
            slot = await self.get_slot(slot_id)
        except BookingError as e:
            self._state = replace(self._state, error=e)
            return self._state

        if slot.payment_done or slot.is_terminal:
            return self._state
        self._state = self._state.to(BookingPhase.AWAITING_PAYMENT, slot_id=slot.id)
        return self._state

    async def confirm_payment(self, slot_id: str | None = None) -> BookingState:
        if self._busy:
            self._logger.info("Payment confirmation ignored while busy", extra={"user_id": self._session.user_id})
            return self._state
        if self._state.effective_phase != BookingPhase.AWAITING_PAYMENT:
            return self._state
        slot_id = slot_id or self._state.slot_id
        if not slot_id or slot_id != self._state.slot_id:
            return self._state

        self._busy = True
        self._state = self._state.to(BookingPhase.CONFIRMING)
        try:
            await self._api.confirm_payment(self._session, slot_id, self._price)
        except Exception as e:
            error = map_scheduling_error(e)
            self._logger.error(
                "Payment confirmation failed",
                extra={"user_id": self._session.user_id, "slot_id": slot_id, "error": error.user_message},
            )
            self._state = self._state.failed(error, recover_to=BookingPhase.AWAITING_PAYMENT)
            return self._state
        finally:
            self._busy = False

        if slot_id in self._slots:
            self._slots[slot_id] = self._slots[slot_id].with_payment_done()
        self._state = self._state.to(BookingPhase.CONFIRMED)
        self._logger.info(
            "Payment confirmed",
            extra={"user_id": self._session.user_id, "slot_id": slot_id, "phase": self._state.phase.value},
        )
        self._signals.dispatch(self._session.user_id, "payment_confirmed")
        return self._state

    async def cancel(self, slot_id: str | None) -> CancellationResult | None:
        if not slot_id:
            return None
        if slot_id in self._cancelling:
            return CancellationResult(slot_id=slot_id, cancelled=False)

        self._cancelling.add(slot_id)
        try:
            return await self._cancel(slot_id)
        finally:
            self._cancelling.discard(slot_id)

    async def _cancel(self, slot_id: str) -> CancellationResult:
        try:
            slot = await self.get_slot(slot_id)
        except BookingError as e:
            return CancellationResult(slot_id=slot_id, cancelled=False, error=e)

        now = self._clock()
        if not can_cancel(slot, now):
            self._logger.info(
                "Cancellation rejected",
                extra={"user_id": self._session.user_id, "slot_id": slot_id, "status": slot.status.value},
            )
            return CancellationResult(
                slot_id=slot_id,
                cancelled=False,
                error=CancellationNotAllowed("This interview can no longer be cancelled."),
            )

        try:
            await self._api.update_slot_status(self._session, slot_id, SlotStatus.cancelled)
        except Exception as e:
            error = map_scheduling_error(e)
            self._logger.error(
                "Cancellation failed",
                extra={"user_id": self._session.user_id, "slot_id": slot_id, "error": error.user_message},
            )
            return CancellationResult(slot_id=slot_id, cancelled=False, error=error)

        self._slots[slot_id] = slot.with_status(SlotStatus.cancelled)
        if self._state.slot_id == slot_id and not self._busy:
            self._state = self._state.to(BookingPhase.CANCELLED)

        refund = refund_percent(slot, now, self._refund_cutoff, self._refund_share)
        self._logger.info(
            "Slot cancelled",
            extra={"user_id": self._session.user_id, "slot_id": slot_id, "reason": f"refund={refund}%"},
        )
        self._signals.dispatch(self._session.user_id, "cancelled")
        return CancellationResult(slot_id=slot_id, cancelled=True, refund_percent=refund)

    async def refresh(self) -> SlotListing:
        try:
            slots = await self._api.get_slots_by_user(self._session)
        except Exception as e:
            raise map_scheduling_error(e) from e

        self._slots = {slot.id: slot for slot in slots if slot.id}
        upcoming, past = partition(self._slots.values(), self._clock())
        return SlotListing(upcoming=upcoming, past=past)

    async def get_slot(self, slot_id: str, force: bool = False) -> InterviewSlot:
        if not force and slot_id in self._slots:
            return self._slots[slot_id]
        try:
            slot = await self._api.get_slot_by_id(self._session, slot_id)
        except Exception as e:
            raise map_scheduling_error(e) from e
        if not slot.id:
            slot = replace(slot, id=slot_id)
        self._slots[slot_id] = slot
        return slot
