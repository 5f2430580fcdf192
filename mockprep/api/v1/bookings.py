from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, NoReturn

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response
from fastapi.responses import StreamingResponse

from mockprep.api.v1.schemas import (
    BookingDraftSchema,
    BookingStateSchema,
    CancelResponseSchema,
    CountdownSchema,
    ErrorSchema,
    SlotListSchema,
    SlotViewSchema,
)
from mockprep.application.exceptions import (
    BookingError,
    CancellationNotAllowed,
    ConflictError,
    NetworkOrServerError,
    ValidationError,
)
from mockprep.application.ports.session_store import SessionStorePort
from mockprep.application.use_cases.booking_lifecycle import BookingLifecycle
from mockprep.application.use_cases.countdown_timer import INTERVIEW_ENDED, CountdownTimer, countdown_label
from mockprep.application.utils.draft_helpers import initial_draft
from mockprep.application.utils.time_format import NOT_AVAILABLE
from mockprep.core.config import settings
from mockprep.domain.entities.booking_state import BookingPhase
from mockprep.domain.entities.interview_slot import InterviewMode
from mockprep.domain.entities.session import SessionContext
from mockprep.wiring.dependencies import get_clock, get_lifecycle, get_session_store, get_timezone

router = APIRouter()
logger = logging.getLogger(__name__)


def get_session_context(
    x_user_id: str | None = Header(None),
    authorization: str | None = Header(None),
) -> SessionContext:
    token = ""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not x_user_id or not token:
        logger.warning("Rejected request without session", extra={"user_id": x_user_id})
        raise HTTPException(status_code=401, detail="Authentication failed: User ID or token missing.")
    return SessionContext(user_id=x_user_id, token=token)


def get_request_lifecycle(session: SessionContext = Depends(get_session_context)) -> BookingLifecycle:
    return get_lifecycle(session)


def _raise_for(error: BookingError) -> NoReturn:
    if isinstance(error, ValidationError):
        status = 422
    elif isinstance(error, (ConflictError, CancellationNotAllowed)):
        status = 409
    elif isinstance(error, NetworkOrServerError) and error.status_code == 404:
        status = 404
    else:
        status = 502
    raise HTTPException(status_code=status, detail=ErrorSchema.from_error(error).model_dump())


def _state_response(lc: BookingLifecycle) -> BookingStateSchema:
    return BookingStateSchema.from_state(lc.state, settings.SLOT_PRICE, settings.SLOT_CURRENCY)


@router.delete("/session", status_code=204)
def end_session(
    session: SessionContext = Depends(get_session_context),
    store: SessionStorePort = Depends(get_session_store),
):
    """Logout: drops the booking state held for this login."""
    if store.discard(session):
        logger.info("Session ended", extra={"user_id": session.user_id})
    return Response(status_code=204)


@router.get("/bookings/state", response_model=BookingStateSchema)
def booking_state(lc: BookingLifecycle = Depends(get_request_lifecycle)):
    return _state_response(lc)


@router.post("/bookings", response_model=BookingStateSchema)
async def submit_booking(
    req: BookingDraftSchema,
    lc: BookingLifecycle = Depends(get_request_lifecycle),
):
    if lc.is_busy:
        raise HTTPException(status_code=409, detail="A booking request is already in progress.")
    if lc.state.effective_phase != BookingPhase.FORM:
        lc.reset()

    state = await lc.submit(req.to_draft())
    if state.error is not None:
        _raise_for(state.error)
    return _state_response(lc)


@router.get("/bookings", response_model=SlotListSchema)
async def list_bookings(
    lc: BookingLifecycle = Depends(get_request_lifecycle),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    try:
        listing = await lc.refresh()
    except BookingError as e:
        _raise_for(e)

    now = clock()
    tz = get_timezone()
    return SlotListSchema(
        upcoming=[SlotViewSchema.from_slot(s, now, tz) for s in listing.upcoming],
        past=[SlotViewSchema.from_slot(s, now, tz) for s in listing.past],
    )


@router.get("/bookings/draft", response_model=BookingDraftSchema)
def new_draft(
    role: str | None = None,
    skills: list[str] | None = Query(None),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Pre-filled booking form for the profile's role and skills."""
    try:
        mode = InterviewMode(settings.DEFAULT_INTERVIEW_MODE.upper())
    except ValueError:
        mode = InterviewMode.ONLINE
    return BookingDraftSchema.from_draft(initial_draft(role, skills, clock(), mode))


@router.get("/bookings/{slot_id}", response_model=SlotViewSchema)
async def get_booking(
    slot_id: str,
    lc: BookingLifecycle = Depends(get_request_lifecycle),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    try:
        slot = await lc.get_slot(slot_id, force=True)
    except BookingError as e:
        _raise_for(e)
    return SlotViewSchema.from_slot(slot, clock(), get_timezone())


@router.get("/bookings/{slot_id}/countdown", response_model=CountdownSchema)
async def get_countdown(
    slot_id: str,
    lc: BookingLifecycle = Depends(get_request_lifecycle),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    try:
        slot = await lc.get_slot(slot_id)
    except BookingError as e:
        _raise_for(e)
    return CountdownSchema(slot_id=slot_id, label=countdown_label(slot.start_utc, slot.end_utc, clock()))


@router.get("/bookings/{slot_id}/countdown/stream")
async def stream_countdown(
    slot_id: str,
    lc: BookingLifecycle = Depends(get_request_lifecycle),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Server-sent events, one per label change, until the interview ends."""
    try:
        slot = await lc.get_slot(slot_id)
    except BookingError as e:
        _raise_for(e)

    async def events():
        labels: asyncio.Queue[str] = asyncio.Queue()
        timer = CountdownTimer(clock, on_update=labels.put_nowait, interval=settings.COUNTDOWN_TICK_SECONDS)
        timer.watch(slot)
        try:
            while True:
                label = await labels.get()
                yield f"data: {label}\n\n"
                if label in (INTERVIEW_ENDED, NOT_AVAILABLE):
                    return
        finally:
            timer.close()

    return StreamingResponse(events(), media_type="text/event-stream")


@router.post("/bookings/{slot_id}/payment", response_model=BookingStateSchema)
async def confirm_payment(
    slot_id: str,
    lc: BookingLifecycle = Depends(get_request_lifecycle),
):
    if lc.is_busy:
        raise HTTPException(status_code=409, detail="A booking request is already in progress.")

    state = lc.state
    if state.effective_phase != BookingPhase.AWAITING_PAYMENT or state.slot_id != slot_id:
        state = await lc.resume_payment(slot_id)
        if state.error is not None:
            _raise_for(state.error)
        if state.effective_phase != BookingPhase.AWAITING_PAYMENT or state.slot_id != slot_id:
            raise HTTPException(status_code=409, detail="This interview does not need payment.")

    state = await lc.confirm_payment(slot_id)
    if state.error is not None:
        _raise_for(state.error)
    return _state_response(lc)


@router.post("/bookings/{slot_id}/cancel", response_model=CancelResponseSchema)
async def cancel_booking(
    slot_id: str,
    lc: BookingLifecycle = Depends(get_request_lifecycle),
):
    result = await lc.cancel(slot_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Interview slot not found")
    if result.error is not None:
        _raise_for(result.error)
    if not result.cancelled:
        raise HTTPException(status_code=409, detail="Cancellation already in progress.")
    return CancelResponseSchema(slot_id=slot_id, cancelled=True, refund_percent=result.refund_percent)
