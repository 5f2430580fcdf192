from __future__ import annotations

import datetime as dt
from enum import Enum
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from mockprep.application.exceptions import BookingError, ValidationError
from mockprep.application.policies.slot_status import available_actions, badge_text, classify, display_label
from mockprep.application.use_cases.countdown_timer import countdown_label
from mockprep.application.utils.time_format import format_slot_date, format_slot_window
from mockprep.domain.entities.booking_draft import BookingDraft
from mockprep.domain.entities.booking_state import BookingState
from mockprep.domain.entities.date_slot import DateSlotCandidate
from mockprep.domain.entities.interview_slot import InterviewMode, InterviewSlot
from mockprep.domain.entities.resume import ResumeReference


class Mode(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class BookingDraftSchema(BaseModel):
    role: str = ""
    date: dt.date | None = None
    time: str | None = None
    skills: list[str] = Field(default_factory=list)
    years: list[int] = Field(default_factory=list)
    months: list[int] = Field(default_factory=list)
    resume: str | None = None  # template id, uploaded URL or DEFAULT_RESUME_<n>
    mode: Mode = Mode.ONLINE

    @staticmethod
    def from_draft(draft: BookingDraft) -> "BookingDraftSchema":
        return BookingDraftSchema(
            role=draft.role,
            date=draft.selected_date,
            time=draft.selected_time,
            skills=list(draft.skills),
            years=list(draft.years_selected),
            months=list(draft.months_selected),
            resume=draft.resume.wire_value if draft.resume else None,
            mode=Mode(draft.mode.value),
        )

    def to_draft(self) -> BookingDraft:
        return BookingDraft(
            role=self.role.strip(),
            selected_date=self.date,
            selected_time=self.time,
            skills=tuple(s.strip() for s in self.skills if s and s.strip()),
            years_selected=tuple(sorted(set(self.years))),
            months_selected=tuple(sorted(set(self.months))),
            resume=ResumeReference.from_wire(self.resume),
            mode=InterviewMode(self.mode.value),
        )


class ErrorSchema(BaseModel):
    kind: str
    message: str
    messages: list[str] = Field(default_factory=list)

    @staticmethod
    def from_error(error: BookingError) -> "ErrorSchema":
        return ErrorSchema(
            kind=type(error).__name__,
            message=error.user_message,
            messages=error.messages if isinstance(error, ValidationError) else [],
        )


class BookingStateSchema(BaseModel):
    phase: str
    slot_id: str | None = None
    price: str
    currency: str
    error: ErrorSchema | None = None

    @staticmethod
    def from_state(state: BookingState, price: str, currency: str) -> "BookingStateSchema":
        return BookingStateSchema(
            phase=state.phase.value,
            slot_id=state.slot_id,
            price=price,
            currency=currency,
            error=ErrorSchema.from_error(state.error) if state.error else None,
        )


class SlotViewSchema(BaseModel):
    id: str
    interview_code: str | None = None
    job_role: str
    experience: str
    skills: list[str]
    resume: str | None = None
    mode: str
    payment_done: bool
    status: str
    display_status: str
    label: str
    badge: str
    date: str
    time: str
    start_utc: dt.datetime | None = None
    end_utc: dt.datetime | None = None
    actions: list[str]
    countdown: str

    @staticmethod
    def from_slot(slot: InterviewSlot, now: dt.datetime, tz: ZoneInfo) -> "SlotViewSchema":
        status = classify(slot, now)
        return SlotViewSchema(
            id=slot.id,
            interview_code=slot.interview_code,
            job_role=slot.job_role,
            experience=slot.experience.display,
            skills=list(slot.skills),
            resume=slot.resume.wire_value if slot.resume else None,
            mode=slot.mode.value,
            payment_done=slot.payment_done,
            status=slot.status.value,
            display_status=status.value,
            label=display_label(slot, now),
            badge=badge_text(status),
            date=format_slot_date(slot.start_utc, tz),
            time=format_slot_window(slot.start_utc, slot.end_utc, tz),
            start_utc=slot.start_utc,
            end_utc=slot.end_utc,
            actions=[a.value for a in available_actions(slot, now)],
            countdown=countdown_label(slot.start_utc, slot.end_utc, now),
        )


class SlotListSchema(BaseModel):
    upcoming: list[SlotViewSchema]
    past: list[SlotViewSchema]


class CancelResponseSchema(BaseModel):
    slot_id: str
    cancelled: bool
    refund_percent: int


class CountdownSchema(BaseModel):
    slot_id: str
    label: str


class TimeOptionSchema(BaseModel):
    label: str
    selectable: bool


class WindowDaySchema(BaseModel):
    date: dt.date
    day: str
    selectable: bool
    times: list[TimeOptionSchema]

    @staticmethod
    def from_candidate(candidate: DateSlotCandidate) -> "WindowDaySchema":
        return WindowDaySchema(
            date=candidate.date,
            day=candidate.day_label,
            selectable=candidate.is_selectable,
            times=[TimeOptionSchema(label=t.label, selectable=t.selectable) for t in candidate.times],
        )
