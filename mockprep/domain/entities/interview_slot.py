from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from mockprep.domain.entities.experience import Experience
from mockprep.domain.entities.resume import ResumeReference


class SlotStatus(str, Enum):
    """Server-authoritative slot status."""

    open = "open"
    waiting = "waiting"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class DisplayStatus(str, Enum):
    """Server status combined with timestamps for display."""

    open = "open"
    waiting = "waiting"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"
    expired = "expired"


class LifecycleLabel(str, Enum):
    upcoming = "upcoming"
    ongoing = "ongoing"
    ended = "ended"


class InterviewMode(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


TERMINAL_STATUSES = frozenset({SlotStatus.cancelled, SlotStatus.completed})


@dataclass(frozen=True)
class InterviewSlot:
    id: str
    start_utc: datetime | None = None
    end_utc: datetime | None = None
    job_role: str = ""
    experience: Experience = Experience()
    skills: tuple[str, ...] = ()
    resume: ResumeReference | None = None
    mode: InterviewMode = InterviewMode.ONLINE
    payment_done: bool = False
    status: SlotStatus = SlotStatus.open
    interview_code: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def with_status(self, status: SlotStatus) -> "InterviewSlot":
        return replace(self, status=status)

    def with_payment_done(self) -> "InterviewSlot":
        return replace(self, payment_done=True)
