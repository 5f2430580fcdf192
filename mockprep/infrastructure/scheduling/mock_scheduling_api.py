from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from mockprep.application.exceptions import SchedulingApiError
from mockprep.application.ports.scheduling_api import SchedulingApiPort
from mockprep.domain.entities.experience import Experience
from mockprep.domain.entities.interview_slot import InterviewMode, InterviewSlot, SlotStatus
from mockprep.domain.entities.resume import ResumeReference
from mockprep.domain.entities.session import SessionContext


class MockSchedulingApi(SchedulingApiPort):
    """In-memory Scheduling API; rejects overlapping bookings like the real server."""

    def __init__(self, timezone: ZoneInfo | None = None, duration_minutes: int = 60) -> None:
        self._slots: dict[str, tuple[str, InterviewSlot]] = {}
        self._timezone = timezone or ZoneInfo("UTC")
        self._duration = timedelta(minutes=duration_minutes)
        self._logger = logging.getLogger(__name__)

    def add_slot(self, user_id: str, slot: InterviewSlot) -> None:
        self._slots[slot.id] = (user_id, slot)

    async def create_slot(self, session: SessionContext, payload: dict[str, Any]) -> str:
        try:
            day = datetime.strptime(payload["date"], "%Y-%m-%d").date()
            hour, minute = (int(part) for part in payload["time"].split(":"))
        except (KeyError, ValueError) as e:
            raise SchedulingApiError(f"Invalid slot payload: {e}", status_code=400) from e

        start = datetime.combine(day, time(hour, minute), tzinfo=self._timezone).astimezone(ZoneInfo("UTC"))
        end = start + self._duration
        if not self._is_free(start, end):
            raise SchedulingApiError("Interview slot already booked for this time", status_code=400)

        slot_id = f"mock_slot_{len(self._slots) + 1}"
        slot = InterviewSlot(
            id=slot_id,
            start_utc=start,
            end_utc=end,
            job_role=payload.get("job_role", ""),
            experience=Experience(
                years=int(payload.get("experience_years") or 0),
                months=int(payload.get("experience_months") or 0),
            ),
            skills=tuple(payload.get("skills") or ()),
            resume=ResumeReference.from_wire(payload.get("resume_url")),
            mode=InterviewMode(str(payload.get("mode") or "ONLINE").upper()),
            interview_code=f"MI-{len(self._slots) + 1:04d}",
        )
        self._slots[slot_id] = (session.user_id, slot)
        self._logger.info(
            "Mock interview slot created",
            extra={"slot_id": slot_id, "user_id": session.user_id, "start": start.isoformat()},
        )
        return slot_id

    async def confirm_payment(self, session: SessionContext, slot_id: str, amount: str | None = None) -> None:
        slot = self._own_slot(session, slot_id)
        self._slots[slot_id] = (session.user_id, replace(slot, payment_done=True, status=SlotStatus.waiting))

    async def update_slot_status(self, session: SessionContext, slot_id: str, status: SlotStatus) -> None:
        slot = self._own_slot(session, slot_id)
        self._slots[slot_id] = (session.user_id, slot.with_status(status))
        self._logger.info("Mock interview slot status updated", extra={"slot_id": slot_id, "status": status.value})

    async def get_slots_by_user(self, session: SessionContext) -> list[InterviewSlot]:
        return [slot for owner, slot in self._slots.values() if owner == session.user_id]

    async def get_slot_by_id(self, session: SessionContext, slot_id: str) -> InterviewSlot:
        return self._own_slot(session, slot_id)

    def _own_slot(self, session: SessionContext, slot_id: str) -> InterviewSlot:
        owner, slot = self._slots.get(slot_id, (None, None))
        if slot is None or owner != session.user_id:
            raise SchedulingApiError("Interview slot not found", status_code=404)
        return slot

    def _is_free(self, start: datetime, end: datetime) -> bool:
        for _, slot in self._slots.values():
            if slot.status == SlotStatus.cancelled or slot.start_utc is None:
                continue
            slot_end = slot.end_utc or slot.start_utc + self._duration
            if not (end <= slot.start_utc or start >= slot_end):
                return False
        return True
