from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from mockprep.application.exceptions import SchedulingApiError
from mockprep.domain.entities.interview_slot import InterviewSlot, SlotStatus
from mockprep.domain.entities.session import SessionContext
from mockprep.infrastructure.scheduling.mock_scheduling_api import MockSchedulingApi
from mockprep.infrastructure.signals.credits_refresh import CreditsRefreshBus

IST = ZoneInfo("Asia/Kolkata")


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingSchedulingApi(MockSchedulingApi):
    """Mock API that counts calls and can be told to fail the next call."""

    def __init__(self) -> None:
        super().__init__(timezone=IST)
        self.calls: dict[str, int] = {}
        self.fail_next: dict[str, SchedulingApiError] = {}

    def _record(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1
        error = self.fail_next.pop(name, None)
        if error is not None:
            raise error

    async def create_slot(self, session: SessionContext, payload: dict[str, Any]) -> str:
        self._record("create_slot")
        self.last_payload = payload
        return await super().create_slot(session, payload)

    async def confirm_payment(self, session: SessionContext, slot_id: str, amount: str | None = None) -> None:
        self._record("confirm_payment")
        self.last_amount = amount
        await super().confirm_payment(session, slot_id, amount)

    async def update_slot_status(self, session: SessionContext, slot_id: str, status: SlotStatus) -> None:
        self._record("update_slot_status")
        await super().update_slot_status(session, slot_id, status)

    async def get_slots_by_user(self, session: SessionContext) -> list[InterviewSlot]:
        self._record("get_slots_by_user")
        return await super().get_slots_by_user(session)

    async def get_slot_by_id(self, session: SessionContext, slot_id: str) -> InterviewSlot:
        self._record("get_slot_by_id")
        return await super().get_slot_by_id(session, slot_id)


@pytest.fixture
def clock() -> FakeClock:
    # Monday 19 Oct 2026, 14:30 IST
    return FakeClock(datetime(2026, 10, 19, 14, 30, tzinfo=IST))


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(user_id="42", token="secret-token")


@pytest.fixture
def api() -> RecordingSchedulingApi:
    return RecordingSchedulingApi()


@pytest.fixture
def bus() -> CreditsRefreshBus:
    return CreditsRefreshBus()
