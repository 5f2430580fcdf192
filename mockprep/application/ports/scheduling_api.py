from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from mockprep.domain.entities.interview_slot import InterviewSlot, SlotStatus
from mockprep.domain.entities.session import SessionContext


class SchedulingApiPort(ABC):
    """
    Remote owner of interview slots.

    Adapters raise SchedulingApiError on any failure and return slots already
    normalized into InterviewSlot.
    """

    @abstractmethod
    async def create_slot(self, session: SessionContext, payload: dict[str, Any]) -> str:
        """Create a slot. Returns the new slot id."""
        raise NotImplementedError

    @abstractmethod
    async def confirm_payment(self, session: SessionContext, slot_id: str, amount: str | None = None) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update_slot_status(self, session: SessionContext, slot_id: str, status: SlotStatus) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_slots_by_user(self, session: SessionContext) -> list[InterviewSlot]:
        raise NotImplementedError

    @abstractmethod
    async def get_slot_by_id(self, session: SessionContext, slot_id: str) -> InterviewSlot:
        raise NotImplementedError
