from __future__ import annotations

from typing import Callable

from mockprep.application.ports.session_store import SessionStorePort
from mockprep.application.use_cases.booking_lifecycle import BookingLifecycle
from mockprep.domain.entities.session import SessionContext


class MemorySessionStore(SessionStorePort):
    """One BookingLifecycle per user, kept for the life of the process."""

    def __init__(self) -> None:
        self._lifecycles: dict[str, BookingLifecycle] = {}

    def get_or_create(
        self,
        session: SessionContext,
        factory: Callable[[SessionContext], BookingLifecycle],
    ) -> BookingLifecycle:
        lifecycle = self._lifecycles.get(session.user_id)
        # A new token means a new login; start a fresh session.
        if lifecycle is None or lifecycle.session.token != session.token:
            lifecycle = factory(session)
            self._lifecycles[session.user_id] = lifecycle
        return lifecycle

    def discard(self, session: SessionContext) -> bool:
        lifecycle = self._lifecycles.get(session.user_id)
        if lifecycle is None or lifecycle.session.token != session.token:
            return False
        del self._lifecycles[session.user_id]
        return True
