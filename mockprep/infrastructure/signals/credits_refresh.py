from __future__ import annotations

import logging
from typing import Callable

from mockprep.application.ports.refresh_signal import RefreshSignalPort

Listener = Callable[[str, str], None]


class CreditsRefreshBus(RefreshSignalPort):
    """Fan-out of "credits may have changed" to whoever subscribed."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, user_id: str, reason: str) -> None:
        self._logger.info("Credits refresh dispatched", extra={"user_id": user_id, "reason": reason})
        for listener in list(self._listeners):
            try:
                listener(user_id, reason)
            except Exception as e:
                self._logger.warning("Credits refresh listener failed", extra={"user_id": user_id, "error": str(e)})
