from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from mockprep.application.policies.slot_status import SLOT_DURATION
from mockprep.application.utils.time_format import NOT_AVAILABLE, format_hms
from mockprep.domain.entities.interview_slot import InterviewSlot

JOIN_NOW = "Join Now"
INTERVIEW_ENDED = "Interview Ended"
DEFAULT_TICK_SECONDS = 1.0


def countdown_label(start: datetime | None, end: datetime | None, now: datetime) -> str:
    if start is None:
        return NOT_AVAILABLE
    if end is None:
        end = start + SLOT_DURATION
    if now < start:
        return f"Starts in {format_hms(start - now)}"
    if now < end:
        return JOIN_NOW
    return INTERVIEW_ENDED


class CountdownHandle:
    """
    Disposable handle for one running countdown.

    Recomputes the label every ``interval`` seconds on the running event loop
    and calls ``on_update`` whenever it changes. Finishes by itself once the
    interview has ended; ``cancel()`` stops it earlier.
    """

    def __init__(
        self,
        start: datetime | None,
        end: datetime | None,
        on_update: Callable[[str], None] | None,
        clock: Callable[[], datetime],
        interval: float = DEFAULT_TICK_SECONDS,
    ) -> None:
        self._start = start
        self._end = end
        self._on_update = on_update
        self._clock = clock
        self._interval = interval
        self._label: str | None = None
        self._logger = logging.getLogger(__name__)
        self._recompute()
        self._task: asyncio.Task | None = None
        if self._label not in (INTERVIEW_ENDED, NOT_AVAILABLE):
            self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def label(self) -> str:
        return self._label or NOT_AVAILABLE

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    def __enter__(self) -> "CountdownHandle":
        return self

    def __exit__(self, *exc) -> None:
        self.cancel()

    def _recompute(self) -> str:
        label = countdown_label(self._start, self._end, self._clock())
        if label != self._label:
            self._label = label
            if self._on_update is not None:
                try:
                    self._on_update(label)
                except Exception as e:
                    self._logger.warning("Countdown listener failed", extra={"error": str(e)})
        return label

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if self._recompute() == INTERVIEW_ENDED:
                return


def schedule_countdown(
    start: datetime | None,
    end: datetime | None,
    on_update: Callable[[str], None] | None,
    clock: Callable[[], datetime],
    interval: float = DEFAULT_TICK_SECONDS,
) -> CountdownHandle:
    """Must be called from a running event loop."""
    return CountdownHandle(start, end, on_update, clock, interval)


class CountdownTimer:
    """Keeps exactly one countdown alive, bound to the slot currently on screen."""

    def __init__(
        self,
        clock: Callable[[], datetime],
        on_update: Callable[[str], None] | None = None,
        interval: float = DEFAULT_TICK_SECONDS,
    ) -> None:
        self._clock = clock
        self._on_update = on_update
        self._interval = interval
        self._handle: CountdownHandle | None = None
        self._key: tuple[str, datetime | None, datetime | None] | None = None

    @property
    def label(self) -> str:
        if self._handle is None:
            return NOT_AVAILABLE
        return self._handle.label

    @property
    def handle(self) -> CountdownHandle | None:
        return self._handle

    def watch(self, slot: InterviewSlot | None) -> CountdownHandle | None:
        key = (slot.id, slot.start_utc, slot.end_utc) if slot is not None else None
        if key == self._key and self._handle is not None:
            return self._handle

        self.close()
        self._key = key
        if slot is not None:
            self._handle = schedule_countdown(
                slot.start_utc, slot.end_utc, self._on_update, self._clock, self._interval
            )
        return self._handle

    def close(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._key = None
