from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class TimeOption:
    label: str
    selectable: bool


@dataclass(frozen=True)
class DateSlotCandidate:
    date: date
    day_label: str  # "MON", "TUE", ...
    times: tuple[TimeOption, ...] = ()

    @property
    def is_selectable(self) -> bool:
        return any(t.selectable for t in self.times)
