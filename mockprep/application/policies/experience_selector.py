from __future__ import annotations

from dataclasses import dataclass

YEARS_RANGE = (0, 20)
MONTHS_RANGE = (0, 11)


@dataclass(frozen=True)
class PrefixToggleSelector:
    """
    Picker where choosing k highlights every value 1..k.

    The active set is always {}, {0} or a contiguous prefix {1..k}:
    - select k > 0: {1..k}; selecting the current maximum again steps down to {1..k-1}
    - select 0: {0} (fresher); selecting 0 again when it is the only value clears the set
    - values outside [low, high] are ignored
    """

    low: int
    high: int
    selected: tuple[int, ...] = ()

    @property
    def value(self) -> int:
        return max(self.selected, default=0)

    @property
    def has_selection(self) -> bool:
        return bool(self.selected)

    def select(self, k: int) -> "PrefixToggleSelector":
        if not isinstance(k, int) or isinstance(k, bool) or not self.low <= k <= self.high:
            return self

        if k == 0:
            new = () if self.selected == (0,) else (0,)
        elif self.selected and k == self.selected[-1]:
            new = tuple(range(1, k))
        else:
            new = tuple(range(1, k + 1))

        return PrefixToggleSelector(low=self.low, high=self.high, selected=new)


def years_selector(selected: tuple[int, ...] = ()) -> PrefixToggleSelector:
    return PrefixToggleSelector(low=YEARS_RANGE[0], high=YEARS_RANGE[1], selected=tuple(selected))


def months_selector(selected: tuple[int, ...] = ()) -> PrefixToggleSelector:
    return PrefixToggleSelector(low=MONTHS_RANGE[0], high=MONTHS_RANGE[1], selected=tuple(selected))


def is_valid_selection(selected: tuple[int, ...], low: int, high: int) -> bool:
    """True for (), (0,) or (1..k) with k in [low, high]; order is not significant."""
    values = tuple(sorted(selected))
    if any(isinstance(v, bool) or not isinstance(v, int) for v in values):
        return False
    if values in ((), (0,)):
        return values == () or low <= 0
    k = values[-1]
    return low <= k <= high and values == tuple(range(1, k + 1))


def prefix_of(k: int) -> tuple[int, ...]:
    """Active set for a plain value: 0 -> (0,), k -> (1..k)."""
    if k <= 0:
        return (0,)
    return tuple(range(1, k + 1))


def experience_display(years: PrefixToggleSelector, months: PrefixToggleSelector) -> str:
    return f"{years.value} years {months.value} months"
