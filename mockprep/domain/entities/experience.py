from dataclasses import dataclass


@dataclass(frozen=True)
class Experience:
    years: int = 0
    months: int = 0

    @property
    def display(self) -> str:
        return f"{self.years} years {self.months} months"

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @staticmethod
    def from_total_months(total: int | None) -> "Experience":
        total = max(0, int(total or 0))
        return Experience(years=total // 12, months=total % 12)
