from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from mockprep.domain.entities.experience import Experience
from mockprep.domain.entities.interview_slot import InterviewMode
from mockprep.domain.entities.resume import ResumeReference

ROLE_NOT_FOUND = "No Role Found"


@dataclass(frozen=True)
class BookingDraft:
    role: str = ""
    selected_date: date | None = None
    selected_time: str | None = None  # display label, e.g. "2:00 PM"
    skills: tuple[str, ...] = ()
    years_selected: tuple[int, ...] = ()  # prefix set, see ExperienceSelector
    months_selected: tuple[int, ...] = ()
    resume: ResumeReference | None = None
    mode: InterviewMode = InterviewMode.ONLINE

    @property
    def experience(self) -> Experience:
        return Experience(
            years=max(self.years_selected, default=0),
            months=max(self.months_selected, default=0),
        )

    @property
    def has_experience_selection(self) -> bool:
        return bool(self.years_selected or self.months_selected)
