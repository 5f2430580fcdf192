from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any

from mockprep.application.exceptions import ValidationError
from mockprep.application.policies.experience_selector import months_selector, prefix_of, years_selector
from mockprep.application.policies.time_slot_policy import default_time_for
from mockprep.application.utils.time_format import format_date_for_api, format_time_for_api
from mockprep.domain.entities.booking_draft import ROLE_NOT_FOUND, BookingDraft
from mockprep.domain.entities.interview_slot import InterviewMode
from mockprep.domain.entities.resume import ResumeKind, ResumeReference

PREFILLED_SKILLS = 5
PREFILLED_YEARS = 3
PREFILLED_MONTHS = 3

ALLOWED_RESUME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
MAX_RESUME_BYTES = 5 * 1024 * 1024


def initial_draft(
    role: str | None,
    skills: list[str] | None,
    now: datetime,
    mode: InterviewMode = InterviewMode.ONLINE,
) -> BookingDraft:
    """Pre-filled form: profile role, first five skills, today, first open time, default resume."""
    today = now.date()
    return BookingDraft(
        role=(role or "").strip() or ROLE_NOT_FOUND,
        selected_date=today,
        selected_time=default_time_for(today, now),
        skills=tuple(s.strip() for s in (skills or []) if s and s.strip())[:PREFILLED_SKILLS],
        years_selected=prefix_of(PREFILLED_YEARS),
        months_selected=prefix_of(PREFILLED_MONTHS),
        resume=ResumeReference.default(0),
        mode=mode,
    )


def with_date(draft: BookingDraft, day: date, now: datetime) -> BookingDraft:
    """Picking a day also resets the time to the first one still open that day."""
    return replace(draft, selected_date=day, selected_time=default_time_for(day, now))


def with_time(draft: BookingDraft, label: str) -> BookingDraft:
    return replace(draft, selected_time=label)


def toggle_skill(draft: BookingDraft, skill: str) -> BookingDraft:
    if skill in draft.skills:
        return replace(draft, skills=tuple(s for s in draft.skills if s != skill))
    return replace(draft, skills=draft.skills + (skill,))


def select_years(draft: BookingDraft, k: int) -> BookingDraft:
    return replace(draft, years_selected=years_selector(draft.years_selected).select(k).selected)


def select_months(draft: BookingDraft, k: int) -> BookingDraft:
    return replace(draft, months_selected=months_selector(draft.months_selected).select(k).selected)


def with_default_resume(draft: BookingDraft, index: int) -> BookingDraft:
    return replace(draft, resume=ResumeReference.default(index))


def with_template_resume(draft: BookingDraft, template_id: str) -> BookingDraft:
    return replace(draft, resume=ResumeReference.template(template_id))


def with_uploaded_resume(draft: BookingDraft, url: str) -> BookingDraft:
    return replace(draft, resume=ResumeReference.upload(url))


def without_uploaded_resume(draft: BookingDraft) -> BookingDraft:
    """Removing an upload falls back to the first default resume."""
    if draft.resume is not None and draft.resume.kind != ResumeKind.UPLOAD:
        return draft
    return replace(draft, resume=ResumeReference.default(0))


def validate_resume_upload(content_type: str | None, size_bytes: int) -> None:
    if (content_type or "").lower() not in ALLOWED_RESUME_TYPES:
        raise ValidationError(["Please upload a PDF, DOC, or DOCX file"])
    if size_bytes > MAX_RESUME_BYTES:
        raise ValidationError(["File size must be less than 5MB"])


def build_create_payload(draft: BookingDraft) -> dict[str, Any]:
    """Wire payload for create_slot. Assumes the draft passed validation."""
    experience = draft.experience
    return {
        "job_role": draft.role,
        "experience_years": experience.years,
        "experience_months": experience.months,
        "experience": experience.display,
        "skills": list(draft.skills),
        "resume_url": draft.resume.wire_value if draft.resume else "",
        "date": format_date_for_api(draft.selected_date),
        "time": format_time_for_api(draft.selected_time),
        "mode": draft.mode.value,
    }
