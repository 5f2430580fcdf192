from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from mockprep.application.utils.time_format import parse_instant
from mockprep.domain.entities.experience import Experience
from mockprep.domain.entities.interview_slot import InterviewMode, InterviewSlot, SlotStatus
from mockprep.domain.entities.resume import ResumeReference

logger = logging.getLogger(__name__)

_EXPERIENCE_TEXT = re.compile(r"(\d+)\s*years?\D+(\d+)\s*months?", re.IGNORECASE)
_SHORT_OFFSET = re.compile(r"(:\d{2}(?:\.\d+)?[+-]\d{2})$")
_TRUE_WORDS = {"true", "1", "yes", "y"}


class SlotPayloadDTO(BaseModel):
    """
    Raw slot as returned by the Scheduling API.

    The server is not consistent about field names or types; every alias the
    backend is known to emit is listed here and every value is coerced, so a
    single odd field never costs the whole slot. The rest of the code only ever
    sees InterviewSlot.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    slot_id: Any = Field(
        default=None,
        validation_alias=AliasChoices("interview_slot_id", "interviewSlotId", "slot_id", "slotId", "id", "_id"),
    )
    # ts_range is a "[start,end)" range; its upper bound stands in for a missing end
    start: Any = Field(
        default=None,
        validation_alias=AliasChoices("start_time_utc", "start_time", "startTime", "ts_range", "start"),
    )
    end: Any = Field(
        default=None,
        validation_alias=AliasChoices("end_time_utc", "end_time", "endTime", "end"),
    )
    job_role: str | None = Field(
        default=None,
        validation_alias=AliasChoices("job_role", "title", "role", "position", "jobTitle"),
    )
    experience_in_months: int | None = None
    experience_years: int | None = None
    experience_months: int | None = None
    experience: Any = Field(default=None, validation_alias=AliasChoices("experience", "experienceLevel"))
    skills: list[str] | None = Field(default=None, validation_alias=AliasChoices("skills", "skill"))
    primary_skills: list[str] | None = None
    secondary_skills: list[str] | None = None
    resume_url: str | None = Field(default=None, validation_alias=AliasChoices("resume_url", "resumeUrl", "resume"))
    mode: str | None = Field(default=None, validation_alias=AliasChoices("interview_mode", "mode", "interviewMode"))
    payment_done: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("is_payment_done", "isPaymentDone", "payment_done"),
    )
    status: str | None = Field(default=None, validation_alias=AliasChoices("interview_status", "status"))
    interview_code: str | None = Field(
        default=None,
        validation_alias=AliasChoices("interview_code", "code", "interviewCode"),
    )

    @field_validator("job_role", "resume_url", "mode", "status", "interview_code", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str | None:
        if value is None or isinstance(value, (bool, dict, list, tuple)):
            return None
        return str(value)

    @field_validator("experience_in_months", "experience_years", "experience_months", mode="before")
    @classmethod
    def _as_int(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("skills", "primary_skills", "secondary_skills", mode="before")
    @classmethod
    def _as_text_list(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        if isinstance(value, str):
            return value.split(",")
        if not isinstance(value, (list, tuple)):
            return None
        return [str(item) for item in value if isinstance(item, (str, int, float)) and not isinstance(item, bool)]

    @field_validator("payment_done", mode="before")
    @classmethod
    def _as_flag(cls, value: Any) -> bool | None:
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_WORDS
        if isinstance(value, (int, float)):
            return bool(value)
        return None

    def to_slot(self) -> InterviewSlot:
        start, range_end = _range_bounds(self.start)
        return InterviewSlot(
            id="" if self.slot_id is None else str(self.slot_id),
            start_utc=parse_instant(start),
            end_utc=parse_instant(self.end if self.end is not None else range_end),
            job_role=(self.job_role or "").strip(),
            experience=self._experience(),
            skills=self._skills(),
            resume=ResumeReference.from_wire(self.resume_url),
            mode=_parse_mode(self.mode),
            payment_done=bool(self.payment_done),
            status=_parse_status(self.status),
            interview_code=(self.interview_code or "").strip() or None,
        )

    def _experience(self) -> Experience:
        if self.experience_in_months is not None:
            return Experience.from_total_months(self.experience_in_months)
        if self.experience_years is not None or self.experience_months is not None:
            return Experience(years=self.experience_years or 0, months=self.experience_months or 0)
        if isinstance(self.experience, int) and not isinstance(self.experience, bool):
            return Experience.from_total_months(self.experience)
        if isinstance(self.experience, str):
            match = _EXPERIENCE_TEXT.search(self.experience)
            if match:
                return Experience(years=int(match.group(1)), months=int(match.group(2)))
        return Experience()

    def _skills(self) -> tuple[str, ...]:
        raw = self.skills
        if raw is None:
            raw = list(self.primary_skills or []) + list(self.secondary_skills or [])
        seen: list[str] = []
        for skill in raw:
            cleaned = (skill or "").strip()
            if cleaned and cleaned not in seen:
                seen.append(cleaned)
        return tuple(seen)


def _parse_status(value: str | None) -> SlotStatus:
    text = (value or "").strip().lower()
    if not text:
        return SlotStatus.open
    try:
        return SlotStatus(text)
    except ValueError:
        logger.warning("Unknown slot status from server", extra={"status": text})
        return SlotStatus.open


def _parse_mode(value: str | None) -> InterviewMode:
    text = (value or "").strip().upper()
    if text == InterviewMode.OFFLINE.value:
        return InterviewMode.OFFLINE
    return InterviewMode.ONLINE


def _range_bounds(value: Any) -> tuple[Any, Any]:
    """Split a range value such as '["2026-10-20 04:30:00+00","2026-10-20 05:30:00+00")' into (lower, upper)."""
    if isinstance(value, (list, tuple)):
        return (value[0], value[1]) if len(value) == 2 else (None, None)
    if not isinstance(value, str):
        return value, None
    text = value.strip()
    if not text.startswith(("[", "(")):
        return value, None
    bounds = [_SHORT_OFFSET.sub(r"\1:00", part.strip().strip('"')) for part in text[1:-1].split(",", 1)]
    if len(bounds) != 2:
        return None, None
    return bounds[0] or None, bounds[1] or None


def normalize_slot(raw: dict[str, Any]) -> InterviewSlot:
    """Map one server payload (optionally wrapped in "interview_slot") to InterviewSlot."""
    if isinstance(raw.get("interview_slot"), dict):
        raw = raw["interview_slot"]
    return SlotPayloadDTO.model_validate(raw).to_slot()


def normalize_slot_list(data: Any) -> list[InterviewSlot]:
    if isinstance(data, dict):
        for key in ("slots", "schedules", "interview_slots", "data"):
            if isinstance(data.get(key), list):
                data = data[key]
                break
        else:
            data = []
    if not isinstance(data, list):
        return []
    slots: list[InterviewSlot] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            slots.append(normalize_slot(item))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed slot from server",
                extra={"slot_id": extract_slot_id(item), "error": str(e)},
            )
    return slots


def extract_slot_id(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    for key in ("interview_slot_id", "slot_id", "slotId", "id"):
        value = data.get(key)
        if value not in (None, ""):
            return str(value)
    return None
