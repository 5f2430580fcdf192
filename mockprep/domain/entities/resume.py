from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_RESUME_PREFIX = "DEFAULT_RESUME_"


class ResumeKind(str, Enum):
    TEMPLATE = "template"
    UPLOAD = "upload"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResumeReference:
    kind: ResumeKind
    value: str  # template id, uploaded file URL, or default index

    @staticmethod
    def default(index: int = 0) -> "ResumeReference":
        return ResumeReference(kind=ResumeKind.DEFAULT, value=str(index))

    @staticmethod
    def upload(url: str) -> "ResumeReference":
        return ResumeReference(kind=ResumeKind.UPLOAD, value=url)

    @staticmethod
    def template(template_id: str) -> "ResumeReference":
        return ResumeReference(kind=ResumeKind.TEMPLATE, value=str(template_id))

    @property
    def wire_value(self) -> str:
        if self.kind == ResumeKind.DEFAULT:
            return f"{DEFAULT_RESUME_PREFIX}{self.value}"
        return self.value

    @staticmethod
    def from_wire(value: str | None) -> "ResumeReference | None":
        text = (value or "").strip()
        if not text:
            return None
        suffix = text[len(DEFAULT_RESUME_PREFIX):]
        if text.startswith(DEFAULT_RESUME_PREFIX) and suffix.isdigit():
            return ResumeReference.default(int(suffix))
        if text.lower().startswith(("http://", "https://")):
            return ResumeReference.upload(text)
        return ResumeReference.template(text)
