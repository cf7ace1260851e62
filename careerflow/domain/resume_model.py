"""Structured resume content held during an editing session.

Every field has an empty default so the projector never sees missing data.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

# camelCase form keys → dataclass attribute names
_CONTACT_KEYS = {
    "professionalTitle": "professional_title",
    "email": "email",
    "mobile": "mobile",
    "city": "city",
    "state": "state",
    "linkedin": "linkedin",
}

_ENTRY_KEYS = {
    "organization": "organization",
    "title": "title",
    "startDate": "start_date",
    "endDate": "end_date",
    "description": "description",
    "current": "current",
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


_TRUTHY = {"true", "1", "on", "yes"}


def _flag(value: Any) -> bool:
    """Form checkboxes arrive as booleans or as their string form."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _pick(data: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    picked: Dict[str, Any] = {}
    for camel, snake in mapping.items():
        if camel in data:
            picked[snake] = data[camel]
        elif snake in data:
            picked[snake] = data[snake]
    return picked


@dataclass
class ContactInfo:
    professional_title: str = ""
    email: str = ""
    mobile: str = ""
    city: str = ""
    state: str = ""
    linkedin: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ContactInfo":
        values = _pick(data or {}, _CONTACT_KEYS)
        return cls(**{k: _text(v) for k, v in values.items()})

    def to_dict(self) -> Dict[str, str]:
        return {camel: getattr(self, snake) for camel, snake in _CONTACT_KEYS.items()}

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))


@dataclass
class Entry:
    """One experience, education or project item."""

    organization: str = ""
    title: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    current: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Entry":
        values = _pick(data or {}, _ENTRY_KEYS)
        current = _flag(values.pop("current", False))
        return cls(current=current, **{k: _text(v) for k, v in values.items()})

    def to_dict(self) -> Dict[str, Any]:
        return {camel: getattr(self, snake) for camel, snake in _ENTRY_KEYS.items()}

    def description_lines(self) -> List[str]:
        """Non-blank, trimmed description lines. A missing description yields none."""
        return [line.strip() for line in self.description.split("\n") if line.strip()]


@dataclass
class Resume:
    contact_info: ContactInfo = field(default_factory=ContactInfo)
    summary: str = ""
    skills: str = ""
    experience: List[Entry] = field(default_factory=list)
    education: List[Entry] = field(default_factory=list)
    projects: List[Entry] = field(default_factory=list)
    # Session-only; never projected or persisted.
    job_description: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Resume":
        data = data or {}
        contact = data.get("contactInfo", data.get("contact_info"))

        def _entries(key: str) -> List[Entry]:
            return [Entry.from_dict(item) for item in (data.get(key) or [])]

        return cls(
            contact_info=ContactInfo.from_dict(contact),
            summary=_text(data.get("summary")),
            skills=_text(data.get("skills")),
            experience=_entries("experience"),
            education=_entries("education"),
            projects=_entries("projects"),
            job_description=_text(data.get("jobDescription", data.get("job_description"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contactInfo": self.contact_info.to_dict(),
            "summary": self.summary,
            "skills": self.skills,
            "experience": [e.to_dict() for e in self.experience],
            "education": [e.to_dict() for e in self.education],
            "projects": [e.to_dict() for e in self.projects],
            "jobDescription": self.job_description,
        }


def resolve_display_name(full_name: str = "", first_name: str = "", last_name: str = "") -> str:
    """Pick the name shown in the resume header."""
    if full_name and full_name.strip():
        return full_name.strip()
    joined = f"{first_name or ''} {last_name or ''}".strip()
    return joined or "Your Name"
