"""Pure domain logic for resume form validation.

Errors are reported per field so a form can show them next to the input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List
from urllib.parse import urlparse

from .resume_model import Entry, Resume


@dataclass
class ValidationResult:
    """Structured result from form validation."""

    valid: bool
    errors: List[Dict[str, str]] = field(default_factory=list)
    warnings: List[Dict[str, str]] = field(default_factory=list)
    value: Any = None

    def field_errors(self) -> Dict[str, str]:
        """First error message per field path."""
        out: Dict[str, str] = {}
        for e in self.errors:
            out.setdefault(e["field"], e["message"])
        return out


_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_resume_form(resume: Resume) -> ValidationResult:
    """Validate the structured resume form.

    Empty optional fields are accepted; filled ones must have the right shape.
    """
    issues: List[Dict[str, str]] = []
    issues.extend(_check_contact(resume))
    for section, entries in (
        ("experience", resume.experience),
        ("education", resume.education),
        ("projects", resume.projects),
    ):
        for index, entry in enumerate(entries):
            issues.extend(_check_entry(f"{section}.{index}", entry, needs_description=section != "education"))

    errors = [i for i in issues if i["level"] == "error"]
    warnings = [i for i in issues if i["level"] == "warning"]
    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings, value=resume)


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


# ---------------------------------------------------------------------------
# Private checks
# ---------------------------------------------------------------------------


def _check_contact(resume: Resume) -> List[Dict[str, str]]:
    issues: List[Dict[str, str]] = []
    contact = resume.contact_info

    if contact.email and not is_valid_email(contact.email):
        issues.append(_issue("error", "contactInfo.email", "Invalid email"))
    if contact.linkedin and not is_valid_url(contact.linkedin):
        issues.append(_issue("error", "contactInfo.linkedin", "Invalid URL"))
    if not contact.email and not contact.mobile:
        issues.append(_issue("warning", "contactInfo", "No email or phone number -- recruiters cannot reach you"))
    return issues


def _check_entry(path: str, entry: Entry, needs_description: bool) -> List[Dict[str, str]]:
    issues: List[Dict[str, str]] = []
    if not entry.current and not entry.end_date.strip():
        issues.append(
            _issue(
                "error",
                f"{path}.endDate",
                "End date is required unless this is your current position",
            )
        )
    if needs_description and not entry.description.strip():
        issues.append(_issue("warning", f"{path}.description", "Description is empty"))
    return issues


def _issue(level: str, field_name: str, message: str) -> Dict[str, str]:
    return {"level": level, "field": field_name, "message": message}
