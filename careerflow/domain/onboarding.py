"""Pure validation for the onboarding profile form."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .resume_validator import ValidationResult

MAX_BIO_LENGTH = 500
MIN_EXPERIENCE_YEARS = 0
MAX_EXPERIENCE_YEARS = 50

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class OnboardingProfile:
    industry: str
    sub_industry: str
    experience: int
    skills: List[str] = field(default_factory=list)
    bio: Optional[str] = None

    @property
    def stored_industry(self) -> str:
        return format_industry(self.industry, self.sub_industry)


def format_industry(industry: str, sub_industry: str) -> str:
    """``"tech", "Software Development"`` → ``"tech-software-development"``."""
    return f"{industry}-{sub_industry.lower().replace(' ', '-')}"


def validate_onboarding(payload: Dict[str, Any]) -> ValidationResult:
    """Validate a camelCase onboarding payload.

    On success ``result.value`` holds an :class:`OnboardingProfile`.
    """
    errors: List[Dict[str, str]] = []

    industry = _str(payload.get("industry"))
    if not industry:
        errors.append(_error("industry", "Please select an industry"))

    sub_industry = _str(payload.get("subIndustry", payload.get("sub_industry")))
    if not sub_industry:
        errors.append(_error("subIndustry", "Please select a specialization"))

    bio = payload.get("bio")
    if bio is not None and len(str(bio)) > MAX_BIO_LENGTH:
        errors.append(_error("bio", f"Bio must contain at most {MAX_BIO_LENGTH} characters"))

    experience = _parse_experience(payload.get("experience"), errors)

    skills_raw = _str(payload.get("skills"))
    skills = [s.strip() for s in skills_raw.split(",") if s.strip()]
    if not skills_raw or not skills:
        errors.append(_error("skills", "Please provide your skills"))

    if errors:
        return ValidationResult(valid=False, errors=errors)

    profile = OnboardingProfile(
        industry=industry,
        sub_industry=sub_industry,
        experience=experience if experience is not None else 0,
        skills=skills,
        bio=str(bio) if bio is not None else None,
    )
    return ValidationResult(valid=True, value=profile)


def _parse_experience(value: Any, errors: List[Dict[str, str]]) -> Optional[int]:
    if isinstance(value, bool):
        value = None
    if isinstance(value, int):
        years = value
    else:
        text = _str(value)
        if not text:
            errors.append(_error("experience", "Please enter years of experience"))
            return None
        match = _LEADING_INT.match(text)
        if not match:
            errors.append(_error("experience", "Experience must be a number"))
            return None
        years = int(match.group(1))

    if years < MIN_EXPERIENCE_YEARS:
        errors.append(_error("experience", "Experience must be at least 0 years"))
        return None
    if years > MAX_EXPERIENCE_YEARS:
        errors.append(_error("experience", "Experience cannot exceed 50 years"))
        return None
    return years


def _str(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _error(field_name: str, message: str) -> Dict[str, str]:
    return {"level": "error", "field": field_name, "message": message}
