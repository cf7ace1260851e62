"""Pure domain logic for projecting a structured resume into Markdown text.

All functions accept and return strings or model objects -- no file I/O.
The rendering layer consumes the projected text.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .resume_model import ContactInfo, Entry, Resume

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SECTION_RULE = "---"
HEADING_MARKER = "## "

PLACEHOLDERS: Dict[str, str] = {
    "name": "Your Name",
    "professional_title": "PROFESSIONAL TITLE",
    "city": "City",
    "state": "State",
    "mobile": "Phone",
    "email": "Email",
    "date": "20XX",
    "experience.organization": "Organization Name",
    "experience.title": "Job Title",
    "education.organization": "University Name",
    "education.title": "Degree",
    "projects.title": "Project Title",
}

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m", "%Y/%m", "%m/%Y", "%b %Y", "%B %Y", "%Y")


class ProjectionStyle(str, Enum):
    """How experience/education/project entries are rendered."""

    STANDARD = "standard"
    REVERSE_CHRONOLOGICAL = "reverse_chronological"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def project_resume(
    resume: Resume,
    display_name: str,
    style: ProjectionStyle = ProjectionStyle.STANDARD,
) -> str:
    """Project *resume* into the Markdown document used for preview, save and export.

    The header block is always emitted. Sections with no data are omitted
    entirely, including their heading and rule.
    """
    blocks: List[str] = [_header(resume.contact_info, display_name)]

    summary = resume.summary.strip()
    if summary:
        blocks.append(_section("Professional Summary", summary))

    skills = [line.strip() for line in resume.skills.split("\n") if line.strip()]
    if skills:
        blocks.append(_section("Skills & Abilities", _bullets(skills)))

    if style == ProjectionStyle.REVERSE_CHRONOLOGICAL:
        blocks.append(entries_to_markdown(resume.experience, "Experience"))
        blocks.append(entries_to_markdown(resume.education, "Education"))
        blocks.append(entries_to_markdown(resume.projects, "Projects"))
    else:
        blocks.append(_entry_section("Experience", resume.experience, _experience_block))
        blocks.append(_entry_section("Education", resume.education, _education_block))
        blocks.append(_entry_section("Projects", resume.projects, _project_block))

    return "\n\n".join(block.strip() for block in blocks if block.strip())


def entries_to_markdown(entries: Sequence[Entry], section_title: str) -> str:
    """Render *entries* newest-first with upper-cased heading and titles.

    Each entry's description becomes a single bullet. Entries whose start
    date cannot be parsed sort after every dated entry, keeping their order.
    """
    if not entries:
        return ""

    kind = section_title.strip().lower()
    rendered = []
    for entry in sort_reverse_chronological(entries):
        title = _or(entry.title, f"{kind}.title", fallback="experience.title").upper()
        organization = entry.organization.strip()
        if organization or kind != "projects":
            organization = _or(organization, f"{kind}.organization", fallback="experience.organization")
            heading = f"### {title} @ {organization.upper()}"
        else:
            heading = f"### {title}"

        block = f"{heading}\n{_date_range(entry)}"
        description = entry.description.strip()
        if description:
            block += f"\n\n- {description}"
        rendered.append(block)

    return f"{HEADING_MARKER}{section_title.upper()}\n\n" + "\n\n".join(rendered)


def sort_reverse_chronological(entries: Sequence[Entry]) -> List[Entry]:
    """Return *entries* ordered by parsed start date, newest first."""

    def _key(item: Tuple[int, Entry]) -> Tuple[int, int, int]:
        index, entry = item
        parsed = parse_entry_date(entry.start_date)
        if parsed is None:
            return (1, 0, index)
        return (0, -parsed.toordinal(), index)

    return [entry for _, entry in sorted(enumerate(entries), key=_key)]


def parse_entry_date(value: str) -> Optional[datetime]:
    """Parse the date formats users type into entry forms."""
    text = (value or "").strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def flatten_for_save(content: str) -> str:
    """Collapse blank-line runs to one blank line and trim the document."""
    text = content.replace("\r\n", "\n")
    text = re.sub(r"\n\s*\n", "\n\n", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _or(value: str, key: str, fallback: str = "") -> str:
    text = (value or "").strip()
    if text:
        return text
    return PLACEHOLDERS.get(key) or PLACEHOLDERS[fallback]


def _header(contact: ContactInfo, display_name: str) -> str:
    location = (
        f"{_or(contact.city, 'city')}, {_or(contact.state, 'state')}"
        f" | {_or(contact.mobile, 'mobile')} | {_or(contact.email, 'email')}"
    )
    return "\n".join(
        [
            _or(display_name, "name"),
            _or(contact.professional_title, "professional_title"),
            location,
        ]
    )


def _section(title: str, body: str) -> str:
    return f"{HEADING_MARKER}{title}\n\n{body.strip()}\n\n{SECTION_RULE}"


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _date_range(entry: Entry) -> str:
    start = _or(entry.start_date, "date")
    end = "Present" if entry.current else _or(entry.end_date, "date")
    return f"{start} - {end}"


def _entry_section(title: str, entries: Sequence[Entry], render) -> str:
    if not entries:
        return ""
    return _section(title, "\n\n".join(render(entry) for entry in entries))


def _experience_block(entry: Entry) -> str:
    lines = [
        f"{_or(entry.organization, 'experience.organization')} | {_or(entry.title, 'experience.title')}",
        _date_range(entry),
    ]
    lines.extend(f"- {line}" for line in entry.description_lines())
    return "\n".join(lines)


def _education_block(entry: Entry) -> str:
    return "\n".join(
        [
            f"{_or(entry.organization, 'education.organization')}, {_or(entry.title, 'education.title')}",
            _date_range(entry),
        ]
    )


def _project_block(entry: Entry) -> str:
    lines = [_or(entry.title, "projects.title"), _date_range(entry)]
    lines.extend(f"- {line}" for line in entry.description_lines())
    return "\n".join(lines)
