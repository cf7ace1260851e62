"""Decide when projected text may replace the displayed resume text.

Structured-form edits and hand edits to the Markdown are separate tracks.
A structured change after a hand edit replaces the hand-edited text; nothing
is merged back into the form.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .markdown_projector import ProjectionStyle, project_resume
from .resume_model import ContactInfo, Resume


def is_form_empty(resume: Resume) -> bool:
    """True when no field that feeds the projection holds data.

    ``job_description`` is session-only and does not count.
    """
    return (
        not resume.summary
        and not resume.skills
        and resume.contact_info.is_empty()
        and not resume.experience
        and not resume.education
        and not resume.projects
    )


def recompute_preview(
    resume: Resume,
    initial_content: str,
    display_name: str,
    style: ProjectionStyle = ProjectionStyle.STANDARD,
) -> str:
    """Return the text to display after a structured change."""
    if is_form_empty(resume):
        return initial_content
    return project_resume(resume, display_name, style=style)


@dataclass
class PreviewSession:
    """Editing-session state for one resume.

    Call :meth:`apply` after every structured mutation; it recomputes the
    displayed text. :meth:`edit_markdown` records a hand edit.
    """

    display_name: str
    initial_content: str = ""
    resume: Resume = field(default_factory=Resume)
    style: ProjectionStyle = ProjectionStyle.STANDARD
    content: str = ""
    hand_edited: bool = False

    def __post_init__(self) -> None:
        self.content = recompute_preview(self.resume, self.initial_content, self.display_name, self.style)

    @property
    def overwrites_hand_edits(self) -> bool:
        """Whether the next structured change discards hand-edited text."""
        return self.hand_edited

    def apply(self, **changes: Any) -> str:
        """Replace top-level resume fields and recompute the preview.

        ``contact_info`` may be passed as a mapping of contact fields to update.
        """
        contact = changes.pop("contact_info", None)
        if isinstance(contact, dict):
            contact = replace(self.resume.contact_info, **contact)
        if contact is not None:
            if not isinstance(contact, ContactInfo):
                raise TypeError("contact_info must be a ContactInfo or a mapping")
            changes["contact_info"] = contact
        self.resume = replace(self.resume, **changes)
        return self.refresh()

    def refresh(self) -> str:
        """Recompute the displayed text from the structured form."""
        self.content = recompute_preview(self.resume, self.initial_content, self.display_name, self.style)
        self.hand_edited = False
        return self.content

    def edit_markdown(self, text: str) -> None:
        self.content = text
        self.hand_edited = True
