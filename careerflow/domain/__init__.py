"""Careerflow Domain - Pure domain logic for resume content.

This package contains pure functions with no file system, network or LLM
dependencies. All I/O is handled by the rendering and web layers; this
package operates on strings, dicts and dataclasses.
"""

from .ats_scorer import (
    ATSScoreResult,
    HeuristicResult,
    KeywordPayloadError,
    KeywordResult,
    build_keyword_prompt,
    combine_scores,
    format_ats_report,
    parse_keyword_payload,
    score_heuristics,
)
from .keyword_terms import INDUSTRY_TERMS, industry_terms, union_keywords
from .markdown_projector import (
    PLACEHOLDERS,
    ProjectionStyle,
    entries_to_markdown,
    flatten_for_save,
    parse_entry_date,
    project_resume,
    sort_reverse_chronological,
)
from .onboarding import OnboardingProfile, format_industry, validate_onboarding
from .preview_sync import PreviewSession, is_form_empty, recompute_preview
from .resume_model import ContactInfo, Entry, Resume, resolve_display_name
from .resume_validator import ValidationResult, validate_resume_form

__all__ = [
    # Model
    "ContactInfo",
    "Entry",
    "Resume",
    "resolve_display_name",
    # Projector
    "PLACEHOLDERS",
    "ProjectionStyle",
    "project_resume",
    "entries_to_markdown",
    "sort_reverse_chronological",
    "parse_entry_date",
    "flatten_for_save",
    # Preview sync
    "PreviewSession",
    "is_form_empty",
    "recompute_preview",
    # ATS
    "ATSScoreResult",
    "HeuristicResult",
    "KeywordResult",
    "KeywordPayloadError",
    "score_heuristics",
    "build_keyword_prompt",
    "parse_keyword_payload",
    "combine_scores",
    "format_ats_report",
    # Keywords
    "INDUSTRY_TERMS",
    "industry_terms",
    "union_keywords",
    # Onboarding
    "OnboardingProfile",
    "format_industry",
    "validate_onboarding",
    # Validator
    "ValidationResult",
    "validate_resume_form",
]
