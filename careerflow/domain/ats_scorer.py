"""Pure domain logic for ATS (Applicant Tracking System) resume scoring.

The final score averages a heuristic score computed here with a keyword
match score returned by a remote model. All functions operate on strings --
no network or file I/O.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, List

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DISALLOWED_GLYPHS = ("📧", "📱", "💼", "🐦")
GLYPH_PENALTY = 20
GLYPH_FEEDBACK = "Remove icons (e.g., 📧, 📱) as they may not be parsed by ATS systems."

REQUIRED_HEADINGS = (
    "Professional Summary",
    "Skills & Abilities",
    "Experience",
    "Education",
)
HEADING_PENALTY = 10

KEYWORD_PROMPT = """
Analyze the following resume content and job description to calculate an ATS compatibility score (0-100) based on keyword matching.
Return the result as a JSON object with "keywordScore" (number) and "keywordFeedback" (string).

Resume Content: {content}
Job Description: {job_description}
"""

_FENCE_START = re.compile(r"^```(?:json)?", re.IGNORECASE)
_FENCE_END = re.compile(r"```$")


class KeywordPayloadError(ValueError):
    """Raised when the keyword model response is not the expected JSON."""


@dataclass
class HeuristicResult:
    score: int
    feedback: List[str] = field(default_factory=list)


@dataclass
class KeywordResult:
    score: float
    feedback: str = ""


@dataclass
class ATSScoreResult:
    """Combined heuristic + keyword score."""

    score: int
    feedback: str
    heuristic: HeuristicResult
    keywords: KeywordResult


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_heuristics(content: str) -> HeuristicResult:
    """Apply the fixed-deduction checks to *content*."""
    score = 100
    feedback: List[str] = []

    if any(glyph in content for glyph in DISALLOWED_GLYPHS):
        score -= GLYPH_PENALTY
        feedback.append(GLYPH_FEEDBACK)

    for heading in REQUIRED_HEADINGS:
        if heading not in content:
            score -= HEADING_PENALTY
            feedback.append(f'Include a "{heading}" section to help ATS systems identify key information.')

    return HeuristicResult(score=score, feedback=feedback)


def build_keyword_prompt(content: str, job_description: str) -> str:
    return KEYWORD_PROMPT.format(content=content, job_description=job_description)


def parse_keyword_payload(raw: str) -> KeywordResult:
    """Parse the model's ``{keywordScore, keywordFeedback}`` JSON.

    Markdown code fences around the JSON are stripped first.
    """
    text = (raw or "").strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text).strip()

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise KeywordPayloadError(f"Keyword response is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, dict) or "keywordScore" not in data:
        raise KeywordPayloadError("Keyword response is missing 'keywordScore'")

    try:
        score = float(data["keywordScore"])
    except (TypeError, ValueError) as exc:
        raise KeywordPayloadError("Keyword score must be a number") from exc
    if math.isnan(score):
        raise KeywordPayloadError("Keyword score must be a number")

    feedback = data.get("keywordFeedback") or ""
    return KeywordResult(score=min(max(score, 0.0), 100.0), feedback=str(feedback))


def combine_scores(heuristic: HeuristicResult, keywords: KeywordResult) -> ATSScoreResult:
    """Average the two scores (half rounds up) and concatenate feedback."""
    final_score = math.floor((heuristic.score + keywords.score) / 2 + 0.5)
    parts = list(heuristic.feedback)
    if keywords.feedback:
        parts.append(keywords.feedback)
    return ATSScoreResult(
        score=int(final_score),
        feedback=" ".join(parts),
        heuristic=heuristic,
        keywords=keywords,
    )


# ---------------------------------------------------------------------------
# Formatting report (pure string output)
# ---------------------------------------------------------------------------


def format_ats_report(result: ATSScoreResult) -> str:
    """Render an :class:`ATSScoreResult` as a human-readable report."""
    lines = [
        f"## ATS Score: {result.score}/100 {_score_to_grade(result.score)}",
        _score_bar(result.score),
        "",
        "| Component | Score |",
        "|-----------|-------|",
        f"| Heuristic | {result.heuristic.score:3d}   |",
        f"| Keywords  | {round(result.keywords.score):3d}   |",
    ]

    suggestions = list(result.heuristic.feedback)
    if result.keywords.feedback:
        suggestions.append(result.keywords.feedback)
    if suggestions:
        lines.append("")
        lines.append("### Feedback")
        for i, s in enumerate(suggestions, 1):
            lines.append(f"{i}. {s}")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _score_to_grade(score: int) -> str:
    if score >= 90:
        return "Excellent"
    elif score >= 75:
        return "Good"
    elif score >= 60:
        return "Fair"
    else:
        return "Needs Work"


def _score_bar(score: int, width: int = 20) -> str:
    filled = round(score / 100 * width)
    return f"[{'=' * filled}{' ' * (width - filled)}]"
