"""Industry terms mixed into remotely extracted keyword suggestions."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

INDUSTRY_TERMS: Dict[str, List[str]] = {
    "WEB_DEV": ["REST API", "React", "Node.js", "TypeScript"],
    "EMBEDDED": ["IoT", "Microcontrollers", "RTOS", "ARM Cortex"],
    "DATA_SCIENCE": ["Machine Learning", "Python", "Pandas", "TensorFlow"],
}

DEFAULT_KEYWORD_COUNT = 15


def industry_terms(industry: Optional[str]) -> List[str]:
    """Return the fixed term list for a stored industry value.

    Onboarding stores ``"<CATEGORY>-<specialization>"``; only the category
    selects terms. Unknown or empty industries yield no terms.
    """
    if not industry:
        return []
    terms = INDUSTRY_TERMS.get(industry)
    if terms is None:
        terms = INDUSTRY_TERMS.get(industry.split("-", 1)[0], [])
    return list(terms)


def union_keywords(remote: Iterable[str], industry: Iterable[str]) -> List[str]:
    """Order-preserving union of both keyword lists, blanks dropped."""
    seen: Dict[str, None] = {}
    for keyword in list(remote) + list(industry):
        text = str(keyword).strip()
        if text and text not in seen:
            seen[text] = None
    return list(seen)
