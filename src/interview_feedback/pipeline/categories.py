"""Canonical feedback categories shared by the prompt, the normalizer and display ordering."""

from __future__ import annotations

import re
from collections.abc import Iterable

from interview_feedback.models.feedback import CategoryRating, FeedbackSummary

# Order is the order sections are requested in, rebuilt in and shown in.
CANONICAL_CATEGORIES: tuple[str, ...] = (
    "Communication Clarity",
    "Confidence and Emotional State",
    "Response Quality",
    "Pacing and Timing",
    "Engagement and Interaction",
    "Role Fit & Alignment",
    "Overall Strengths & Areas for Improvement",
)

CATEGORY_LOOKUP: dict[str, str] = {name.lower(): name for name in CANONICAL_CATEGORIES}

SECTION_HEADING_RE = re.compile(r"^##\s+(.+?)(?::\s*(\d{1,2})/10)?\s*$", re.MULTILINE)


def match_category(line: str) -> str | None:
    """Return the canonical name whose lowercase form prefixes ``line``.

    ``line`` is expected to already be stripped of heading/bold markers.
    """
    lower = line.lower().strip()
    for key, name in CATEGORY_LOOKUP.items():
        if lower.startswith(key):
            return name
    return None


def canonical_index(name: str) -> int:
    """Position of ``name`` in the canonical order; unknown names sort last."""
    try:
        return CANONICAL_CATEGORIES.index(name)
    except ValueError:
        return len(CANONICAL_CATEGORIES)


def sort_categories(categories: Iterable[CategoryRating]) -> list[CategoryRating]:
    """Stable sort by canonical order."""
    return sorted(categories, key=lambda c: canonical_index(c.name))


def extract_categories(markdown: str) -> list[CategoryRating]:
    """Read ``## Name`` / ``## Name: R/10`` section headings from normalized feedback."""
    return [
        CategoryRating(
            name=match.group(1).strip(),
            rating=float(match.group(2)) if match.group(2) else None,
        )
        for match in SECTION_HEADING_RE.finditer(markdown)
    ]


def display_categories(summary: FeedbackSummary | None, markdown: str) -> list[CategoryRating]:
    """Categories from the summary when present, else from headings, in canonical order."""
    if summary is not None:
        categories = [
            CategoryRating(name=c.name, rating=c.rating, summary=c.summary)
            for c in summary.categories
        ]
    else:
        categories = extract_categories(markdown)
    return sort_categories(categories)
