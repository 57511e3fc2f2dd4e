"""Markdown normalizer - rebuilds model feedback into canonical sections."""

from __future__ import annotations

import logging
import re

from interview_feedback.pipeline.categories import match_category
from interview_feedback.pipeline.summary_parser import parse_summary

logger = logging.getLogger(__name__)

OVERALL_RATING_RE = re.compile(r"^Overall Rating:\s*\d{1,2}/10", re.IGNORECASE)
RATING_RE = re.compile(r"(\d{1,2}/10)")
LINE_BREAK_RE = re.compile(r"\r?\n")
HEADING_MARKER_RE = re.compile(r"^#+\s*")
STRENGTHS_RE = re.compile(r"^Strengths:$", re.IGNORECASE | re.MULTILINE)
AREAS_RE = re.compile(r"^Areas for Improvement:$", re.IGNORECASE | re.MULTILINE)


def _detection_text(line: str) -> str:
    text = HEADING_MARKER_RE.sub("", line.strip())
    for marker in ("**", "__"):
        if text.startswith(marker):
            text = text[len(marker):]
        if text.endswith(marker):
            text = text[: -len(marker)]
    return text


def _category_of(line: str) -> str | None:
    return match_category(_detection_text(line))


def _trim_blank_edges(body: list[str]) -> list[str]:
    start, end = 0, len(body)
    while start < end and not body[start].strip():
        start += 1
    while end > start and not body[end - 1].strip():
        end -= 1
    return body[start:end]


def _with_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def normalize_feedback_markdown(raw: str) -> str:
    """Canonicalize feedback into the fixed heading layout.

    Category lines are detected whether written as plain text, bold or any
    heading level; their body runs until the next category line. Text that
    falls outside every section is dropped. When no category is recognised
    the markdown is returned as-is, so callers always get usable text.
    """
    text = parse_summary(raw.strip()).markdown.strip()
    lines = LINE_BREAK_RE.split(text)

    overall_line = None
    for index, line in enumerate(lines):
        if OVERALL_RATING_RE.match(line.strip()):
            overall_line = line.strip()
            del lines[index]
            break

    rebuilt: list[str] = []
    if overall_line:
        rebuilt.extend([overall_line, ""])

    headings = 0
    i = 0
    while i < len(lines):
        name = _category_of(lines[i])
        if name is None:
            i += 1
            continue

        rating = RATING_RE.search(lines[i])
        rebuilt.extend([f"## {name}: {rating.group(1)}" if rating else f"## {name}", ""])
        headings += 1
        i += 1

        body: list[str] = []
        while i < len(lines) and _category_of(lines[i]) is None:
            body.append(lines[i])
            i += 1
        body = _trim_blank_edges(body)
        if body:
            rebuilt.extend(["\n".join(body), ""])

    if headings == 0:
        logger.debug("No canonical categories found; returning feedback unchanged")
        return _with_newline(text)

    normalized = "\n".join(rebuilt).strip()
    normalized = STRENGTHS_RE.sub("**Strengths**", normalized)
    normalized = AREAS_RE.sub("**Areas for Improvement**", normalized)
    return normalized.strip() + "\n"
