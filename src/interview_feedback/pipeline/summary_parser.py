"""Summary extractor - splits a leading JSON summary from the markdown feedback."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from interview_feedback.models.feedback import FeedbackSummary, SummaryParseResult
from interview_feedback.utils.json_parser import find_object_end

logger = logging.getLogger(__name__)


def parse_summary(output: str) -> SummaryParseResult:
    """Split model output into an optional summary and the markdown remainder.

    The summary is only looked for at the very start of the output. Anything
    that fails to parse or validate leaves ``output`` untouched as markdown.
    """
    text = output.lstrip()
    if not text.startswith("{"):
        return SummaryParseResult(markdown=output)

    end = find_object_end(text)
    if end == -1:
        logger.debug("Leading brace never closes; treating output as markdown")
        return SummaryParseResult(markdown=output)

    try:
        summary = FeedbackSummary.model_validate(json.loads(text[:end]))
    except (json.JSONDecodeError, RecursionError, ValidationError) as exc:
        logger.debug("Rejected leading summary block: %s", exc)
        return SummaryParseResult(markdown=output)

    return SummaryParseResult(summary=summary, markdown=text[end:].lstrip())
