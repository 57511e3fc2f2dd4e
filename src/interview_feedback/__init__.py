"""Interview feedback generation and normalization."""

from interview_feedback.pipeline.normalizer import normalize_feedback_markdown
from interview_feedback.pipeline.orchestrator import FeedbackOptions, FeedbackPipeline
from interview_feedback.pipeline.prompt_builder import SYSTEM_INSTRUCTIONS, build_prompt
from interview_feedback.pipeline.sanitizer import (
    sanitize_emotion_features,
    sanitize_transcript,
    truncate,
)
from interview_feedback.pipeline.summary_parser import parse_summary

__version__ = "0.1.0"

__all__ = [
    "FeedbackOptions",
    "FeedbackPipeline",
    "SYSTEM_INSTRUCTIONS",
    "build_prompt",
    "normalize_feedback_markdown",
    "parse_summary",
    "sanitize_emotion_features",
    "sanitize_transcript",
    "truncate",
]
