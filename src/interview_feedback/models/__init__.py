"""Data models for the interview feedback pipeline."""

from interview_feedback.models.feedback import (
    CategoryRating,
    CategorySummary,
    FeedbackResult,
    FeedbackSummary,
    SummaryParseResult,
)
from interview_feedback.models.job import JobInfo
from interview_feedback.models.transcript import RawChatTurn, Speaker, TranscriptMessage

__all__ = [
    "CategoryRating",
    "CategorySummary",
    "FeedbackResult",
    "FeedbackSummary",
    "JobInfo",
    "RawChatTurn",
    "Speaker",
    "SummaryParseResult",
    "TranscriptMessage",
]
