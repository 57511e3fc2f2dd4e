"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from interview_feedback.clients.llm_client import LLMClient, LLMResponse
from interview_feedback.clients.transcript_client import TranscriptClient
from interview_feedback.models.job import JobInfo
from interview_feedback.models.transcript import RawChatTurn


@pytest.fixture
def sample_job_info() -> JobInfo:
    return JobInfo(
        title="Senior Backend Engineer",
        description=(
            "We build scalable APIs and distributed systems. Focus on performance "
            "and reliability. Cloud native, Postgres, and messaging queues."
        ),
        experience_level="senior",
    )


@pytest.fixture
def sample_raw_turns() -> list[RawChatTurn]:
    return [
        RawChatTurn(type="SYSTEM_PROMPT", message_text="You are an interviewer."),
        RawChatTurn(type="AGENT_MESSAGE", message_text="Tell me about yourself."),
        RawChatTurn(
            type="USER_MESSAGE",
            message_text="  I have eight years of backend experience.  ",
            emotion_features={"Calmness": 0.81234, "Anxiety": 1.4, "Joy": "high"},
        ),
        RawChatTurn(type="USER_MESSAGE", message_text="   "),
        RawChatTurn(type="AGENT_MESSAGE", message_text="Describe a scaling problem you solved."),
        RawChatTurn(type="USER_INTERRUPTION", message_text="sorry"),
        RawChatTurn(
            type="USER_MESSAGE",
            message_text="We sharded Postgres by tenant.",
            emotion_features={"Confidence": 0.6},
        ),
    ]


@pytest.fixture
def sample_feedback_markdown() -> str:
    return """Overall Rating: 7/10

## Communication Clarity: 6/10

You explained your background clearly.

## Confidence and Emotional State: 7/10

You sounded calm throughout.

## Response Quality: 7/10

Your sharding example was concrete.

## Pacing and Timing: 8/10

Answers were well paced.

## Engagement and Interaction: 6/10

You could ask more questions back.

## Role Fit & Alignment: 8/10

Strong match for distributed systems work.

## Overall Strengths & Areas for Improvement: 7/10

Strengths:
- Concrete examples
Areas for Improvement:
- Quantify impact
"""


@pytest.fixture
def sample_summary_json() -> str:
    return (
        '{"overallRating": 7, "categories": ['
        '{"name": "Communication Clarity", "rating": 6, "summary": "Clear background"},'
        '{"name": "Response Quality", "rating": 7, "summary": "Concrete examples"}]}'
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="", input_tokens=100, output_tokens=50)
    )
    return client


@pytest.fixture
def mock_transcript_client(sample_raw_turns) -> TranscriptClient:
    """Create a mock transcript client returning the sample turns."""
    client = AsyncMock(spec=TranscriptClient)
    client.fetch_chat_messages = AsyncMock(return_value=sample_raw_turns)
    return client
