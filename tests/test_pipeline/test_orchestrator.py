"""Tests for the feedback pipeline orchestrator."""

import pytest

from interview_feedback.clients.llm_client import LLMResponse
from interview_feedback.clients.transcript_client import TranscriptFetchError
from interview_feedback.pipeline.orchestrator import FeedbackOptions, FeedbackPipeline
from interview_feedback.pipeline.prompt_builder import JSON_SUMMARY_DIRECTIVE, SYSTEM_INSTRUCTIONS


@pytest.fixture
def pipeline(mock_llm_client, mock_transcript_client) -> FeedbackPipeline:
    return FeedbackPipeline(mock_llm_client, mock_transcript_client, model="test-model")


class TestGenerateFeedback:
    async def test_returns_normalized_markdown(
        self, pipeline, mock_llm_client, mock_transcript_client, sample_job_info
    ):
        mock_llm_client.generate.return_value = LLMResponse(
            text="Overall Rating: 8/10\n**Response Quality: 7/10**\nSolid answers.",
            input_tokens=10,
            output_tokens=5,
        )

        feedback = await pipeline.generate_feedback("chat-1", sample_job_info, "Alice")

        assert feedback == "Overall Rating: 8/10\n\n## Response Quality: 7/10\n\nSolid answers.\n"
        mock_transcript_client.fetch_chat_messages.assert_awaited_once_with("chat-1")

    async def test_generation_call_arguments(self, pipeline, mock_llm_client, sample_job_info):
        await pipeline.generate_feedback("chat-1", sample_job_info, "Alice")

        kwargs = mock_llm_client.generate.call_args.kwargs
        assert kwargs["system"] == SYSTEM_INSTRUCTIONS
        assert kwargs["model"] == "test-model"
        assert kwargs["step_limit"] == 10
        assert kwargs["temperature"] == 0.3
        assert "Interviewee: Alice" in kwargs["prompt"]
        assert "We sharded Postgres by tenant." in kwargs["prompt"]
        assert "You are an interviewer." not in kwargs["prompt"]

    async def test_options_override_defaults(self, pipeline, mock_llm_client, sample_job_info):
        options = FeedbackOptions(
            model_name="other-model",
            max_messages=1,
            temperature=0.0,
            include_json_summary=True,
        )
        await pipeline.generate_feedback("chat-1", sample_job_info, "Alice", options)

        kwargs = mock_llm_client.generate.call_args.kwargs
        assert kwargs["model"] == "other-model"
        assert kwargs["temperature"] == 0.0
        assert JSON_SUMMARY_DIRECTIVE in kwargs["prompt"]
        assert "We sharded Postgres by tenant." in kwargs["prompt"]
        assert "Tell me about yourself." not in kwargs["prompt"]

    async def test_zero_max_messages_sends_empty_transcript(
        self, pipeline, mock_llm_client, sample_job_info
    ):
        result = await pipeline.run(
            "chat-1", sample_job_info, "Alice", FeedbackOptions(max_messages=0)
        )

        prompt = mock_llm_client.generate.call_args.kwargs["prompt"]
        assert "We sharded Postgres by tenant." not in prompt
        assert "Tell me about yourself." not in prompt
        assert result.metadata["message_count"] == 0

    async def test_non_compliant_output_falls_back(self, pipeline, mock_llm_client, sample_job_info):
        mock_llm_client.generate.return_value = LLMResponse(
            text="I cannot rate this interview.  ", input_tokens=1, output_tokens=1,
        )
        feedback = await pipeline.generate_feedback("chat-1", sample_job_info, "Alice")
        assert feedback == "I cannot rate this interview.\n"

    async def test_fetch_error_propagates(self, pipeline, mock_llm_client, mock_transcript_client, sample_job_info):
        mock_transcript_client.fetch_chat_messages.side_effect = TranscriptFetchError("down")

        with pytest.raises(TranscriptFetchError, match="down"):
            await pipeline.generate_feedback("chat-1", sample_job_info, "Alice")
        mock_llm_client.generate.assert_not_called()

    async def test_generation_error_propagates(self, pipeline, mock_llm_client, sample_job_info):
        mock_llm_client.generate.side_effect = RuntimeError("rate limited")

        with pytest.raises(RuntimeError, match="rate limited"):
            await pipeline.generate_feedback("chat-1", sample_job_info, "Alice")


class TestRun:
    async def test_run_extracts_summary(
        self, pipeline, mock_llm_client, sample_job_info, sample_summary_json, sample_feedback_markdown
    ):
        mock_llm_client.generate.return_value = LLMResponse(
            text=f"{sample_summary_json}\n\n{sample_feedback_markdown}",
            input_tokens=300,
            output_tokens=120,
            steps=2,
        )

        result = await pipeline.run(
            "chat-1", sample_job_info, "Alice", FeedbackOptions(include_json_summary=True)
        )

        assert result.summary is not None
        assert result.summary.overall_rating == 7
        assert not result.markdown.startswith("{")
        assert result.markdown.startswith("Overall Rating: 7/10")
        assert result.metadata["message_count"] == 4
        assert result.metadata["input_tokens"] == 300
        assert result.metadata["steps"] == 2
        assert result.elapsed_seconds >= 0

    async def test_summary_ignored_unless_requested(
        self, pipeline, mock_llm_client, sample_job_info, sample_summary_json
    ):
        mock_llm_client.generate.return_value = LLMResponse(
            text=f"{sample_summary_json}\n\nResponse Quality: 7/10\nOk.",
            input_tokens=1,
            output_tokens=1,
        )
        result = await pipeline.run("chat-1", sample_job_info, "Alice")
        assert result.summary is None

    async def test_on_phase_callback(self, pipeline, sample_job_info):
        phases = []

        await pipeline.run(
            "chat-1", sample_job_info, "Alice",
            on_phase=lambda phase, detail: phases.append(phase),
        )

        assert phases == ["fetch", "generate", "normalize", "done"]

    async def test_categories_in_canonical_order(self, pipeline, mock_llm_client, sample_job_info):
        mock_llm_client.generate.return_value = LLMResponse(
            text="Pacing and Timing: 8/10\nEven.\nCommunication Clarity: 6/10\nClear.",
            input_tokens=1,
            output_tokens=1,
        )
        result = await pipeline.run("chat-1", sample_job_info, "Alice")
        assert [(c.name, c.rating) for c in result.categories] == [
            ("Communication Clarity", 6),
            ("Pacing and Timing", 8),
        ]

    async def test_summary_categories_used_when_requested(
        self, pipeline, mock_llm_client, sample_job_info, sample_summary_json, sample_feedback_markdown
    ):
        mock_llm_client.generate.return_value = LLMResponse(
            text=f"{sample_summary_json}\n\n{sample_feedback_markdown}",
            input_tokens=1,
            output_tokens=1,
        )
        result = await pipeline.run(
            "chat-1", sample_job_info, "Alice", FeedbackOptions(include_json_summary=True)
        )
        assert [(c.name, c.summary) for c in result.categories] == [
            ("Communication Clarity", "Clear background"),
            ("Response Quality", "Concrete examples"),
        ]
