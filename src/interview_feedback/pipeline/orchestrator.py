"""Feedback pipeline orchestrator - fetch, prompt, generate, normalize."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

from pydantic import BaseModel

from interview_feedback.clients.llm_client import DEFAULT_MODEL, LLMResponse
from interview_feedback.models.feedback import FeedbackResult
from interview_feedback.models.job import JobInfo
from interview_feedback.models.transcript import RawChatTurn
from interview_feedback.pipeline.categories import display_categories
from interview_feedback.pipeline.normalizer import normalize_feedback_markdown
from interview_feedback.pipeline.prompt_builder import (
    MAX_JOB_DESC_LENGTH,
    SYSTEM_INSTRUCTIONS,
    build_prompt,
)
from interview_feedback.pipeline.sanitizer import (
    MAX_MESSAGE_TEXT_LENGTH,
    MAX_MESSAGES,
    sanitize_transcript,
)
from interview_feedback.pipeline.summary_parser import parse_summary

logger = logging.getLogger(__name__)

INFERENCE_STEP_LIMIT = 10
DEFAULT_TEMPERATURE = 0.3


class TranscriptSource(Protocol):
    async def fetch_chat_messages(self, chat_id: str) -> list[RawChatTurn]: ...


class TextGenerator(Protocol):
    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
        step_limit: int = 1,
    ) -> LLMResponse: ...


class FeedbackOptions(BaseModel):
    """Per-call overrides; None falls back to the pipeline default."""

    model_name: str | None = None
    max_messages: int | None = None
    temperature: float | None = None
    include_json_summary: bool = False


class FeedbackPipeline:
    """Turns a stored interview chat into normalized markdown feedback."""

    def __init__(
        self,
        llm: TextGenerator,
        transcripts: TranscriptSource,
        *,
        model: str = DEFAULT_MODEL,
        step_limit: int = INFERENCE_STEP_LIMIT,
        temperature: float = DEFAULT_TEMPERATURE,
        max_messages: int = MAX_MESSAGES,
        max_message_length: int = MAX_MESSAGE_TEXT_LENGTH,
        max_job_description_length: int = MAX_JOB_DESC_LENGTH,
        max_tokens: int = 8192,
    ):
        self.llm = llm
        self.transcripts = transcripts
        self.model = model
        self.step_limit = step_limit
        self.temperature = temperature
        self.max_messages = max_messages
        self.max_message_length = max_message_length
        self.max_job_description_length = max_job_description_length
        self.max_tokens = max_tokens

    async def run(
        self,
        chat_id: str,
        job_info: JobInfo,
        user_name: str,
        options: FeedbackOptions | None = None,
        *,
        on_phase: Callable[[str, str], None] | None = None,
    ) -> FeedbackResult:
        """Run the full pipeline and keep the raw summary alongside the markdown.

        Failures fetching the transcript or calling the model propagate as-is.
        """
        options = options or FeedbackOptions()
        model = options.model_name or self.model
        temperature = self.temperature if options.temperature is None else options.temperature
        max_messages = self.max_messages if options.max_messages is None else options.max_messages
        start = time.monotonic()

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        _notify("fetch", f"Fetching transcript {chat_id}")
        raw_turns = await self.transcripts.fetch_chat_messages(chat_id)

        transcript = sanitize_transcript(
            raw_turns,
            max_messages=max_messages,
            max_text_length=self.max_message_length,
        )
        prompt = build_prompt(
            transcript,
            job_info,
            user_name,
            options.include_json_summary,
            max_job_description_length=self.max_job_description_length,
        )
        logger.info(
            "Generating feedback for chat %s (%d messages, model=%s)",
            chat_id, len(transcript), model,
        )

        _notify("generate", f"Generating feedback from {len(transcript)} messages")
        response = await self.llm.generate(
            prompt=prompt,
            system=SYSTEM_INSTRUCTIONS,
            model=model,
            # Providers without sampling control ignore this
            temperature=temperature,
            max_tokens=self.max_tokens,
            step_limit=self.step_limit,
        )

        _notify("normalize", "Normalizing feedback")
        markdown = normalize_feedback_markdown(response.text)
        summary = parse_summary(response.text).summary if options.include_json_summary else None

        elapsed = time.monotonic() - start
        _notify("done", f"Done in {elapsed:.1f}s")

        return FeedbackResult(
            markdown=markdown,
            summary=summary,
            categories=display_categories(summary, markdown),
            elapsed_seconds=elapsed,
            metadata={
                "chat_id": chat_id,
                "model": model,
                "message_count": len(transcript),
                "input_tokens": response.input_tokens,
                "output_tokens": response.output_tokens,
                "steps": response.steps,
            },
        )

    async def generate_feedback(
        self,
        chat_id: str,
        job_info: JobInfo,
        user_name: str,
        options: FeedbackOptions | None = None,
    ) -> str:
        """Return normalized markdown feedback for one interview chat."""
        result = await self.run(chat_id, job_info, user_name, options)
        return result.markdown
