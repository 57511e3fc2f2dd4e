"""Claude API wrapper with async support and retry logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int
    steps: int = 1


class LLMClient:
    """Async Claude API client with exponential-backoff retries."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 3,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.max_retries = max_retries
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def _call_api(
        self,
        messages: list[dict],
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make the actual API call with retry logic."""
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            reraise=True,
        ):
            with attempt:
                return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
        step_limit: int = 1,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage.

        When a reply is cut off by ``max_tokens`` it is continued in place,
        for at most ``step_limit`` calls in total.
        """
        logger.debug("LLM call: model=%s, step_limit=%d", model, step_limit)
        text = ""
        input_tokens = output_tokens = steps = 0
        while steps < max(step_limit, 1):
            messages = [{"role": "user", "content": prompt}]
            if text:
                # Trailing whitespace in a prefilled assistant turn is rejected by the API
                messages.append({"role": "assistant", "content": text.rstrip()})
            try:
                message = await self._call_api(
                    messages=messages,
                    system=system,
                    model=model,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
            except Exception:
                logger.error("LLM call failed", exc_info=True)
                raise
            steps += 1
            input_tokens += message.usage.input_tokens
            output_tokens += message.usage.output_tokens
            self._token_log.append((model, message.usage.input_tokens, message.usage.output_tokens))
            text = text.rstrip() + message.content[0].text if text else message.content[0].text
            if message.stop_reason != "max_tokens":
                break
            logger.info("Response hit max_tokens after step %d; continuing", steps)

        logger.debug(
            "LLM response: %d input, %d output tokens over %d step(s)",
            input_tokens, output_tokens, steps,
        )
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            steps=steps,
        )

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
