"""Hume EVI chat transcript wrapper with async support."""

from __future__ import annotations

import logging
import os

import httpx
from pydantic import ValidationError

from interview_feedback.models.transcript import RawChatTurn

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.hume.ai/v0/evi"


class TranscriptFetchError(RuntimeError):
    """Raised when a chat transcript cannot be retrieved."""


class TranscriptClient:
    """Async client that pages through the chat events of one EVI chat."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        page_size: int = 100,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        key = api_key or os.environ.get("HUME_API_KEY")
        if not key:
            raise ValueError(
                "Hume API key required. Set HUME_API_KEY env var or pass api_key."
            )
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.client = http_client or httpx.AsyncClient(timeout=timeout)
        self.client.headers["X-Hume-Api-Key"] = key

    async def _fetch_page(self, chat_id: str, page_number: int) -> dict:
        url = f"{self.base_url}/chats/{chat_id}"
        params = {
            "page_number": page_number,
            "page_size": self.page_size,
            "ascending_order": "true",
        }
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Transcript fetch failed for chat %s", chat_id, exc_info=True)
            raise TranscriptFetchError(f"Could not fetch chat {chat_id}: {exc}") from exc
        if not isinstance(data, dict):
            raise TranscriptFetchError(f"Unexpected payload for chat {chat_id}")
        return data

    async def fetch_chat_messages(self, chat_id: str) -> list[RawChatTurn]:
        """Return every chat event of ``chat_id`` in chronological order."""
        logger.info("Fetching transcript: %s", chat_id)
        turns: list[RawChatTurn] = []
        page_number = 0
        while True:
            data = await self._fetch_page(chat_id, page_number)
            for event in data.get("events_page") or []:
                try:
                    turns.append(
                        RawChatTurn.model_validate({
                            "type": event.get("type"),
                            "message_text": event.get("message_text"),
                            "emotion_features": event.get("emotion_features"),
                        })
                    )
                except (AttributeError, ValidationError):
                    logger.debug("Skipping malformed chat event in %s", chat_id)
            page_number += 1
            try:
                total_pages = int(data.get("total_pages") or 0)
            except (TypeError, ValueError) as exc:
                raise TranscriptFetchError(
                    f"Unexpected total_pages for chat {chat_id}: {data.get('total_pages')!r}"
                ) from exc
            if page_number >= total_pages:
                break
        logger.debug("Fetched %d events for chat %s", len(turns), chat_id)
        return turns

    async def aclose(self) -> None:
        await self.client.aclose()
