"""Pydantic models for interview transcripts."""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Speaker = Literal["interviewee", "interviewer"]


class RawChatTurn(BaseModel):
    """A single chat event as delivered by the transcript store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    message_text: str | None = Field(default=None, alias="messageText")
    emotion_features: dict[Any, Any] | None = Field(default=None, alias="emotionFeatures")

    @field_validator("emotion_features", mode="before")
    @classmethod
    def _decode_features(cls, value: Any) -> Any:
        # The EVI API ships prosody scores as a JSON-encoded string
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return None
        return value if isinstance(value, dict) else None


class TranscriptMessage(BaseModel):
    """A sanitized transcript message passed to the model."""

    model_config = ConfigDict(populate_by_name=True)

    speaker: Speaker
    text: str
    emotion_features: dict[str, float] | None = Field(default=None, alias="emotionFeatures")
