"""Transcript sanitizer - turns raw chat events into bounded transcript messages."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from interview_feedback.models.transcript import RawChatTurn, TranscriptMessage

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = " …[truncated]"
MAX_MESSAGE_TEXT_LENGTH = 2_000
MAX_MESSAGES = 400
MAX_EMOTION_KEY_LENGTH = 40

SPEAKER_BY_TYPE: dict[str, str] = {
    "USER_MESSAGE": "interviewee",
    "AGENT_MESSAGE": "interviewer",
}


def truncate(value: str, max_length: int) -> str:
    """Hard-cut ``value`` to ``max_length`` chars, appending the truncation marker."""
    if len(value) <= max_length:
        return value
    return value[:max_length] + TRUNCATION_MARKER


def sanitize_emotion_features(features: Any) -> dict[str, float] | None:
    """Keep finite scores in [0, 1], rounded to 3 places under short keys.

    Returns None rather than an empty dict when nothing qualifies.
    """
    if not isinstance(features, Mapping):
        return None
    cleaned: dict[str, float] = {}
    for key, value in features.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if not math.isfinite(value) or not 0 <= value <= 1:
            continue
        cleaned[str(key)[:MAX_EMOTION_KEY_LENGTH]] = round(float(value), 3)
    return cleaned or None


def _coerce_turn(turn: RawChatTurn | Mapping[str, Any]) -> RawChatTurn | None:
    if isinstance(turn, RawChatTurn):
        return turn
    if not isinstance(turn, Mapping):
        return None
    try:
        return RawChatTurn.model_validate(turn)
    except ValidationError:
        return None


def sanitize_transcript(
    turns: Iterable[RawChatTurn | Mapping[str, Any]],
    max_messages: int = MAX_MESSAGES,
    max_text_length: int = MAX_MESSAGE_TEXT_LENGTH,
) -> list[TranscriptMessage]:
    """Normalize raw chat turns into speaker-tagged messages.

    Only user and agent messages with non-blank text survive; the last
    ``max_messages`` of those are kept. Malformed turns are dropped.
    """
    kept: list[RawChatTurn] = []
    dropped = 0
    for raw in turns:
        turn = _coerce_turn(raw)
        if (
            turn is None
            or turn.type not in SPEAKER_BY_TYPE
            or not turn.message_text
            or not turn.message_text.strip()
        ):
            dropped += 1
            continue
        kept.append(turn)

    window = kept[-max_messages:] if max_messages > 0 else []
    if dropped or len(window) < len(kept):
        logger.debug(
            "Transcript sanitized: %d dropped, %d outside window, %d kept",
            dropped, len(kept) - len(window), len(window),
        )

    messages: list[TranscriptMessage] = []
    for turn in window:
        speaker = SPEAKER_BY_TYPE[turn.type]
        messages.append(
            TranscriptMessage(
                speaker=speaker,
                text=truncate(turn.message_text.strip(), max_text_length),
                emotion_features=(
                    sanitize_emotion_features(turn.emotion_features)
                    if speaker == "interviewee"
                    else None
                ),
            )
        )
    return messages
