"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float | None = None, high: float | None = None) -> None:
    if (low is not None and value < low) or (high is not None and value > high):
        bounds = f"[{low if low is not None else '-inf'}, {high if high is not None else 'inf'}]"
        raise ValueError(f"{name} must be within {bounds}, got {value!r}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    max_retries: int = 3
    timeout: int = 60
    max_tokens: int = 8192

    def __post_init__(self) -> None:
        _check_range("max_retries", self.max_retries, low=1, high=10)
        _check_range("timeout", self.timeout, low=1)
        _check_range("max_tokens", self.max_tokens, low=1)


@dataclass(frozen=True)
class TranscriptConfig:
    base_url: str = "https://api.hume.ai/v0/evi"
    page_size: int = 100
    timeout: int = 30
    max_messages: int = 400
    max_message_length: int = 2000

    def __post_init__(self) -> None:
        _check_range("page_size", self.page_size, low=1, high=100)
        _check_range("timeout", self.timeout, low=1)
        _check_range("max_messages", self.max_messages, low=1)
        _check_range("max_message_length", self.max_message_length, low=1)


@dataclass(frozen=True)
class PromptConfig:
    max_job_description_length: int = 2500

    def __post_init__(self) -> None:
        _check_range("max_job_description_length", self.max_job_description_length, low=1)


@dataclass(frozen=True)
class GenerationConfig:
    step_limit: int = 10
    temperature: float = 0.3
    include_json_summary: bool = False

    def __post_init__(self) -> None:
        _check_range("step_limit", self.step_limit, low=1, high=50)
        _check_range("temperature", self.temperature, low=0.0, high=1.0)


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    transcript: TranscriptConfig = field(default_factory=TranscriptConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        transcript=TranscriptConfig(**raw.get("transcript", {})),
        prompt=PromptConfig(**raw.get("prompt", {})),
        generation=GenerationConfig(**raw.get("generation", {})),
    )
