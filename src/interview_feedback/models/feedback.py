"""Pydantic models for generated interview feedback."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CategorySummary(BaseModel):
    name: str = Field(min_length=1)
    rating: float = Field(ge=0, le=10, strict=True)  # strict: no "8" or true
    summary: str = Field(min_length=1)


class FeedbackSummary(BaseModel):
    """Structured numeric summary optionally emitted ahead of the markdown."""

    model_config = ConfigDict(populate_by_name=True)

    overall_rating: float = Field(ge=0, le=10, strict=True, alias="overallRating")
    categories: list[CategorySummary] = Field(min_length=1)


class CategoryRating(BaseModel):
    """A category as shown to the user, from the summary or a section heading."""

    name: str
    rating: float | None = None
    summary: str | None = None


class SummaryParseResult(BaseModel):
    summary: FeedbackSummary | None = None
    markdown: str


class FeedbackResult(BaseModel):
    """Complete result of one feedback generation run."""

    markdown: str
    summary: FeedbackSummary | None = None
    categories: list[CategoryRating] = Field(default_factory=list)
    elapsed_seconds: float = 0.0
    metadata: dict = Field(default_factory=dict)
