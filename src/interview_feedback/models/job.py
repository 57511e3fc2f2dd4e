"""Pydantic model for the job an interview targets."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class JobInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    experience_level: str = Field(default="", alias="experienceLevel")
