"""Pydantic models for the summarizer."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SummaryCandidate(BaseModel):
    """A sentence competing for a place in the summary."""

    text: str = Field(min_length=1)
    position: int = Field(ge=0)
    score: float = 0.0
