"""Pydantic models for the conversion subsystem."""

from __future__ import annotations

from pydantic import BaseModel


class ConversionResult(BaseModel):
    """A successful local conversion. ``content`` is base64 transport-encoded."""

    content: str
    filename: str
    source_format: str
    target_format: str


class ConversionOutcome(BaseModel):
    """Result value of the local ``convert`` entry point."""

    success: bool
    content: str | None = None
    filename: str | None = None
    error: str | None = None
    error_kind: str | None = None
    requires_remote: bool = False
