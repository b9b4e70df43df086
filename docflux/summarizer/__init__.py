"""Extractive summarization."""

from docflux.summarizer.extractive import (
    FALLBACK_SUMMARY,
    ExtractiveSummarizer,
    summarize,
)
from docflux.summarizer.models import SummaryCandidate

__all__ = [
    "ExtractiveSummarizer",
    "FALLBACK_SUMMARY",
    "SummaryCandidate",
    "summarize",
]
