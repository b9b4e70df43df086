"""User-facing operations over the converter, summarizer and vendors."""

from docflux.service.documents import DocumentService
from docflux.service.models import (
    ConversionRequest,
    ConversionResponse,
    MergeFile,
    MergeRequest,
    MergeResponse,
    SplitRequest,
    SplitResponse,
    SummaryRequest,
    SummaryResponse,
    TranslationRequest,
    TranslationResponse,
)

__all__ = [
    "ConversionRequest",
    "ConversionResponse",
    "DocumentService",
    "MergeFile",
    "MergeRequest",
    "MergeResponse",
    "SplitRequest",
    "SplitResponse",
    "SummaryRequest",
    "SummaryResponse",
    "TranslationRequest",
    "TranslationResponse",
]
