"""Local text-format conversion: tokenizer, converters and dispatcher."""

from docflux.converter.dispatcher import (
    LOCAL_CONVERTERS,
    MIME_EXTENSIONS,
    SUPPORTED_FORMATS,
    canonical_extension,
    convert,
    dispatch,
    is_local_pair,
    local_pairs,
    result_filename,
)
from docflux.converter.models import ConversionOutcome, ConversionResult
from docflux.converter.tokenizer import parse_csv_line

__all__ = [
    "ConversionOutcome",
    "ConversionResult",
    "LOCAL_CONVERTERS",
    "MIME_EXTENSIONS",
    "SUPPORTED_FORMATS",
    "canonical_extension",
    "convert",
    "dispatch",
    "is_local_pair",
    "local_pairs",
    "parse_csv_line",
    "result_filename",
]
