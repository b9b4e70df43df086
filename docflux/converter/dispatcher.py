"""Local conversion dispatch: format lookup, decode, convert, re-encode."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from pathlib import Path

from docflux.converter import formats
from docflux.converter.models import ConversionOutcome, ConversionResult
from docflux.errors import DocfluxError, UnsupportedConversion
from docflux.transport import decode_transport, encode_transport, ensure_readable_text

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: tuple[str, ...] = ("txt", "html", "csv", "json", "xml")

MIME_EXTENSIONS: dict[str, str] = {
    "text/plain": "txt",
    "text/html": "html",
    "text/csv": "csv",
    "application/json": "json",
    "application/xml": "xml",
    "text/xml": "xml",
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/msword": "doc",
    "application/vnd.ms-powerpoint": "ppt",
    "application/vnd.ms-excel": "xls",
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "image/webp": "webp",
}

Converter = Callable[..., str]

LOCAL_CONVERTERS: dict[tuple[str, str], Converter] = {
    ("txt", "html"): formats.txt_to_html,
    ("txt", "csv"): formats.txt_to_csv,
    ("txt", "json"): formats.txt_to_json,
    ("txt", "xml"): formats.txt_to_xml,
    ("html", "txt"): formats.html_to_txt,
    ("csv", "json"): formats.csv_to_json,
    ("csv", "xml"): formats.csv_to_xml,
    ("csv", "html"): formats.csv_to_html,
    ("json", "csv"): formats.json_to_csv,
    ("json", "xml"): formats.json_to_xml,
    ("json", "txt"): formats.json_to_txt,
    ("xml", "json"): formats.xml_to_json,
    ("xml", "txt"): formats.xml_to_txt,
}

# Converters that accept a document title
_TITLED = {("txt", "html"), ("txt", "json"), ("csv", "html")}


def canonical_extension(fmt: str, file_name: str = "") -> str:
    """Map a MIME type or bare extension to a short extension token.

    Unknown MIME types fall back to their subtype. An empty format falls
    back to the file name's extension.
    """
    fmt = (fmt or "").strip()
    if not fmt:
        return Path(file_name).suffix.lstrip(".")
    if "/" in fmt:
        mime = fmt.split(";", 1)[0].strip().lower()
        return MIME_EXTENSIONS.get(mime, mime.rsplit("/", 1)[-1])
    return fmt.lstrip(".")


def base_name(file_name: str) -> str:
    name = Path(file_name).name
    return name.split(".")[0] or "document"


def result_filename(file_name: str, target_format: str) -> str:
    return f"{base_name(file_name)}.{target_format}"


def local_pairs() -> list[tuple[str, str]]:
    return list(LOCAL_CONVERTERS)


def is_local_pair(source: str, target: str) -> bool:
    return (source, target) in LOCAL_CONVERTERS


def get_converter(source: str, target: str) -> Converter:
    converter = LOCAL_CONVERTERS.get((source, target))
    if converter is None:
        raise UnsupportedConversion(source, target, SUPPORTED_FORMATS)
    return converter


def dispatch(
    content: str,
    file_name: str,
    source_format: str,
    target_format: str,
) -> ConversionResult:
    """Run a local conversion on transport-encoded *content*.

    Raises UnsupportedConversion when the pair needs the remote vendor, and
    the decode/input error kinds for bad content.
    """
    source = canonical_extension(source_format, file_name)
    target = canonical_extension(target_format)
    converter = get_converter(source, target)

    text = ensure_readable_text(decode_transport(content), require_words=False)
    if (source, target) in _TITLED:
        converter = partial(converter, title=base_name(file_name))

    logger.debug("Converting %s locally: %s -> %s", file_name, source, target)
    converted = converter(text)
    return ConversionResult(
        content=encode_transport(converted),
        filename=result_filename(file_name, target),
        source_format=source,
        target_format=target,
    )


def convert(
    content: str,
    file_name: str,
    source_format: str,
    target_format: str,
) -> ConversionOutcome:
    """Local entry point. Never raises for expected failures."""
    try:
        result = dispatch(content, file_name, source_format, target_format)
    except UnsupportedConversion as e:
        logger.info("No local converter for %s -> %s", e.source, e.target)
        return ConversionOutcome(
            success=False,
            error=e.message,
            error_kind=e.kind,
            requires_remote=e.requires_remote,
        )
    except DocfluxError as e:
        logger.warning("Local conversion of %s failed: %s", file_name, e.message)
        return ConversionOutcome(success=False, error=e.message, error_kind=e.kind)

    return ConversionOutcome(success=True, content=result.content, filename=result.filename)
