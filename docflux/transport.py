"""Transport encoding (base64 / data URL) and the readable-text classifier."""

from __future__ import annotations

import base64
import binascii
import re

from docflux.errors import DecodeError, EmptyOrUnreadableInput

CONTENT_TYPES: dict[str, str] = {
    "txt": "text/plain",
    "html": "text/html",
    "csv": "text/csv",
    "json": "application/json",
    "xml": "application/xml",
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

_SAMPLE_CHARS = 1000
_MAX_CONTROL_RATIO = 0.1
_ALLOWED_CONTROL = {"\t", "\n", "\r", "\f"}
_WORD_RE = re.compile(r"\w")


def content_type_for(fmt: str) -> str:
    return CONTENT_TYPES.get(fmt, "application/octet-stream")


def _strip_data_url(content: str) -> str:
    if content.startswith("data:"):
        _, sep, payload = content.partition(",")
        if not sep:
            raise DecodeError("Malformed data URL: missing ',' separator")
        return payload
    return content


def decode_transport_bytes(content: str) -> bytes:
    """Decode base64 (optionally data-URL prefixed) content to raw bytes."""
    payload = "".join(_strip_data_url(content.strip()).split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Content is not valid base64: {e}") from e


def decode_transport(content: str) -> str:
    """Decode transport-encoded content to UTF-8 text."""
    raw = decode_transport_bytes(content)
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodeError(
            "Unable to read the file content. Make sure it is a valid text file."
        ) from e


def encode_transport(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def to_data_url(text: str, fmt: str) -> str:
    return f"data:{content_type_for(fmt)};base64,{encode_transport(text)}"


def is_readable_text(text: str | None, *, require_words: bool = True) -> bool:
    """Heuristic check that *text* is human-readable, not binary garbage.

    With ``require_words`` off only the binary checks run, so short
    structural documents such as ``[]`` pass.
    """
    if not text or not text.strip():
        return False
    if "\x00" in text:
        return False

    sample = text[:_SAMPLE_CHARS]
    suspicious = sum(
        1
        for ch in sample
        if ch == "�" or (ord(ch) < 32 and ch not in _ALLOWED_CONTROL)
    )
    if suspicious / len(sample) > _MAX_CONTROL_RATIO:
        return False

    if not require_words:
        return True
    return _WORD_RE.search(text[:100]) is not None


def ensure_readable_text(text: str | None, *, require_words: bool = True) -> str:
    """Return *text* unchanged, or raise EmptyOrUnreadableInput."""
    if not text or not text.strip():
        raise EmptyOrUnreadableInput(
            "The file appears to be empty or contains no readable text"
        )
    if not is_readable_text(text, require_words=require_words):
        raise EmptyOrUnreadableInput(
            "The file content does not look like valid text. Use a text file (.txt)."
        )
    return text
