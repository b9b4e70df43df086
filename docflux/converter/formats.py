"""Pure converters between txt, html, csv, json and xml.

Every converter takes the decoded document text and returns the converted
text. None of them perform I/O. JSON-consuming converters raise
``MalformedInput`` for unparsable or too deeply nested input. Text extraction
from markup raises ``EmptyOrUnreadableInput`` when only tags remain.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any

from docflux.converter.tokenizer import parse_csv_line, quote_csv_field, split_csv_lines
from docflux.errors import EmptyOrUnreadableInput, MalformedInput

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}

# &amp; must come last so "&amp;lt;" unescapes to "&lt;", not "<"
_HTML_UNESCAPES = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
]

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(
    r"</(p|div|h[1-6]|li|tr|table|ul|ol|section|article|header|footer|blockquote|pre)\s*>",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]*>")
_XML_PROLOG_RE = re.compile(r"<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^>]*>", re.DOTALL | re.IGNORECASE)
_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_XML_TEXT_RE = re.compile(r">([^<]+)<")
_XML_NAME_INVALID_RE = re.compile(r"[^\w.\-]")

_INDENT = "  "


# ---------------------------------------------------------------------------
# Escaping helpers
# ---------------------------------------------------------------------------


def escape_html(text: str) -> str:
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in text)


def escape_xml(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def unescape_html(text: str) -> str:
    for entity, char in _HTML_UNESCAPES:
        text = text.replace(entity, char)
    return text.replace("&apos;", "'")


def xml_tag_name(name: str, fallback: str) -> str:
    """Turn an arbitrary header/property name into a valid XML element name."""
    tag = _XML_NAME_INVALID_RE.sub("_", name.strip())
    if not tag.strip("_"):
        return fallback
    if not (tag[0].isalpha() or tag[0] == "_") or tag.lower().startswith("xml"):
        tag = f"_{tag}"
    return tag


def _collapse_whitespace(text: str) -> str:
    lines = [re.sub(r"[ \t\f\v]+", " ", line).strip() for line in text.splitlines()]
    collapsed = "\n".join(lines)
    return re.sub(r"\n{3,}", "\n\n", collapsed).strip()


def _require_text(text: str) -> str:
    if not text:
        raise EmptyOrUnreadableInput("No text content found")
    return text


_TOO_DEEP = "Invalid JSON: nesting too deep"


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    except RecursionError as e:
        raise MalformedInput(_TOO_DEEP) from e


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _csv_records(text: str) -> tuple[list[str], list[list[str]]]:
    lines = split_csv_lines(text)
    if not lines:
        return [], []
    header = parse_csv_line(lines[0])
    rows = [parse_csv_line(line) for line in lines[1:]]
    return header, rows


def _column_names(header: list[str], width: int) -> list[str]:
    names = []
    for i in range(width):
        name = header[i] if i < len(header) else ""
        names.append(name if name else f"column_{i + 1}")
    return names


# ---------------------------------------------------------------------------
# txt -> *
# ---------------------------------------------------------------------------


def txt_to_html(text: str, *, title: str = "Converted document") -> str:
    paragraphs = [
        f"    <p>{escape_html(line)}</p>" if line.strip() else "    <p>&nbsp;</p>"
        for line in text.splitlines()
    ]
    body = "\n".join(paragraphs)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '    <meta charset="UTF-8">\n'
        f"    <title>{escape_html(title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def txt_to_csv(text: str) -> str:
    return "\n".join(quote_csv_field(line) for line in text.splitlines())


def txt_to_json(
    text: str,
    *,
    title: str = "Converted document",
    converted_at: datetime | None = None,
) -> str:
    lines = text.splitlines()
    stamp = converted_at or datetime.now(timezone.utc)
    document = {
        "document": {
            "title": title,
            "lines": lines,
            "totalLines": len(lines),
            "convertedAt": stamp.isoformat(),
        }
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def txt_to_xml(text: str) -> str:
    out = ['<?xml version="1.0" encoding="UTF-8"?>', "<document>", f"{_INDENT}<content>"]
    for i, line in enumerate(text.splitlines(), start=1):
        out.append(f'{_INDENT * 2}<line id="{i}">{escape_xml(line)}</line>')
    out.extend([f"{_INDENT}</content>", "</document>"])
    return "\n".join(out)


# ---------------------------------------------------------------------------
# html -> *
# ---------------------------------------------------------------------------


def html_to_txt(text: str) -> str:
    stripped = _SCRIPT_STYLE_RE.sub("", text)
    stripped = _BR_RE.sub("\n", stripped)
    stripped = _BLOCK_CLOSE_RE.sub("\n", stripped)
    stripped = _TAG_RE.sub("", stripped)
    return _require_text(_collapse_whitespace(unescape_html(stripped)))


# ---------------------------------------------------------------------------
# csv -> *
# ---------------------------------------------------------------------------


def csv_to_json(text: str) -> str:
    """Records keyed by header name, each with a 1-based ``_rowIndex``.

    A header column that is itself named ``_rowIndex`` is renamed to
    ``column_N`` so the row counter never overwrites data.
    """
    header, rows = _csv_records(text)
    records: list[dict[str, Any]] = []
    for index, row in enumerate(rows, start=1):
        names = [
            f"column_{i + 1}" if name == "_rowIndex" else name
            for i, name in enumerate(_column_names(header, max(len(header), len(row))))
        ]
        record: dict[str, Any] = {
            name: (row[i] if i < len(row) else "") for i, name in enumerate(names)
        }
        record["_rowIndex"] = index
        records.append(record)
    return json.dumps(records, indent=2, ensure_ascii=False)


def csv_to_xml(text: str) -> str:
    header, rows = _csv_records(text)
    out = ['<?xml version="1.0" encoding="UTF-8"?>', "<data>"]
    for index, row in enumerate(rows, start=1):
        names = _column_names(header, max(len(header), len(row)))
        out.append(f'{_INDENT}<row id="{index}">')
        for i, name in enumerate(names):
            tag = xml_tag_name(name, f"column_{i + 1}")
            value = row[i] if i < len(row) else ""
            out.append(f"{_INDENT * 2}<{tag}>{escape_xml(value)}</{tag}>")
        out.append(f"{_INDENT}</row>")
    out.append("</data>")
    return "\n".join(out)


def csv_to_html(text: str, *, title: str = "Converted table") -> str:
    header, rows = _csv_records(text)
    out = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '    <meta charset="UTF-8">',
        f"    <title>{escape_html(title)}</title>",
        "</head>",
        "<body>",
        "    <table>",
    ]
    if header:
        out.append("        <thead>")
        out.append("            <tr>")
        out.extend(f"                <th>{escape_html(cell)}</th>" for cell in header)
        out.append("            </tr>")
        out.append("        </thead>")
    out.append("        <tbody>")
    for row in rows:
        out.append("            <tr>")
        out.extend(f"                <td>{escape_html(cell)}</td>" for cell in row)
        out.append("            </tr>")
    out.extend(["        </tbody>", "    </table>", "</body>", "</html>"])
    return "\n".join(out) + "\n"


# ---------------------------------------------------------------------------
# json -> *
# ---------------------------------------------------------------------------


def json_to_csv(text: str) -> str:
    data = _load_json(text)
    try:
        return _json_csv(data)
    except RecursionError as e:
        raise MalformedInput(_TOO_DEEP) from e


def _json_csv(data: Any) -> str:
    if isinstance(data, list) and data and isinstance(data[0], dict) and data[0]:
        header = [str(key) for key in data[0].keys()]
        lines = [",".join(quote_csv_field(h) for h in header)]
        for item in data:
            item = item if isinstance(item, dict) else {}
            lines.append(
                ",".join(quote_csv_field(_csv_cell(item.get(key, ""))) for key in header)
            )
        return "\n".join(lines)

    if isinstance(data, dict) and data:
        header = [str(key) for key in data.keys()]
        return "\n".join([
            ",".join(quote_csv_field(h) for h in header),
            ",".join(quote_csv_field(_csv_cell(v)) for v in data.values()),
        ])

    values = data if isinstance(data, list) else [data]
    lines = [quote_csv_field("value")]
    lines.extend(quote_csv_field(_csv_cell(v)) for v in values)
    return "\n".join(lines)


def _xml_node(value: Any, tag: str, depth: int, attrs: str = "") -> list[str]:
    pad = _INDENT * depth
    if isinstance(value, dict):
        if not value:
            return [f"{pad}<{tag}{attrs}/>"]
        out = [f"{pad}<{tag}{attrs}>"]
        for key, child in value.items():
            out.extend(_xml_node(child, xml_tag_name(str(key), "field"), depth + 1))
        out.append(f"{pad}</{tag}>")
        return out
    if isinstance(value, list):
        if not value:
            return [f"{pad}<{tag}{attrs}/>"]
        out = [f"{pad}<{tag}{attrs}>"]
        for index, child in enumerate(value):
            out.extend(_xml_node(child, "item", depth + 1, f' index="{index}"'))
        out.append(f"{pad}</{tag}>")
        return out
    return [f"{pad}<{tag}{attrs}>{escape_xml(_csv_cell(value))}</{tag}>"]


def json_to_xml(text: str) -> str:
    data = _load_json(text)
    lines = ['<?xml version="1.0" encoding="UTF-8"?>']
    try:
        lines.extend(_xml_node(data, "root", 0))
    except RecursionError as e:
        raise MalformedInput(_TOO_DEEP) from e
    return "\n".join(lines)


def json_to_txt(text: str) -> str:
    data = _load_json(text)
    try:
        return json.dumps(data, indent=2, ensure_ascii=False)
    except RecursionError as e:
        raise MalformedInput(_TOO_DEEP) from e


# ---------------------------------------------------------------------------
# xml -> *
# ---------------------------------------------------------------------------


def xml_to_json(text: str) -> str:
    """Approximate XML -> JSON: a flat list of the text fragments between tags.

    This is not a structural parse; element names, attributes and nesting
    are discarded.
    """
    cleaned = _XML_PROLOG_RE.sub("", text)
    cleaned = _CDATA_RE.sub(lambda m: escape_xml(m.group(1)), cleaned)
    fragments = [
        unescape_html(fragment.strip())
        for fragment in _XML_TEXT_RE.findall(cleaned)
        if fragment.strip()
    ]
    if not fragments and cleaned.strip() and "<" not in cleaned:
        fragments = [unescape_html(cleaned.strip())]
    payload = {"root": {"textContent": fragments, "fragmentCount": len(fragments)}}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def xml_to_txt(text: str) -> str:
    cleaned = _XML_PROLOG_RE.sub("", text)
    cleaned = _CDATA_RE.sub(lambda m: m.group(1), cleaned)
    cleaned = _TAG_RE.sub(" ", cleaned)
    return _require_text(re.sub(r"\s+", " ", unescape_html(cleaned)).strip())
