"""CSV line tokenizer."""

from __future__ import annotations


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line into fields.

    Quoted fields may contain commas; a doubled quote inside a quoted field
    is a literal quote. No whitespace trimming is applied. An unterminated
    quote runs to the end of the line.

    >>> parse_csv_line('"a""b",c')
    ['a"b', 'c']
    >>> parse_csv_line('')
    ['']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields


def split_csv_lines(text: str) -> list[str]:
    """Return the non-blank lines of a CSV document (CRLF tolerant)."""
    return [line.rstrip("\r") for line in text.split("\n") if line.strip()]


def quote_csv_field(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'
