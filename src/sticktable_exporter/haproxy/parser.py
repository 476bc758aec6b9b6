"""
Parser for HAProxy stick-table dumps.

The admin socket answers ``show table`` with one header line per table::

    # table: http_front, type: ip, size:204800, used:2

and ``show table <name>`` with the same header followed by one line per
entry, prefixed with the entry's internal address::

    0x55d2c7a8e0d0: key=10.0.0.1 use=0 exp=9123 gpc0=3 http_req_rate(10000)=12

Both shapes, and plain ``key=value`` lines, are turned into a flat mapping
of field name to raw string value. Values are never interpreted here.
"""

from __future__ import annotations

from typing import Iterator

HEADER_MARKER = "# "
HEX_ID_MARKER = "0x"


def _normalize_header(line: str) -> str:
    line = line[len(HEADER_MARKER):]
    line = line.replace(":", "=")
    line = line.replace(",", "")
    return line.replace("= ", "=")


def _strip_hex_id(line: str) -> str:
    _, sep, rest = line.partition(":")
    if not sep:
        # id without any fields
        return ""
    return rest.strip(" \t")


def parse_line(line: str) -> dict[str, str] | None:
    """
    Parse one dump line into a field mapping.

    Returns None for lines shorter than two characters. Tokens are
    separated by single spaces; tokens without ``=`` are dropped and a
    repeated key keeps its last value.
    """
    if len(line) < 2:
        return None

    if line.startswith(HEADER_MARKER):
        line = _normalize_header(line)
    elif line.startswith(HEX_ID_MARKER):
        line = _strip_hex_id(line)

    fields: dict[str, str] = {}
    for token in line.split(" "):
        key, sep, value = token.partition("=")
        if not sep:
            continue
        fields[key] = value
    return fields


def parse_lines(text: str) -> Iterator[dict[str, str]]:
    """Yield the field mapping of every parseable line of a socket response."""
    for line in text.split("\n"):
        fields = parse_line(line)
        if fields is not None:
            yield fields
