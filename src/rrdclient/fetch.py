"""FETCH reply decoding.

The reply body is a block of "Key: value" header lines followed by data rows
of the form "<timestamp>: <v1> <v2> ...". Nothing separates the two blocks,
so the decoder scans in two phases:

1. header phase: a line whose key is one of the known header keys updates
   the result;
2. the first line that is *not* a known header but *does* parse as a data
   row ends the header phase. It and every line after it must be data rows.

A line that is neither is fatal. A header key that looks like data, or a data
row that looks like a header, is ambiguous in the protocol itself; the rule
above is applied as-is.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .commands import FetchQuery, encode_fetch
from .decoders import parse_fetch_data_line, parse_fetch_header_line, parse_unsigned
from .errors import MalformedLine
from .framing import LineReader, LineWriter, exchange

_UNSIGNED_HEADERS = {
    "FlushVersion": "flush_version",
    "Start": "start",
    "End": "end",
    "Step": "step",
    "DSCount": "ds_count",
}
_NAMES_HEADER = "DSName"


@dataclass(slots=True)
class FetchResult:
    flush_version: int = 0
    start: int = 0
    end: int = 0
    step: int = 0
    ds_count: int = 0
    ds_names: List[str] = field(default_factory=list)
    rows: List[Tuple[int, List[float]]] = field(default_factory=list)


def _is_header(line: str) -> bool:
    try:
        key, _ = parse_fetch_header_line(line)
    except MalformedLine:
        return False
    return key in _UNSIGNED_HEADERS or key == _NAMES_HEADER


def decode_fetch(lines: Sequence[str]) -> FetchResult:
    result = FetchResult()
    index = 0

    while index < len(lines) and _is_header(lines[index]):
        key, value = parse_fetch_header_line(lines[index])
        if key == _NAMES_HEADER:
            result.ds_names = value.split()
        else:
            setattr(result, _UNSIGNED_HEADERS[key], parse_unsigned(value, key))
        index += 1

    for line in lines[index:]:
        result.rows.append(parse_fetch_data_line(line))

    return result


async def fetch(reader: LineReader, writer: LineWriter, query: FetchQuery) -> FetchResult:
    line = encode_fetch(query)
    response = await exchange(reader, writer, line)
    return decode_fetch(response.lines)
