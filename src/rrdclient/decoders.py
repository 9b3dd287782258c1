"""Parsers for single response lines.

Each parser takes one line exactly as read from the stream, trailing newline
included, and either returns the decoded value or raises. A missing newline
is a shape error: every line the daemon sends is terminated.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from .errors import MalformedLine, MalformedStatus


@dataclass(frozen=True, slots=True)
class StatusOk:
    message: str
    pending_lines: int


@dataclass(frozen=True, slots=True)
class StatusError:
    code: int
    message: str


Status = Union[StatusOk, StatusError]

_NUMBER = r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|nan|inf(?:inity)?)"

_STATUS = re.compile(r"([+-]?[0-9]+)[ \t]+([^\r\n]*)\n")
_QUEUE = re.compile(r"([0-9]+)[ \t]+([^\r\n]*)\n")
_STATS = re.compile(r"([^:]+):[ \t]+([+-]?[0-9]+)\n")
_UNSIGNED = re.compile(r"[0-9]+")
_FETCH_HEADER = re.compile(r"([^:]+):[ \t]+([^\r\n]*)\n")
_FETCH_DATA = re.compile(
    rf"([0-9]+):[ \t]+({_NUMBER}(?:[ \t]+{_NUMBER})*)\n", re.IGNORECASE
)


def parse_status_line(line: str) -> Status:
    """Split "<code> <message>" into a tagged status.

    A negative code is an error and its message is the error text. Anything
    else is a success whose code is the number of lines that follow.
    """
    m = _STATUS.fullmatch(line)
    if m is None:
        raise MalformedStatus(f"bad status line: {line!r}")
    code = int(m.group(1))
    message = m.group(2)
    if code < 0:
        return StatusError(code, message)
    return StatusOk(message, code)


def parse_queue_line(line: str) -> Tuple[str, int]:
    m = _QUEUE.fullmatch(line)
    if m is None:
        raise MalformedLine(f"bad queue line: {line!r}")
    return m.group(2), int(m.group(1))


def parse_stats_line(line: str) -> Tuple[str, int]:
    m = _STATS.fullmatch(line)
    if m is None:
        raise MalformedLine(f"bad stats line: {line!r}")
    return m.group(1), int(m.group(2))


def parse_timestamp(message: str) -> int:
    """FIRST and LAST answer with the timestamp as the status message."""
    if _UNSIGNED.fullmatch(message) is None:
        raise MalformedLine(f"bad timestamp: {message!r}")
    return int(message)


def parse_unsigned(value: str, what: str) -> int:
    if _UNSIGNED.fullmatch(value) is None:
        raise MalformedLine(f"unable to parse {what}: {value!r}")
    return int(value)


def parse_fetch_header_line(line: str) -> Tuple[str, str]:
    m = _FETCH_HEADER.fullmatch(line)
    if m is None:
        raise MalformedLine(f"bad fetch header line: {line!r}")
    return m.group(1), m.group(2)


def parse_fetch_data_line(line: str) -> Tuple[int, List[float]]:
    m = _FETCH_DATA.fullmatch(line)
    if m is None:
        raise MalformedLine(f"bad fetch data line: {line!r}")
    return int(m.group(1)), [float(v) for v in m.group(2).split()]
