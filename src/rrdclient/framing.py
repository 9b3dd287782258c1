"""Response framing.

Every reply starts with a status line. A negative code ends the exchange with
an error; a non-negative code is the exact number of lines that follow. The
framer only counts and collects those lines, decoding is left to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol

from .decoders import StatusError, StatusOk, parse_status_line
from .errors import MalformedLine, MalformedStatus, ProtocolError, TransportError, TruncatedStream

log = logging.getLogger(__name__)


class LineReader(Protocol):
    async def readline(self) -> bytes: ...


class LineWriter(Protocol):
    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...


@dataclass(slots=True)
class Response:
    message: str
    lines: List[str] = field(default_factory=list)


async def read_line(reader: LineReader) -> str:
    try:
        raw = await reader.readline()
    except (OSError, ValueError) as exc:
        raise TransportError(f"read failed: {exc}") from exc
    if not raw.endswith(b"\n"):
        raise TruncatedStream(f"stream ended after {len(raw)} bytes of a line")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedLine(f"line is not valid UTF-8: {raw!r}") from exc


async def read_lines(reader: LineReader, count: int) -> List[str]:
    return [await read_line(reader) for _ in range(count)]


async def read_status(reader: LineReader) -> StatusOk:
    try:
        line = await read_line(reader)
    except MalformedLine as exc:
        raise MalformedStatus(f"bad status line: {exc}") from exc
    status = parse_status_line(line)
    if isinstance(status, StatusError):
        log.debug("status %d: %s", status.code, status.message)
        raise ProtocolError(status.code, status.message)
    log.debug("status ok: %s (+%d lines)", status.message, status.pending_lines)
    return status


async def read_response(reader: LineReader) -> Response:
    status = await read_status(reader)
    lines = await read_lines(reader, status.pending_lines)
    return Response(status.message, lines)


async def write_line(writer: LineWriter, line: str) -> None:
    log.debug("send %r", line)
    try:
        writer.write(line.encode("utf-8"))
        await writer.drain()
    except OSError as exc:
        raise TransportError(f"write failed: {exc}") from exc


async def exchange(reader: LineReader, writer: LineWriter, line: str) -> Response:
    await write_line(writer, line)
    return await read_response(reader)
