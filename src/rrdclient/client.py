from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from . import commands
from .batch import BatchOutcome, send_batch
from .clock import Clock, system_clock
from .commands import ConsolidationFunction, FetchQuery, Number, SeriesSpec, UpdatePoint
from .constants import CREATED_OK, DEFAULT_PORT, PONG
from .decoders import parse_queue_line, parse_stats_line, parse_timestamp
from .errors import TransportError, UnexpectedReply
from .fetch import FetchResult, fetch
from .framing import LineReader, LineWriter, Response, exchange, write_line
from .net import Address, open_streams, parse_address

log = logging.getLogger(__name__)


def _text(lines: Iterable[str]) -> List[str]:
    return [line.rstrip("\n") for line in lines]


class RRDCachedClient:
    """One conversation with an rrdcached daemon.

    Commands are strictly sequential: each method writes one request and
    consumes the whole framed reply before returning. Sharing a client
    between concurrent tasks desynchronizes the stream.
    """

    def __init__(self, reader: LineReader, writer: LineWriter, clock: Clock = system_clock):
        self.reader = reader
        self.writer = writer
        self.clock = clock

    @classmethod
    async def connect(cls, address: Address | str, clock: Clock = system_clock) -> "RRDCachedClient":
        if isinstance(address, str):
            address = parse_address(address)
        reader, writer = await open_streams(address)
        return cls(reader, writer, clock)

    @classmethod
    async def connect_tcp(cls, host: str, port: int = DEFAULT_PORT, clock: Clock = system_clock) -> "RRDCachedClient":
        return await cls.connect(Address(host=host, port=port), clock)

    @classmethod
    async def connect_unix(cls, path: str, clock: Clock = system_clock) -> "RRDCachedClient":
        return await cls.connect(Address(unix_path=path), clock)

    async def close(self) -> None:
        close = getattr(self.writer, "close", None)
        if close is None:
            return
        close()
        wait_closed = getattr(self.writer, "wait_closed", None)
        if wait_closed is not None:
            try:
                await wait_closed()
            except OSError as exc:
                raise TransportError(f"close failed: {exc}") from exc
        log.info("connection closed")

    async def __aenter__(self) -> "RRDCachedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _send(self, line: str) -> Response:
        return await exchange(self.reader, self.writer, line)

    # --- diagnostics ---

    async def help(self, command: Optional[str] = None) -> Tuple[str, List[str]]:
        response = await self._send(commands.help_(command))
        return response.message, _text(response.lines)

    async def ping(self) -> None:
        response = await self._send(commands.ping())
        if response.message != PONG:
            raise UnexpectedReply(response.message, PONG)

    async def stats(self) -> Dict[str, int]:
        response = await self._send(commands.stats())
        return dict(parse_stats_line(line) for line in response.lines)

    async def queue(self) -> List[Tuple[str, int]]:
        response = await self._send(commands.queue())
        return [parse_queue_line(line) for line in response.lines]

    # --- databases ---

    async def create(self, spec: SeriesSpec) -> None:
        response = await self._send(commands.encode_create(spec))
        if response.message != CREATED_OK:
            raise UnexpectedReply(response.message, CREATED_OK)

    async def update(self, path: str, timestamp: Optional[int], values: Sequence[Number]) -> None:
        """Update *path* with one value per data source, in data source order."""
        point = UpdatePoint(path, timestamp, tuple(values))
        await self._send(commands.encode_update(point, self.clock))

    async def update_one(self, path: str, timestamp: Optional[int], value: Number) -> None:
        await self.update(path, timestamp, [value])

    async def batch_outcome(self, points: Iterable[UpdatePoint]) -> BatchOutcome:
        return await send_batch(self.reader, self.writer, points, self.clock)

    async def batch(self, points: Iterable[UpdatePoint]) -> None:
        """Send many updates in one BATCH exchange.

        Raises BatchPartialFailure listing the rejected lines. Updates to the
        same path must be sorted by timestamp.
        """
        outcome = await self.batch_outcome(points)
        outcome.raise_for_errors()

    async def fetch(
        self,
        path: str,
        consolidation: ConsolidationFunction = ConsolidationFunction.AVERAGE,
        start: Optional[int] = None,
        end: Optional[int] = None,
        columns: Optional[Sequence[str]] = None,
    ) -> FetchResult:
        query = FetchQuery(path, consolidation, start, end, columns)
        return await fetch(self.reader, self.writer, query)

    async def first(self, path: str, archive: int = 0) -> int:
        response = await self._send(commands.first(path, archive))
        return parse_timestamp(response.message)

    async def last(self, path: str) -> int:
        response = await self._send(commands.last(path))
        return parse_timestamp(response.message)

    async def info(self, path: str) -> List[str]:
        response = await self._send(commands.info(path))
        return _text(response.lines)

    async def list(self, recursive: bool = False, path: str = "/") -> List[str]:
        response = await self._send(commands.list_(path, recursive))
        return _text(response.lines)

    # --- cache control ---

    async def flush(self, path: str) -> None:
        await self._send(commands.flush(path))

    async def flush_all(self) -> None:
        await self._send(commands.flush_all())

    async def pending(self, path: str) -> List[str]:
        response = await self._send(commands.pending(path))
        return _text(response.lines)

    async def forget(self, path: str) -> None:
        await self._send(commands.forget(path))

    async def suspend(self, path: str) -> None:
        await self._send(commands.suspend(path))

    async def resume(self, path: str) -> None:
        await self._send(commands.resume(path))

    async def suspend_all(self) -> None:
        await self._send(commands.suspend_all())

    async def resume_all(self) -> None:
        await self._send(commands.resume_all())

    async def quit(self) -> None:
        # the daemon hangs up without answering
        await write_line(self.writer, commands.quit_())
