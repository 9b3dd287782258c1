"""BATCH sub-protocol.

    client: BATCH
    daemon: 0 Go ahead.  Send me your commands.
    client: UPDATE a.rrd 1609459200:1
    client: UPDATE b.rrd 1609459200:2
    client: .
    daemon: 1 errors
    daemon: 2 <reason the second update failed>

Member lines get no individual reply; the reply to "." counts the rejected
ones and lists them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .clock import Clock, system_clock
from .commands import UpdatePoint, batch, batch_end, encode_update
from .errors import BatchPartialFailure
from .framing import LineReader, LineWriter, exchange, write_line

log = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchOutcome:
    message: str
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise BatchPartialFailure(self.message, self.errors)


async def send_batch(
    reader: LineReader,
    writer: LineWriter,
    points: Iterable[UpdatePoint],
    clock: Clock = system_clock,
) -> BatchOutcome:
    """Send every point inside one BATCH exchange.

    All lines are encoded before BATCH is written, so an encode failure leaves
    the stream untouched. Updates to the same path must be in increasing
    timestamp order or the daemon rejects the stale ones.
    """
    lines = [encode_update(point, clock) for point in points]

    await exchange(reader, writer, batch())
    for line in lines:
        await write_line(writer, line)
    response = await exchange(reader, writer, batch_end())

    outcome = BatchOutcome(response.message, [text.rstrip("\n") for text in response.lines])
    if not outcome.ok:
        log.warning("batch of %d updates: %d rejected (%s)", len(lines), len(outcome.errors), outcome.message)
    return outcome
