from __future__ import annotations

import io

import pytest


class ScriptedStream:
    """In-memory stand-in for an asyncio reader/writer pair.

    Replies are queued up front; the client reads them in order as it would
    from a daemon. Everything the client writes is collected in ``sent``.
    """

    def __init__(self, replies: str = ""):
        self._buffer = io.BytesIO(replies.encode("utf-8"))
        self.sent = bytearray()
        self.reads = 0
        self.closed = False

    async def readline(self) -> bytes:
        self.reads += 1
        return self._buffer.readline()

    def write(self, data: bytes) -> None:
        self.sent += data

    async def drain(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        pass

    @property
    def sent_lines(self) -> list[str]:
        return self.sent.decode("utf-8").splitlines(keepends=True)

    def unread(self) -> bytes:
        return self._buffer.read()


@pytest.fixture
def scripted():
    return ScriptedStream
