from __future__ import annotations

import pytest

from rrdclient.decoders import StatusOk
from rrdclient.errors import MalformedLine, MalformedStatus, ProtocolError, TransportError, TruncatedStream
from rrdclient.framing import exchange, read_line, read_response, read_status


@pytest.mark.asyncio
async def test_status_without_follow_up(scripted):
    stream = scripted("0 PONG\n")
    assert await read_status(stream) == StatusOk("PONG", 0)
    response = await read_response(scripted("0 PONG\n"))
    assert response.message == "PONG"
    assert response.lines == []


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, 1, 5])
async def test_reads_exactly_the_declared_lines(scripted, count):
    body = "".join(f"line {i}\n" for i in range(count))
    stream = scripted(f"{count} here you go\n{body}0 next reply\n")
    response = await read_response(stream)
    assert response.lines == [f"line {i}\n" for i in range(count)]
    assert stream.reads == 1 + count
    assert stream.unread() == b"0 next reply\n"


@pytest.mark.asyncio
@pytest.mark.parametrize("trailer", ["", "1 looks like a status\n", "garbage\n"])
async def test_error_status_reads_nothing_more(scripted, trailer):
    stream = scripted("-20 errors, a lot of errors\n" + trailer)
    with pytest.raises(ProtocolError) as err:
        await read_response(stream)
    assert err.value.code == -20
    assert err.value.message == "errors, a lot of errors"
    assert stream.reads == 1
    assert stream.unread() == trailer.encode()


@pytest.mark.asyncio
async def test_truncated_stream(scripted):
    with pytest.raises(TruncatedStream):
        await read_line(scripted(""))
    with pytest.raises(TruncatedStream):
        await read_line(scripted("0 PON"))
    with pytest.raises(TruncatedStream):
        await read_response(scripted("2 two lines\nonly one\n"))


@pytest.mark.asyncio
async def test_truncated_stream_is_a_transport_error(scripted):
    with pytest.raises(TransportError):
        await read_status(scripted(""))


@pytest.mark.asyncio
async def test_malformed_status(scripted):
    with pytest.raises(MalformedStatus):
        await read_status(scripted("PONG\n"))


@pytest.mark.asyncio
async def test_non_utf8_status_line(scripted):
    stream = scripted()
    stream._buffer.write(b"0 \xff\n")
    stream._buffer.seek(0)
    with pytest.raises(MalformedStatus):
        await read_status(stream)


@pytest.mark.asyncio
async def test_non_utf8_line(scripted):
    stream = scripted()
    stream._buffer.write(b"0 \xff\n")
    stream._buffer.seek(0)
    with pytest.raises(MalformedLine):
        await read_line(stream)


class _BrokenStream:
    async def readline(self) -> bytes:
        raise ConnectionResetError("peer went away")

    def write(self, data: bytes) -> None:
        raise BrokenPipeError("peer went away")

    async def drain(self) -> None:
        pass


@pytest.mark.asyncio
async def test_io_errors_become_transport_errors():
    stream = _BrokenStream()
    with pytest.raises(TransportError):
        await read_line(stream)
    with pytest.raises(TransportError):
        await exchange(stream, stream, "PING\n")


@pytest.mark.asyncio
async def test_exchange_writes_then_reads(scripted):
    stream = scripted("0 PONG\n")
    response = await exchange(stream, stream, "PING\n")
    assert stream.sent == b"PING\n"
    assert response.message == "PONG"
