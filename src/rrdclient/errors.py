from __future__ import annotations

from typing import List


class RRDCachedError(Exception):
    """Base class for everything the client raises."""


class EncodeError(RRDCachedError, ValueError):
    """A request could not be turned into a protocol line."""


class InvalidIdentifier(EncodeError):
    pass


class InvalidUpdate(EncodeError):
    pass


class InvalidSeriesSpec(EncodeError):
    pass


class InvalidFetchQuery(EncodeError):
    pass


class TransportError(RRDCachedError):
    """Reading from or writing to the stream failed."""


class TruncatedStream(TransportError):
    """The stream ended before a complete line arrived."""


class MalformedStatus(RRDCachedError, ValueError):
    pass


class MalformedLine(RRDCachedError, ValueError):
    pass


class ProtocolError(RRDCachedError):
    """The daemon answered with a negative status code."""

    def __init__(self, code: int, message: str):
        super().__init__(f"daemon error {code}: {message}")
        self.code = code
        self.message = message


class UnexpectedReply(RRDCachedError):
    def __init__(self, message: str, expected: str):
        super().__init__(f"expected {expected!r}, got {message!r}")
        self.message = message
        self.expected = expected


class BatchPartialFailure(RRDCachedError):
    """The batch terminator reported one or more rejected updates."""

    def __init__(self, message: str, errors: List[str]):
        super().__init__(f"{message} ({len(errors)} failed)")
        self.message = message
        self.errors = errors


class ClockUnavailable(RRDCachedError):
    pass
