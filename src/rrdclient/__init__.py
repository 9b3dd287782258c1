"""Async client for the rrdcached line protocol.

The package is layered the way the wire is:
- pure command encoders (``commands``) and line decoders (``decoders``)
- response framing over any async line stream (``framing``)
- the two multi-line sub-protocols, batch and fetch
- ``RRDCachedClient``, which runs one exchange at a time
"""

from .client import RRDCachedClient
from .commands import (
    ArchiveSpec,
    ConsolidationFunction,
    DataSourceSpec,
    DataSourceType,
    FetchQuery,
    SeriesSpec,
    UpdatePoint,
)
from .errors import (
    BatchPartialFailure,
    ClockUnavailable,
    EncodeError,
    MalformedLine,
    MalformedStatus,
    ProtocolError,
    RRDCachedError,
    TransportError,
)
from .fetch import FetchResult

__all__ = [
    "ArchiveSpec",
    "BatchPartialFailure",
    "ClockUnavailable",
    "ConsolidationFunction",
    "DataSourceSpec",
    "DataSourceType",
    "EncodeError",
    "FetchQuery",
    "FetchResult",
    "MalformedLine",
    "MalformedStatus",
    "ProtocolError",
    "RRDCachedClient",
    "RRDCachedError",
    "SeriesSpec",
    "TransportError",
    "UpdatePoint",
]
