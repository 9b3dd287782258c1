"""Command encoders.

Every function here is pure: it takes a typed request and returns the exact
newline-terminated line the daemon expects, or raises an EncodeError. Nothing
in this module touches the stream.
"""
from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from .clock import Clock, system_clock
from .constants import BATCH, BATCH_END, RRD_SUFFIX, UNKNOWN
from .errors import (
    ClockUnavailable,
    EncodeError,
    InvalidFetchQuery,
    InvalidSeriesSpec,
    InvalidUpdate,
)
from .validate import validate_directory, validate_identifier

Number = Union[int, float]


class ConsolidationFunction(enum.Enum):
    AVERAGE = "AVERAGE"
    MIN = "MIN"
    MAX = "MAX"
    LAST = "LAST"


class DataSourceType(enum.Enum):
    GAUGE = "GAUGE"
    COUNTER = "COUNTER"
    DCOUNTER = "DCOUNTER"
    DERIVE = "DERIVE"
    DDERIVE = "DDERIVE"
    ABSOLUTE = "ABSOLUTE"


def format_number(value: Number) -> str:
    if isinstance(value, bool):
        raise EncodeError(f"not a number: {value!r}")
    if isinstance(value, int):
        return str(value)
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise EncodeError(f"not a number: {value!r}") from None
    if math.isnan(value):
        return UNKNOWN
    return repr(value)


def _bound(value: Optional[float]) -> str:
    return UNKNOWN if value is None else format_number(value)


def _rrd(path: str) -> str:
    validate_identifier(path)
    return path + RRD_SUFFIX


def _is_timestamp(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _member(enum_type, value, error):
    try:
        return enum_type(value)
    except ValueError:
        raise error(f"unknown {enum_type.__name__}: {value!r}") from None


# --- UPDATE ---

@dataclass(frozen=True)
class UpdatePoint:
    path: str
    timestamp: Optional[int]
    values: Tuple[Number, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        self.validate()

    def validate(self) -> None:
        if not self.values:
            raise InvalidUpdate("data is empty")
        if self.timestamp is not None and not _is_timestamp(self.timestamp):
            raise InvalidUpdate(f"timestamp must be a non-negative int, got {self.timestamp!r}")
        validate_identifier(self.path)


def encode_update(point: UpdatePoint, clock: Clock = system_clock) -> str:
    """UPDATE <path>.rrd <timestamp>:<v1>:...:<vn>

    An omitted timestamp is read from *clock* on every call, not when the
    point was built.
    """
    point.validate()
    timestamp = point.timestamp
    if timestamp is None:
        timestamp = clock()
        if not _is_timestamp(timestamp):
            raise ClockUnavailable(f"clock returned {timestamp!r}, not whole epoch seconds")
    data = ":".join(format_number(v) for v in point.values)
    return f"UPDATE {_rrd(point.path)} {timestamp}:{data}\n"


_UPDATE_LINE = re.compile(r"UPDATE ([^ ]+)\.rrd (\d+):([^ \n]+)\n")


def decode_update(line: str) -> UpdatePoint:
    m = _UPDATE_LINE.fullmatch(line)
    if m is None:
        raise InvalidUpdate(f"not an UPDATE line: {line!r}")
    path, timestamp, data = m.groups()
    values = []
    for token in data.split(":"):
        if token == UNKNOWN:
            values.append(math.nan)
            continue
        try:
            values.append(int(token) if token.lstrip("-").isdigit() else float(token))
        except ValueError:
            raise InvalidUpdate(f"bad value {token!r} in {line!r}") from None
    return UpdatePoint(path, int(timestamp), tuple(values))


# --- CREATE ---

@dataclass(frozen=True)
class DataSourceSpec:
    name: str
    heartbeat: int
    kind: DataSourceType = DataSourceType.GAUGE
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def validate(self) -> None:
        object.__setattr__(self, "kind", _member(DataSourceType, self.kind, InvalidSeriesSpec))
        if self.heartbeat <= 0:
            raise InvalidSeriesSpec("heartbeat must be greater than 0")
        if self.minimum is not None and self.maximum is not None:
            if self.maximum <= self.minimum:
                raise InvalidSeriesSpec("maximum must be greater than minimum")
        validate_identifier(self.name, kind="data source name")

    def to_arg(self) -> str:
        return (
            f"DS:{self.name}:{self.kind.value}:{self.heartbeat}"
            f":{_bound(self.minimum)}:{_bound(self.maximum)}"
        )


@dataclass(frozen=True)
class ArchiveSpec:
    consolidation: ConsolidationFunction
    xfiles_factor: float
    steps: int
    rows: int

    def validate(self) -> None:
        object.__setattr__(
            self, "consolidation", _member(ConsolidationFunction, self.consolidation, InvalidSeriesSpec)
        )
        if not 0.0 <= self.xfiles_factor <= 1.0:
            raise InvalidSeriesSpec("xfiles_factor must be between 0 and 1")
        if self.steps <= 0:
            raise InvalidSeriesSpec("steps must be greater than 0")
        if self.rows <= 0:
            raise InvalidSeriesSpec("rows must be greater than 0")

    def to_arg(self) -> str:
        return (
            f"RRA:{self.consolidation.value}:{format_number(float(self.xfiles_factor))}"
            f":{self.steps}:{self.rows}"
        )


@dataclass(frozen=True)
class SeriesSpec:
    path: str
    data_sources: Sequence[DataSourceSpec]
    archives: Sequence[ArchiveSpec]
    start: int
    step: int

    def validate(self) -> None:
        if not self.data_sources:
            raise InvalidSeriesSpec("at least one data source is required")
        if not self.archives:
            raise InvalidSeriesSpec("at least one round robin archive is required")
        if self.step <= 0:
            raise InvalidSeriesSpec("step must be greater than 0")
        if self.start < 0:
            raise InvalidSeriesSpec("start must not be negative")
        for ds in self.data_sources:
            ds.validate()
        for rra in self.archives:
            rra.validate()
        validate_identifier(self.path)


def encode_create(spec: SeriesSpec) -> str:
    spec.validate()
    args = [f"{_rrd(spec.path)} -s {spec.step} -b {spec.start}"]
    args.extend(ds.to_arg() for ds in spec.data_sources)
    args.extend(rra.to_arg() for rra in spec.archives)
    return "CREATE " + " ".join(args) + "\n"


# --- FETCH ---

@dataclass(frozen=True)
class FetchQuery:
    path: str
    consolidation: ConsolidationFunction = ConsolidationFunction.AVERAGE
    start: Optional[int] = None
    end: Optional[int] = None
    columns: Optional[Sequence[str]] = None

    def validate(self) -> None:
        validate_identifier(self.path)
        object.__setattr__(
            self, "consolidation", _member(ConsolidationFunction, self.consolidation, InvalidFetchQuery)
        )
        if self.start is None and (self.end is not None or self.columns is not None):
            raise InvalidFetchQuery("start must be specified")
        if self.end is None and self.columns is not None:
            raise InvalidFetchQuery("end must be specified")
        for column in self.columns or ():
            validate_identifier(column, kind="column")


def encode_fetch(query: FetchQuery) -> str:
    """FETCH <path>.rrd <CF>[ <start>[ <end>[ <col> ...]]]"""
    query.validate()
    parts = ["FETCH", _rrd(query.path), query.consolidation.value]
    if query.start is not None:
        parts.append(str(query.start))
        if query.end is not None:
            parts.append(str(query.end))
            if query.columns:
                parts.extend(query.columns)
    return " ".join(parts) + "\n"


# --- simple commands ---

def ping() -> str:
    return "PING\n"


def help_(command: Optional[str] = None) -> str:
    if command is None:
        return "HELP\n"
    validate_identifier(command, kind="command")
    return f"HELP {command}\n"


def flush(path: str) -> str:
    return f"FLUSH {_rrd(path)}\n"


def flush_all() -> str:
    return "FLUSHALL\n"


def pending(path: str) -> str:
    return f"PENDING {_rrd(path)}\n"


def forget(path: str) -> str:
    return f"FORGET {_rrd(path)}\n"


def queue() -> str:
    return "QUEUE\n"


def stats() -> str:
    return "STATS\n"


def first(path: str, archive: int = 0) -> str:
    if archive < 0:
        raise EncodeError(f"archive index must not be negative, got {archive}")
    return f"FIRST {_rrd(path)} {archive}\n"


def last(path: str) -> str:
    return f"LAST {_rrd(path)}\n"


def info(path: str) -> str:
    return f"INFO {_rrd(path)}\n"


def list_(path: str = "/", recursive: bool = False) -> str:
    validate_directory(path)
    if recursive:
        return f"LIST RECURSIVE {path}\n"
    return f"LIST {path}\n"


def suspend(path: str) -> str:
    return f"SUSPEND {_rrd(path)}\n"


def resume(path: str) -> str:
    return f"RESUME {_rrd(path)}\n"


def suspend_all() -> str:
    return "SUSPENDALL\n"


def resume_all() -> str:
    return "RESUMEALL\n"


def quit_() -> str:
    return "QUIT\n"


def batch() -> str:
    return BATCH + "\n"


def batch_end() -> str:
    return BATCH_END + "\n"
