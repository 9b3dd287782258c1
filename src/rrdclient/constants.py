from __future__ import annotations

DEFAULT_PORT = 42217
DEFAULT_HOST = "localhost"
ADDRESS_ENV = "RRDCACHED_ADDRESS"

MAX_IDENTIFIER_LEN = 64
RRD_SUFFIX = ".rrd"

UNKNOWN = "U"  # rrdtool's token for a missing value or bound

PONG = "PONG"
CREATED_OK = "RRD created OK"

BATCH = "BATCH"
BATCH_END = "."
