from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import ADDRESS_ENV, DEFAULT_HOST, DEFAULT_PORT
from .errors import TransportError

log = logging.getLogger(__name__)

Streams = Tuple[asyncio.StreamReader, asyncio.StreamWriter]


@dataclass(frozen=True, slots=True)
class Address:
    host: Optional[str] = None
    port: int = DEFAULT_PORT
    unix_path: Optional[str] = None

    @property
    def is_unix(self) -> bool:
        return self.unix_path is not None

    def __str__(self) -> str:
        if self.unix_path is not None:
            return f"unix:{self.unix_path}"
        if self.host is not None and ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


def parse_address(text: str) -> Address:
    """Parse an address the way rrdtool spells them.

    "unix:/path" and "/path" name a local socket; "host", "host:port" and
    "[v6addr]:port" name a TCP endpoint.
    """
    text = text.strip()
    if not text:
        raise ValueError("empty daemon address")
    if text.startswith("unix:"):
        path = text[len("unix:"):]
        if not path:
            raise ValueError(f"missing socket path in {text!r}")
        return Address(unix_path=path)
    if text.startswith("/"):
        return Address(unix_path=text)

    if text.startswith("["):
        host, sep, rest = text[1:].partition("]")
        if not sep:
            raise ValueError(f"unterminated IPv6 address in {text!r}")
        port_text = rest[1:] if rest.startswith(":") else rest
        if rest and not rest.startswith(":"):
            raise ValueError(f"unexpected text after IPv6 address in {text!r}")
    elif text.count(":") == 1:
        host, _, port_text = text.partition(":")
    else:
        host, port_text = text, ""

    if not host:
        raise ValueError(f"missing host in {text!r}")
    if not port_text:
        return Address(host=host)
    if not port_text.isdigit() or not 0 < int(port_text) < 65536:
        raise ValueError(f"bad port {port_text!r} in {text!r}")
    return Address(host=host, port=int(port_text))


def default_address() -> Address:
    return parse_address(os.environ.get(ADDRESS_ENV) or f"{DEFAULT_HOST}:{DEFAULT_PORT}")


async def open_streams(address: Address) -> Streams:
    try:
        if address.unix_path is not None:
            streams = await asyncio.open_unix_connection(address.unix_path)
        else:
            streams = await asyncio.open_connection(address.host, address.port)
    except OSError as exc:
        raise TransportError(f"unable to connect to {address}: {exc}") from exc
    log.info("connected to %s", address)
    return streams
