from __future__ import annotations

import pytest

from rrdclient.constants import DEFAULT_PORT
from rrdclient.net import Address, default_address, parse_address


@pytest.mark.parametrize(
    "text, expected",
    [
        ("unix:/var/run/rrdcached.sock", Address(unix_path="/var/run/rrdcached.sock")),
        ("/tmp/rrd.sock", Address(unix_path="/tmp/rrd.sock")),
        ("localhost", Address(host="localhost", port=DEFAULT_PORT)),
        ("localhost:1234", Address(host="localhost", port=1234)),
        ("[::1]:1234", Address(host="::1", port=1234)),
        ("[::1]", Address(host="::1")),
        ("::1", Address(host="::1")),
    ],
)
def test_parse_address(text, expected):
    assert parse_address(text) == expected


@pytest.mark.parametrize("text", ["", "unix:", "host:port", "host:0", "host:70000", ":42217", "[::1", "[::1]x"])
def test_parse_address_rejects(text):
    with pytest.raises(ValueError):
        parse_address(text)


def test_address_str():
    assert str(Address(host="::1", port=1)) == "[::1]:1"
    assert str(Address(host="h", port=2)) == "h:2"
    assert str(Address(unix_path="/s")) == "unix:/s"


def test_default_address(monkeypatch):
    monkeypatch.delenv("RRDCACHED_ADDRESS", raising=False)
    assert default_address() == Address(host="localhost", port=DEFAULT_PORT)
    monkeypatch.setenv("RRDCACHED_ADDRESS", "unix:/run/rrd.sock")
    assert default_address().is_unix
