from __future__ import annotations

import pytest

from rrdclient import RRDCachedClient, cli


def test_parser_defaults():
    args = cli.build_parser().parse_args(["fetch", "x", "--start", "10", "--end", "20"])
    assert args.func is cli.cmd_fetch
    assert args.cf == "AVERAGE"
    assert (args.start, args.end, args.columns) == (10, 20, None)


def test_update_parses_values():
    args = cli.build_parser().parse_args(["update", "x", "1", "2.5", "--timestamp", "5"])
    assert args.values == [1.0, 2.5]
    assert args.timestamp == 5


def test_unreachable_daemon_exits_with_error(capsys, tmp_path):
    missing = tmp_path / "no.sock"
    assert cli.main(["--address", f"unix:{missing}", "ping"]) == 1
    assert "rrdc:" in capsys.readouterr().err


def test_bad_address_exits_with_error(capsys):
    assert cli.main(["--address", "host:port", "ping"]) == 1


@pytest.mark.asyncio
async def test_fetch_command_output(scripted):
    stream = scripted("2 Success\nDSName: ds1\n10: nan\n")
    args = cli.build_parser().parse_args(["fetch", "x"])
    out = await cli.cmd_fetch(RRDCachedClient(stream, stream), args)
    assert out["ds_names"] == ["ds1"]
    assert out["rows"] == [[10, [None]]]
