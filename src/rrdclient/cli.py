from __future__ import annotations

import argparse
import asyncio
import json
import logging
import math
import sys
from typing import Any

from .client import RRDCachedClient
from .commands import ConsolidationFunction
from .errors import RRDCachedError
from .net import default_address, parse_address


def _finite(value: float) -> float | None:
    return None if math.isnan(value) else value


async def cmd_ping(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    await client.ping()
    return "PONG"


async def cmd_stats(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    return await client.stats()


async def cmd_queue(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    return [{"path": path, "pending": count} for path, count in await client.queue()]


async def cmd_last(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    return await client.last(args.path)


async def cmd_first(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    return await client.first(args.path, args.archive)


async def cmd_info(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    return await client.info(args.path)


async def cmd_list(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    return await client.list(args.recursive, args.path)


async def cmd_pending(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    return await client.pending(args.path)


async def cmd_flush(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    await client.flush(args.path)
    return "flushed"


async def cmd_flushall(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    await client.flush_all()
    return "flushed"


async def cmd_update(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    await client.update(args.path, args.timestamp, args.values)
    return "updated"


async def cmd_fetch(client: RRDCachedClient, args: argparse.Namespace) -> Any:
    result = await client.fetch(
        args.path,
        ConsolidationFunction(args.cf),
        start=args.start,
        end=args.end,
        columns=args.columns or None,
    )
    return {
        "flush_version": result.flush_version,
        "start": result.start,
        "end": result.end,
        "step": result.step,
        "ds_names": result.ds_names,
        "rows": [[ts, [_finite(v) for v in values]] for ts, values in result.rows],
    }


async def run(args: argparse.Namespace) -> Any:
    address = parse_address(args.address) if args.address else default_address()
    async with await RRDCachedClient.connect(address) as client:
        return await args.func(client, args)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rrdc", description="Talk to an rrdcached daemon.")
    p.add_argument("--address", default=None, help="unix:/path, /path, host or host:port (default: $RRDCACHED_ADDRESS)")
    p.add_argument("--json", action="store_true")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("ping").set_defaults(func=cmd_ping)
    sub.add_parser("stats").set_defaults(func=cmd_stats)
    sub.add_parser("queue").set_defaults(func=cmd_queue)
    sub.add_parser("flushall").set_defaults(func=cmd_flushall)

    for name, func in (
        ("last", cmd_last),
        ("info", cmd_info),
        ("pending", cmd_pending),
        ("flush", cmd_flush),
    ):
        x = sub.add_parser(name)
        x.add_argument("path")
        x.set_defaults(func=func)

    first = sub.add_parser("first")
    first.add_argument("path")
    first.add_argument("--archive", type=int, default=0)
    first.set_defaults(func=cmd_first)

    ls = sub.add_parser("list")
    ls.add_argument("path", nargs="?", default="/")
    ls.add_argument("--recursive", action="store_true")
    ls.set_defaults(func=cmd_list)

    update = sub.add_parser("update")
    update.add_argument("path")
    update.add_argument("values", nargs="+", type=float)
    update.add_argument("--timestamp", type=int, default=None)
    update.set_defaults(func=cmd_update)

    fetch = sub.add_parser("fetch")
    fetch.add_argument("path")
    fetch.add_argument("--cf", default="AVERAGE", choices=[c.value for c in ConsolidationFunction])
    fetch.add_argument("--start", type=int, default=None)
    fetch.add_argument("--end", type=int, default=None)
    fetch.add_argument("--columns", nargs="*", default=None)
    fetch.set_defaults(func=cmd_fetch)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")
    try:
        result = asyncio.run(run(args))
    except (RRDCachedError, ValueError) as exc:
        print(f"rrdc: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2) if args.json else result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
