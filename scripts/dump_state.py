#!/usr/bin/env python3
"""Render a server-side snapshot of one HTTP segment.

Subscribes a server-mode store to each query given on the command line,
waits for every fetch, and prints the hydration payload a client store
would be started with.  Useful to check what a page would ship to the
browser and which queries end in an error state.

Usage
-----
::

    export PYSEGMENT_BASE_URL="https://api.example.com"
    python scripts/dump_state.py /api/users '{"username": "alice"}' '{"username": "bob"}'

Options::

    --segment-id NAME   Segment id used in the dump (default: "http")
    --output FILE       Write the JSON payload to FILE instead of stdout
    --verbose, -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import aiohttp

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysegment import HttpSegment, RenderType, SegmentConfig, SegmentStore  # noqa: E402


def _segment_class(segment_id: str, path: str) -> type[HttpSegment]:
    return type("CliSegment", (HttpSegment,), {"segment_id": segment_id, "path": path})


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the hydration state of a server render.")
    parser.add_argument("path", help="Endpoint path relative to PYSEGMENT_BASE_URL")
    parser.add_argument("queries", nargs="+", help="JSON query objects")
    parser.add_argument("--segment-id", default="http", help="Segment id used in the dump")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    queries: list[Any] = [json.loads(raw) for raw in args.queries]
    config = SegmentConfig.from_env(render_type=RenderType.SERVER)
    if not config.base_url:
        parser.error("PYSEGMENT_BASE_URL is not set")

    async with aiohttp.ClientSession() as http:
        store = SegmentStore(config)
        store.register(_segment_class(args.segment_id, args.path)(config, http_session=http))
        subscriptions = [store.subscribe(args.segment_id, query, lambda _piece: None) for query in queries]
        await store.settle()

    for sub in subscriptions:
        piece = sub.piece
        status = "loaded" if piece is not None and piece.loaded else "failed"
        print(f"{status:7} {sub.query_id}", file=sys.stderr)

    payload = json.dumps(store.dump_state(), indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
