#!/usr/bin/env python3
"""Command line entry point for domscribr.

Usage:
    domscribr harvest page.html --url https://chat.example.com/c/1
    domscribr status --context 7
    domscribr export --context 7 --out exports/
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .aggregator import Aggregator
from .config import ScribrConfig, configure_logging
from .export import write_export
from .harvester import Harvester
from .schema import MessageRecord
from .soup import parse_html
from .store import JsonSessionStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="domscribr", description="Chat transcript capture")
    parser.add_argument("--config", type=Path, default=None, help="config file path")
    parser.add_argument("--store", type=Path, default=None, help="session store path")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    harvest = sub.add_parser("harvest", help="extract messages from a saved HTML page")
    harvest.add_argument("file", type=Path)
    harvest.add_argument("--url", default="")

    status = sub.add_parser("status", help="show recording status of a context")
    status.add_argument("--context", type=int, required=True)

    export = sub.add_parser("export", help="write a context's messages to a JSON file")
    export.add_argument("--context", type=int, required=True)
    export.add_argument("--out", type=Path, default=Path("."))

    return parser


def run_harvest(path: Path, url: str, config: ScribrConfig) -> list[MessageRecord]:
    document = parse_html(path.read_text(), url=url or path.resolve().as_uri())
    records: list[MessageRecord] = []
    harvester = Harvester(
        document,
        records.extend,
        text_limit=config.fingerprint_text_limit,
        ignore_attribute=config.ignore_attribute,
    )
    harvester.start()
    return records


async def _status(aggregator: Aggregator, context_id: int) -> dict:
    return (await aggregator.status(context_id)).to_payload()


async def _export(aggregator: Aggregator, context_id: int, out: Path) -> Path:
    return write_export(await aggregator.export(context_id), out)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = ScribrConfig.load(args.config)
    configure_logging(args.log_level or config.log_level)

    if args.command == "harvest":
        if not args.file.exists():
            print(f"Error: {args.file} not found", file=sys.stderr)
            return 1
        records = run_harvest(args.file, args.url, config)
        print(json.dumps([r.to_wire() for r in records], indent=2))
        return 0

    store = JsonSessionStore(args.store or config.resolved_store_path())
    aggregator = Aggregator(store, namespace=config.message_namespace)

    if args.command == "status":
        print(json.dumps(asyncio.run(_status(aggregator, args.context)), indent=2))
        return 0

    path = asyncio.run(_export(aggregator, args.context, args.out))
    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
