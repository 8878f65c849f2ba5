#!/usr/bin/env python3
"""
admin.py — Operator commands for the MongoDB-backed Request Gate state.

With GATE_STORE_BACKEND=mongo, blocked addresses survive restarts; this is
how an operator lifts a block or inspects who is blocked.

Usage:
    careertools-admin indexes              # create the gate store indexes
    careertools-admin blocked              # list blocked addresses
    careertools-admin unblock 203.0.113.7  # lift a block (and its suspicion count)
    careertools-admin prune                # drop records past the retention window

Requires:
    MongoDB reachable at MONGO_URI (same settings as the API)

Safe to re-run: every command is idempotent.
"""

import argparse
import asyncio
from datetime import timedelta
from typing import Optional, Sequence

from careertools.core import database as db_module
from careertools.core.config import settings
from careertools.core.database import close_mongo_connection, connect_to_mongo
from careertools.security.store import MongoGateStore
from careertools.security.violations import utcnow


async def run(command: str, store: MongoGateStore, address: Optional[str] = None) -> list[str]:
    """Execute *command* against *store*; returns the lines to print."""
    if command == "indexes":
        await store.ensure_indexes()
        return ["Indexes ensured."]

    if command == "blocked":
        blocked = await store.blocked_addresses()
        if not blocked:
            return ["No blocked addresses."]
        return [f"  {addr}" for addr in blocked]

    if command == "unblock":
        if await store.unblock(address):
            return [f"Unblocked {address}."]
        return [f"{address} was not blocked."]

    if command == "prune":
        cutoff = utcnow() - timedelta(hours=settings.security_retention_hours)
        await store.prune(cutoff)
        return [f"Pruned records older than {cutoff.isoformat()}."]

    raise ValueError(f"Unknown command: {command}")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="careertools-admin", description=__doc__.split("\n")[1])
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("indexes", help="create gate store indexes")
    sub.add_parser("blocked", help="list blocked addresses")
    unblock = sub.add_parser("unblock", help="remove an address from the blocked set")
    unblock.add_argument("address")
    sub.add_parser("prune", help="drop expired violations and suspicion records")
    return parser


async def _main(args: argparse.Namespace) -> int:
    await connect_to_mongo()
    if db_module.db_client.db is None:
        print("MongoDB unavailable; check MONGO_URI.")
        return 1
    try:
        store = MongoGateStore(db_module.db_client.db)
        for line in await run(args.command, store, getattr(args, "address", None)):
            print(line)
    finally:
        await close_mongo_connection()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    return asyncio.run(_main(_parser().parse_args(argv)))


if __name__ == "__main__":
    raise SystemExit(main())
