"""
QA Dashboard - command line entry point.

    qadash serve       Run the API with uvicorn
    qadash reconcile   Run the users/team-members integrity check once
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

import uvicorn

from qadash.config import get_settings
from qadash.services.reconciliation import reconcile
from qadash.storage import create_local_storage, seed_default_data


def serve(args: argparse.Namespace) -> int:
    settings = get_settings()
    uvicorn.run(
        "qadash.api.app:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


async def _reconcile(seed: bool) -> dict:
    settings = get_settings()
    records = create_local_storage(settings.data_dir).records
    if seed:
        await seed_default_data(records)
    report = await reconcile(records, settings)
    return report.to_dict()


def run_reconcile(args: argparse.Namespace) -> int:
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    result = asyncio.run(_reconcile(args.seed))
    print(json.dumps(result, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qadash", description="QA team dashboard API")
    sub = parser.add_subparsers(dest="command", required=True)

    serve_cmd = sub.add_parser("serve", help="run the HTTP API")
    serve_cmd.add_argument("--host", default=None)
    serve_cmd.add_argument("--port", type=int, default=None)
    serve_cmd.add_argument("--reload", action="store_true")
    serve_cmd.set_defaults(func=serve)

    reconcile_cmd = sub.add_parser("reconcile", help="sync users and team members once")
    reconcile_cmd.add_argument("--seed", action="store_true", help="seed demo data first")
    reconcile_cmd.set_defaults(func=run_reconcile)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
