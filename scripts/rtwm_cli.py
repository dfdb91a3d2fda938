#!/usr/bin/env python3
"""
RTWM command line utilities.

Usage:
    python scripts/rtwm_cli.py probe --target https://example.org/
    python scripts/rtwm_cli.py uptime 3661
    python scripts/rtwm_cli.py config
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

from rtwm_backend.config import get_settings, reset_settings_cache
from rtwm_backend.services.monitor import MonitorService
from rtwm_backend.services.system import format_uptime_seconds


def cmd_probe(args: argparse.Namespace) -> None:
    reset_settings_cache()
    settings = get_settings()
    if args.timeout_ms:
        settings = settings.model_copy(update={"fetch_timeout_ms": args.timeout_ms})
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
    service = MonitorService(settings)
    record = asyncio.run(service.measure(target=args.target, origin_uptime_url=args.origin_uptime))
    print(json.dumps(record.model_dump(mode="json", by_alias=True), indent=2))


def cmd_uptime(args: argparse.Namespace) -> None:
    print(format_uptime_seconds(args.seconds))


def cmd_config(_: argparse.Namespace) -> None:
    reset_settings_cache()
    settings = get_settings()
    print("Configuration")
    print("-" * 40)
    print(f"Target URL: {settings.target_url}")
    print(f"Origin uptime endpoint: {settings.origin_uptime_endpoint}")
    print(f"Fetch timeout: {settings.fetch_timeout_ms} ms")
    print(f"Listen: {settings.host}:{settings.port}")
    print(f"Log level: {settings.log_level}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RTWM utility CLI")
    sub = parser.add_subparsers(dest="command", required=True)
    probe_parser = sub.add_parser("probe", help="Probe a target once and print the measurement")
    probe_parser.add_argument("--target", help="URL to probe (defaults to TARGET_URL)")
    probe_parser.add_argument("--origin-uptime", help="Origin uptime endpoint to relay")
    probe_parser.add_argument("--timeout-ms", type=int, help="Override FETCH_TIMEOUT_MS")
    uptime_parser = sub.add_parser("uptime", help="Format a duration in seconds")
    uptime_parser.add_argument("seconds", type=float)
    sub.add_parser("config", help="Show the effective configuration")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    if args.command == "probe":
        cmd_probe(args)
    elif args.command == "uptime":
        cmd_uptime(args)
    elif args.command == "config":
        cmd_config(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
