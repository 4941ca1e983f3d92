"""Command-line interface for the liquidation bot."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .config import load_config
from .errors import SourceFetchError
from .fixed_point import format_units
from .logging_setup import configure_logging
from .services import LiquidationOrchestrator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="liquidation-bot",
        description="Lending protocol liquidation bot",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    run_parser = sub.add_parser("run", help="Single scan, evaluate and liquidate pass")
    run_parser.add_argument(
        "--dry-run", action="store_true", help="Log liquidations instead of sending"
    )

    sub.add_parser("scan", help="List liquidatable users only")

    watch_parser = sub.add_parser("watch", help="Continuous liquidation loop")
    watch_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Minutes between runs (overrides config)",
    )
    watch_parser.add_argument(
        "--dry-run", action="store_true", help="Log liquidations instead of sending"
    )

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command; returns the process exit code."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    orchestrator = LiquidationOrchestrator.from_config(
        config, dry_run=getattr(args, "dry_run", False)
    )

    try:
        if args.command == "run":
            await orchestrator.run()
        elif args.command == "scan":
            for position in await orchestrator.compute_liquidatable_users():
                print(f"{position.user_address}  HF {format_units(position.health_factor)}")
        elif args.command == "watch":
            await orchestrator.run_continuous(args.interval)
        else:
            build_parser().print_help()
            return 1
    except SourceFetchError as e:
        logger.error("Index fetch failed, aborting: %s", e)
        return 1
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
