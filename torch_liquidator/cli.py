"""Command-line interface for the Torch liquidation agent."""
from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import replace

from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .protocols.torch import build_venue
from .services import Monitor, PositionWatcher, show_all_lending, show_lending_info

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="torch-liquidator",
        description="Risk-scored liquidation agent for Torch Market lending",
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

    info_parser = sub.add_parser("info", help="Show lending parameters")
    info_parser.add_argument(
        "mint",
        nargs="?",
        default=None,
        help="Token mint (default: all migrated tokens)",
    )

    watch_parser = sub.add_parser("watch", help="Watch your own loan health")
    watch_parser.add_argument("mint", help="Token mint of the loan")
    watch_parser.add_argument(
        "--auto-repay",
        action="store_true",
        default=None,
        help="Repay in full once the loan becomes liquidatable",
    )
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Poll interval in seconds (overrides config)",
    )

    sub.add_parser("bot", help="Run the liquidation bot")

    return parser


def _watch_config(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    watch = config.watch
    if args.auto_repay:
        watch = replace(watch, auto_repay=True)
    if args.interval is not None:
        watch = replace(watch, poll_interval_seconds=args.interval)
    return replace(config, watch=watch)


async def _run_bot(config: AppConfig) -> None:
    monitor = Monitor(config)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, monitor.stop)
        except NotImplementedError:
            logger.debug("Signal handlers unavailable on this platform")

    await monitor.start()


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.command == "info":
        venue = build_venue(config)
        if args.mint:
            print(await show_lending_info(venue, args.mint))
        else:
            print(await show_all_lending(venue))
    elif args.command == "watch":
        config = _watch_config(config, args)
        watcher = PositionWatcher(build_venue(config), args.mint, config.watch)
        await watcher.run()
    elif args.command == "bot":
        await _run_bot(config)
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except KeyboardInterrupt:
        pass
