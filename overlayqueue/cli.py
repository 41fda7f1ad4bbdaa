"""CLI interface for overlayqueue."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from overlayqueue.core.config import Config, load_config, merge_configs
from overlayqueue.core.logging import setup_logging
from overlayqueue.core.queue import Priority, QueueRegistry
from overlayqueue.presenter import ConsoleRenderer, OverlayPresenter

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES = [
    "low:Tip of the day",
    "Welcome back",
    "high:Update available",
    "Sync finished",
]


def parse_message_arg(value: str) -> tuple[Priority, str]:
    """Split a ``[priority:]text`` argument.

    Args:
        value: Message text, optionally prefixed with ``high:``, ``default:`` or ``low:``.

    Returns:
        The priority (DEFAULT when no prefix is given) and the message text.
    """
    prefix, sep, rest = value.partition(":")
    if sep:
        try:
            return Priority(prefix.strip().lower()), rest.strip()
        except ValueError:
            pass
    return Priority.DEFAULT, value.strip()


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate command-line flags into a config fragment merged over the file.

    ``--lane`` un-pauses the target lane so a paused preset cannot stall the demo.
    """
    overrides: dict[str, Any] = {}
    if args.verbose:
        overrides["logging"] = {"level": "DEBUG"}
    if getattr(args, "hold_ms", None) is not None:
        overrides["demo"] = {"hold_ms": args.hold_ms}
    if getattr(args, "lane", None):
        overrides["lanes"] = {args.lane: {"paused": False}}
    return overrides


def resolve_config(path: Path | None, overrides: dict[str, Any] | None = None) -> Config:
    """Load ``path`` if given, otherwise ``config.yaml`` when present, else defaults.

    ``overrides`` is deep-merged over whichever source is used.
    """
    if path is None and Path("config.yaml").exists():
        path = Path("config.yaml")
    if path is not None:
        return load_config(path, overrides=overrides)
    return Config(**merge_configs({}, overrides or {}))


async def run_demo(args: argparse.Namespace, config: Config) -> None:
    """Present a burst of overlays and wait until every one is dismissed."""
    registry = QueueRegistry(config.queue, config.lanes)
    renderer = ConsoleRenderer(hold_ms=config.demo.hold_ms, exit_ms=config.demo.exit_ms)
    presenter = OverlayPresenter(registry, renderer)

    messages = [parse_message_arg(m) for m in (args.message or DEFAULT_MESSAGES)]
    done_events: list[asyncio.Event] = []

    try:
        for priority, text in messages:
            done = asyncio.Event()
            done_events.append(done)
            if args.immediate:
                presenter.show(text, on_dismiss=done.set)
            else:
                presenter.submit(
                    text,
                    queue_name=args.lane,
                    priority=priority,
                    delay_ms=args.delay_ms,
                    on_dismiss=done.set,
                )

        logger.info(f"Submitted {len(messages)} overlay(s); lanes: {registry.get_stats()}")
        await asyncio.gather(*(event.wait() for event in done_events))
        # Give drained lanes a chance to report idle before the final stats.
        await asyncio.sleep(0)
        logger.info(f"All overlays dismissed; lanes: {registry.get_stats()}")
    finally:
        registry.close()


async def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="overlayqueue - present overlays one lane at a time")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    demo_parser = subparsers.add_parser("demo", help="Present overlays on the console")
    demo_parser.add_argument(
        "-m",
        "--message",
        action="append",
        metavar="[PRIORITY:]TEXT",
        help="Overlay to present; repeat for several (prefix with high:, default: or low:)",
    )
    demo_parser.add_argument(
        "--lane",
        type=str,
        default=None,
        help="Lane to submit to (default: the shared default lane)",
    )
    demo_parser.add_argument(
        "--delay-ms",
        type=int,
        default=0,
        help="Delay before each overlay is presented",
    )
    demo_parser.add_argument(
        "--hold-ms",
        type=int,
        default=None,
        help="How long each overlay stays on screen (overrides config)",
    )
    demo_parser.add_argument(
        "--immediate",
        action="store_true",
        help="Present every overlay at once, bypassing the lanes",
    )

    args = parser.parse_args(argv)

    try:
        config = resolve_config(args.config, build_overrides(args))
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(
        level=config.logging.level,
        directory=config.logging.directory,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
    )

    if args.command == "demo":
        await run_demo(args, config)
        return

    parser.print_help()


def run() -> None:
    """Entry point for console scripts."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
