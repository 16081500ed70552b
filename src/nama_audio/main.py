#!/usr/bin/env python3
"""Main entry point for the Nama audio counter."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from nama_audio.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from nama_audio.config.container import Container
    from nama_audio.config.settings import Settings
    from nama_audio.domain.shared.events import LoopCompleted, LoopLimitReached, PlaybackHalted

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger(__name__).warning(
            LogTemplates.LOGGING_CONFIG_FALLBACK, _LOGGING_CONFIG_PATH
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nama-audio",
        description="Play Nama recordings and submit the counted repetitions.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tracks", help="List available recordings")

    play = sub.add_parser("play", help="Play a recording and submit the Namas it earns")
    play.add_argument("track", help="Track id or title")
    play.add_argument("--user", required=True, help="Submitting user id")
    play.add_argument("--account", help="Sankalpa account the Namas are credited to")
    play.add_argument(
        "--no-submit", action="store_true", help="Only count, do not submit to the ledger"
    )

    entries = sub.add_parser("entries", help="Show recent ledger entries for a user")
    entries.add_argument("--user", required=True, help="User id")
    entries.add_argument("--limit", type=int, default=10, help="Number of entries (default: 10)")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "play" and not args.no_submit and not (args.account or "").strip():
        parser.error("--account is required unless --no-submit is given")
    return args


async def list_tracks(container: Container) -> int:
    from nama_audio.domain.chanting.services import ChantingDomainService

    partition = ChantingDomainService.partition(await container.catalog.list_tracks())
    if not len(partition):
        print("No audio files available.")
        return 0

    for heading, tracks in (("Nama Japa", partition.repeating), ("Other", partition.single)):
        if not tracks:
            continue
        print(f"{heading}:")
        for track in tracks:
            print(f"  {track.id}  {track.title}  [{track.loop_label}, +{track.full_count}]")
    return 0


async def play_track(container: Container, args: argparse.Namespace) -> int:
    from nama_audio.domain.shared.events import LoopCompleted, LoopLimitReached, PlaybackHalted

    track = await container.catalog.find(args.track)
    if track is None:
        print(f"No track matches {args.track!r}", file=sys.stderr)
        return 1

    service = container.playback_service(args.user)
    bus = container.event_bus
    finished = asyncio.Event()

    async def on_loop(event: LoopCompleted) -> None:
        print(f"Loop {event.loops_completed}/{event.max_loops}: {event.accumulated_count} Namas")

    async def on_limit(event: LoopLimitReached) -> None:
        finished.set()

    async def on_halt(event: PlaybackHalted) -> None:
        print(f"Playback stopped: {event.reason}", file=sys.stderr)
        finished.set()

    bus.subscribe(LoopCompleted, on_loop)
    bus.subscribe(LoopLimitReached, on_limit)
    bus.subscribe(PlaybackHalted, on_halt)
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, finished.set)
    try:
        result = await service.select_and_play(track)
        print(result.message)
        if not result.is_success:
            return 1

        await finished.wait()
        if service.snapshot().state.is_active:
            logger.info(LogTemplates.APP_INTERRUPTED)
            await service.stop()
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        bus.unsubscribe(LoopCompleted, on_loop)
        bus.unsubscribe(LoopLimitReached, on_limit)
        bus.unsubscribe(PlaybackHalted, on_halt)

    count = service.snapshot().accumulated_count
    if args.no_submit or count == 0:
        print(f"{count} Namas counted")
        return 0

    submitted = await service.submit(args.account)
    print(submitted.message)
    return 0 if submitted.is_success else 1


async def show_entries(container: Container, args: argparse.Namespace) -> int:
    from nama_audio.domain.shared.datetime_utils import UtcDateTime

    entries = await container.ledger.get_recent_entries(args.user, limit=args.limit)
    if not entries:
        print("No entries yet.")
        return 0

    for entry in entries:
        when = UtcDateTime(entry.created_at).human_utc
        print(f"{when}  {entry.count:>6}  {entry.account_id}  ({entry.source_tag})")
    return 0


async def run(args: argparse.Namespace, settings: Settings) -> int:
    from nama_audio.config.container import create_container

    container = create_container(settings)
    await container.initialize()
    try:
        if args.command == "tracks":
            return await list_tracks(container)
        if args.command == "play":
            return await play_track(container, args)
        return await show_entries(container, args)
    finally:
        await container.shutdown()


def main(argv: list[str] | None = None) -> int:
    from nama_audio.config.settings import get_settings

    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    logger.info(LogTemplates.APP_STARTING, settings.environment)

    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        return 130


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
