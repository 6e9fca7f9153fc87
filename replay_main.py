"""
Whot notifications — replay entry point.

Usage:
    uv run python replay_main.py recordings/game.jsonl --player 2

Wires together:  config → recording → notification session → CLI display
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from whotnotify.cli.display import console, display_snapshot, on_notification
from whotnotify.config import Config, load_config_or_default
from whotnotify.notifications import NotificationCenter
from whotnotify.recording import replay_recording
from whotnotify.session import NotificationSession
from whotnotify.snapshot import PlayerContext


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a Whot snapshot recording.")
    parser.add_argument("recording", type=Path, help="JSON Lines file of game snapshots")
    parser.add_argument("--player", type=int, default=None, help="local player number (1-indexed)")
    parser.add_argument("--delay", type=float, default=None, help="seconds between snapshots")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"))
    parser.add_argument("-v", "--verbose", action="store_true", help="log detector decisions")
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace, stop_event: asyncio.Event) -> None:
    try:
        config: Config = load_config_or_default(args.config)
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)

    if not args.recording.exists():
        console.print(f"[red]Error:[/] recording not found: {args.recording}")
        sys.exit(1)

    player_number = args.player or config.session.local_player_number
    delay = config.session.replay_delay if args.delay is None else args.delay
    context = PlayerContext(
        local_player_number=player_number,
        fallback_name=config.session.fallback_name,
    )

    center = NotificationCenter(ttls=config.notifications.ttls)
    center.subscribe(on_notification)
    session = NotificationSession(
        context,
        center,
        announce_game_over=config.notifications.announce_game_over,
    )
    console.print(f"[dim]Replaying {args.recording} as player {player_number}[/]\n")

    index = 0
    try:
        async for snapshot in replay_recording(args.recording, delay=delay):
            if stop_event.is_set():
                break
            index += 1
            display_snapshot(index, snapshot)
            session.observe(snapshot)
        # Let the last notifications run out their ttl
        if center.live and not stop_event.is_set():
            await asyncio.sleep(max(e.ttl or 0 for e in center.live.values()))
    finally:
        center.close()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    async def _run() -> None:
        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()

        original_sigint = signal.getsignal(signal.SIGINT)

        def _on_sigint(sig: int, frame: object) -> None:
            # Schedule the event set on the event loop thread (safe on Windows)
            loop.call_soon_threadsafe(stop_event.set)
            # Restore the original handler so a second Ctrl+C force-quits
            signal.signal(signal.SIGINT, original_sigint)

        signal.signal(signal.SIGINT, _on_sigint)
        await _main(args, stop_event)

    asyncio.run(_run())


if __name__ == "__main__":
    main()
