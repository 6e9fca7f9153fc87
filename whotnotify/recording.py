"""
Snapshot recordings — one game-service payload per line (JSON Lines).

Lines may hold either the bare snapshot object or a WebSocket-style envelope
{"type": "snapshot", "state": {...}}. Blank lines and lines starting with '#'
are skipped. Lines that are not valid snapshots are logged and skipped so one
bad line doesn't end a replay.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import AsyncIterator, Iterator

from whotnotify.snapshot import GameStateSnapshot, SnapshotError

logger = logging.getLogger(__name__)


def parse_recording(text: str, source: str = "<recording>") -> Iterator[GameStateSnapshot]:
    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            payload = json.loads(line)
            if isinstance(payload, dict) and payload.get("type") == "snapshot":
                payload = payload.get("state")
            yield GameStateSnapshot.from_dict(payload)
        except (json.JSONDecodeError, SnapshotError) as exc:
            logger.warning("%s:%d: skipping line: %s", source, line_no, exc)


async def replay_recording(
    path: str | Path,
    delay: float = 0.0,
) -> AsyncIterator[GameStateSnapshot]:
    """Yield the snapshots of a recording, pausing `delay` seconds between them."""
    rec_path = Path(path)
    text = await asyncio.to_thread(rec_path.read_text, encoding="utf-8")
    first = True
    for snapshot in parse_recording(text, source=rec_path.name):
        if not first and delay > 0:
            await asyncio.sleep(delay)
        first = False
        yield snapshot
