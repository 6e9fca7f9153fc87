"""
FastAPI application — the binding between the browser and the notification layer.

Exposes:
  GET  /api/config                 Notification ttls for the UI
  WS   /ws/notifications?player=N  Feed snapshots in, get notifications out

WebSocket protocol (JSON text frames):
  client → server
    {"type": "snapshot", "state": {...game service snapshot...}}
    {"type": "visibility", "hidden": true | false}
    {"type": "dismiss", "kind": "draw"}
    {"type": "reset"}
  server → client
    {"type": "shown", "event": {...}}
    {"type": "dismissed", "kind": "...", "reason": "expired" | "dismissed" | ...}
    {"type": "error", "message": "..."}

Each connection gets its own session: detector flags never leak between tabs.
"""

from __future__ import annotations

import asyncio
import json
import logging
import logging.handlers
from datetime import date, datetime
from pathlib import Path

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from whotnotify.config import load_config_or_default
from whotnotify.events import EVENT_KINDS, Event, to_json_dict
from whotnotify.notifications import Action, NotificationCenter, Reason
from whotnotify.session import NotificationSession
from whotnotify.snapshot import GameStateSnapshot, PlayerContext, SnapshotError

config = load_config_or_default()

# --------------------------------------------------------------------------- #
# Logging                                                                      #
# --------------------------------------------------------------------------- #

_LOG_FILE = config.log_dir_path / "whotnotify.log"
_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    handlers=[
        logging.StreamHandler(),                                   # server console
        logging.handlers.RotatingFileHandler(
            _LOG_FILE, maxBytes=2 * 1024 * 1024, backupCount=3,  # 2 MB × 3 files
            encoding="utf-8",
        ),
    ],
)
logger = logging.getLogger("whotnotify")


app = FastAPI(title="Whot Notifications")


def _to_json(data: dict) -> str:
    """json.dumps with datetime → ISO-string support."""
    def _default(obj: object) -> str:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
    return json.dumps(data, default=_default)


# --------------------------------------------------------------------------- #
# REST                                                                         #
# --------------------------------------------------------------------------- #

@app.get("/api/config")
def get_config():
    return {
        "ttls": dict(config.notifications.ttls),
        "announce_game_over": config.notifications.announce_game_over,
    }


# --------------------------------------------------------------------------- #
# WebSocket notifications                                                      #
# --------------------------------------------------------------------------- #

def _handle_message(msg: object, session: NotificationSession) -> dict | None:
    """Apply one client message. Returns an error payload, or None on success."""
    if not isinstance(msg, dict):
        return {"type": "error", "message": "Messages must be JSON objects"}

    match msg.get("type"):
        case "snapshot":
            try:
                snapshot = GameStateSnapshot.from_dict(msg.get("state"))
            except SnapshotError as exc:
                logger.warning("Rejected snapshot: %s", exc)
                return {"type": "error", "message": str(exc)}
            session.observe(snapshot)
        case "visibility":
            hidden = msg.get("hidden")
            if not isinstance(hidden, bool):
                return {"type": "error", "message": f"hidden must be true or false, got {hidden!r}"}
            session.center.set_hidden(hidden)
        case "dismiss":
            kind = msg.get("kind")
            if kind not in EVENT_KINDS:
                return {"type": "error", "message": f"Unknown notification kind: {kind!r}"}
            session.center.dismiss(kind)
        case "reset":
            session.reset()
        case other:
            return {"type": "error", "message": f"Unknown message type: {other!r}"}
    return None


@app.websocket("/ws/notifications")
async def notifications_ws(ws: WebSocket, player: int = 1) -> None:
    await ws.accept()

    if player < 1:
        await ws.send_text(_to_json({"type": "error", "message": "player must be >= 1"}))
        await ws.close()
        return

    outbox: asyncio.Queue[dict] = asyncio.Queue()

    def _on_notification(action: Action, event: Event, reason: Reason) -> None:
        if action == "shown":
            outbox.put_nowait({"type": "shown", "event": to_json_dict(event)})
        else:
            outbox.put_nowait({"type": "dismissed", "kind": event.kind, "reason": reason})

    center = NotificationCenter(ttls=config.notifications.ttls)
    center.subscribe(_on_notification)
    session = NotificationSession(
        PlayerContext(
            local_player_number=player,
            fallback_name=config.session.fallback_name,
        ),
        center,
        announce_game_over=config.notifications.announce_game_over,
    )
    logger.info("Notification session opened for player %d", player)

    async def _send_loop() -> None:
        while True:
            payload = await outbox.get()
            await ws.send_text(_to_json(payload))

    async def _receive_loop() -> None:
        try:
            while True:
                text = await ws.receive_text()
                try:
                    msg = json.loads(text)
                except json.JSONDecodeError:
                    outbox.put_nowait({"type": "error", "message": "Invalid JSON"})
                    continue
                error = _handle_message(msg, session)
                if error is not None:
                    outbox.put_nowait(error)
        except (WebSocketDisconnect, RuntimeError):
            pass

    send_task = asyncio.create_task(_send_loop())
    recv_task = asyncio.create_task(_receive_loop())
    try:
        # Sending only stops on a broken socket; receiving stops on disconnect.
        done, pending = await asyncio.wait(
            {send_task, recv_task}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
            try:
                await task
            except (asyncio.CancelledError, WebSocketDisconnect):
                pass

        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning("Notification socket for player %d failed: %s", player, exc)
    finally:
        center.close()
        logger.info("Notification session closed for player %d", player)
