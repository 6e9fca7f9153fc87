"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from whotnotify.events import EVENT_KINDS, EventKind
from whotnotify.notifications import DEFAULT_TTLS

# On-screen time a notification may be configured to
MIN_TTL = 3.0
MAX_TTL = 5.0


@dataclass
class NotificationConfig:
    ttls: dict[EventKind, float] = field(default_factory=lambda: dict(DEFAULT_TTLS))
    announce_game_over: bool = True


@dataclass
class SessionConfig:
    local_player_number: int = 1
    fallback_name: str = "Opponent"   # shown when a seat has no nickname
    replay_delay: float = 0.5         # seconds between snapshots in replay_main.py


@dataclass
class Config:
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    log_dir: str = "./logs"

    @property
    def log_dir_path(self) -> Path:
        return Path(self.log_dir)


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: fields are invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and adjust it."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        notif_raw = raw.get("notifications") or {}
        ttls = dict(DEFAULT_TTLS)
        for kind, seconds in (notif_raw.get("ttl") or {}).items():
            if kind not in EVENT_KINDS:
                raise ValueError(
                    f"notifications.ttl has unknown kind '{kind}'; expected one of {EVENT_KINDS}"
                )
            ttls[kind] = float(seconds)
        notifications = NotificationConfig(
            ttls=ttls,
            announce_game_over=bool(notif_raw.get("announce_game_over", True)),
        )

        session_raw = raw.get("session") or {}
        session = SessionConfig(
            local_player_number=int(session_raw.get("local_player_number", 1)),
            fallback_name=str(session_raw.get("fallback_name", "Opponent")),
            replay_delay=float(session_raw.get("replay_delay", 0.5)),
        )

        config = Config(
            notifications=notifications,
            session=session,
            log_dir=str(raw.get("log_dir", "./logs")),
        )
        _validate(config)
        return config

    except (AttributeError, KeyError, TypeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def load_config_or_default(path: str | Path = "config.yaml") -> Config:
    """Like load_config(), but a missing file just means defaults."""
    if not Path(path).exists():
        return Config()
    return load_config(path)


def _validate(config: Config) -> None:
    for kind, seconds in config.notifications.ttls.items():
        if not MIN_TTL <= seconds <= MAX_TTL:
            raise ValueError(
                f"notifications.ttl.{kind} must be between {MIN_TTL:g} and {MAX_TTL:g} seconds, "
                f"got {seconds}"
            )
    if config.session.local_player_number < 1:
        raise ValueError("session.local_player_number must be >= 1")
    if config.session.replay_delay < 0:
        raise ValueError("session.replay_delay must be >= 0")
