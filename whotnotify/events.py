"""
Typed notification events — the shared language between the detectors and any consumer.

Detectors create these; the NotificationCenter owns them from then on. The CLI
display, the WebSocket broadcaster or a test consumes them.

All events are frozen (immutable) so they're safe to pass across async
boundaries and serialise to JSON via to_json_dict(). Every variant carries the
same envelope (message, cause_key, created_at, ttl) plus its own payload, and a
class-level `kind` tag so consumers can treat them uniformly.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Literal

EventKind = Literal[
    "penalty-issued",
    "penalty-cleared",
    "turn-skipped",
    "general-market",
    "draw",
    "last-card",
    "game-over",
]

EVENT_KINDS: tuple[EventKind, ...] = (
    "penalty-issued",
    "penalty-cleared",
    "turn-skipped",
    "general-market",
    "draw",
    "last-card",
    "game-over",
)


@dataclass(frozen=True)
class PenaltyIssuedEvent:
    """The local player just played (or stacked) a penalty card."""

    kind: ClassVar[EventKind] = "penalty-issued"

    message: str
    cause_key: str
    total: int        # cards the target now faces
    added: int        # cards this play added (== total for a fresh issue)
    stacked: bool
    target_name: str
    created_at: datetime = field(default_factory=datetime.now)
    ttl: float | None = None   # seconds; stamped by the NotificationCenter


@dataclass(frozen=True)
class PenaltyClearedEvent:
    """The local player drew the cards of a penalty aimed at them."""

    kind: ClassVar[EventKind] = "penalty-cleared"

    message: str
    cause_key: str
    cards_drawn: int
    created_at: datetime = field(default_factory=datetime.now)
    ttl: float | None = None


@dataclass(frozen=True)
class TurnSkippedEvent:
    """Hold On / Suspension jumped over the local seat."""

    kind: ClassVar[EventKind] = "turn-skipped"

    message: str
    cause_key: str
    from_seat: int
    to_seat: int
    created_at: datetime = field(default_factory=datetime.now)
    ttl: float | None = None


@dataclass(frozen=True)
class GeneralMarketEvent:
    """An opponent played General Market — every other seat draws one."""

    kind: ClassVar[EventKind] = "general-market"

    message: str
    cause_key: str
    player_name: str
    cards_drawn: int   # total taken from the deck across all other seats
    created_at: datetime = field(default_factory=datetime.now)
    ttl: float | None = None


@dataclass(frozen=True)
class DrawEvent:
    """An opponent drew from the deck outside the local player's turn."""

    kind: ClassVar[EventKind] = "draw"

    message: str
    cause_key: str
    player_name: str
    drawn: int
    hand_size: int
    created_at: datetime = field(default_factory=datetime.now)
    ttl: float | None = None


@dataclass(frozen=True)
class LastCardEvent:
    """An opponent is down to a single card."""

    kind: ClassVar[EventKind] = "last-card"

    message: str
    cause_key: str
    player_name: str
    created_at: datetime = field(default_factory=datetime.now)
    ttl: float | None = None


@dataclass(frozen=True)
class GameOverEvent:
    kind: ClassVar[EventKind] = "game-over"

    message: str
    cause_key: str
    winner_seat: int
    winner_name: str
    local_won: bool
    created_at: datetime = field(default_factory=datetime.now)
    ttl: float | None = None


# Union type for type-safe pattern matching in consumers
Event = (
    PenaltyIssuedEvent
    | PenaltyClearedEvent
    | TurnSkippedEvent
    | GeneralMarketEvent
    | DrawEvent
    | LastCardEvent
    | GameOverEvent
)


def to_json_dict(event: Event) -> dict[str, Any]:
    """Flatten an event into a JSON-ready dict, tagged with its kind and type."""
    data = dataclasses.asdict(event)
    data["created_at"] = event.created_at.isoformat()
    return {"type": type(event).__name__, "kind": event.kind, **data}
