"""
Game snapshots as published by the Whot game service, and the local player's seat.

The service never emits "something happened" messages — only complete
snapshots of the shared table. Everything else in this package is derived by
comparing two of these.

from_dict() accepts the service's camelCase JSON and raises SnapshotError for
payloads it cannot make sense of. Optional parts (top card, winner, opponents)
are allowed to be absent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Card ranks the detectors and the parser care about
GENERAL_MARKET_RANK = 14
WHOT_RANK = 20


class SnapshotError(ValueError):
    """Raised when a game-service payload cannot be turned into a snapshot."""


class GameStatus(str, Enum):
    WAITING = "WAITING"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"


@dataclass(frozen=True)
class Card:
    suit: str
    rank: int | str   # numeric ranks are normalised to int

    @property
    def key(self) -> str:
        """Identity used for dedup — two cards with the same suit and rank are the same fact."""
        return f"{self.suit}:{self.rank}"

    def __str__(self) -> str:
        return f"{self.rank} of {self.suit.title()}"


@dataclass(frozen=True)
class Opponent:
    nickname: str
    card_count: int


@dataclass(frozen=True)
class GameStateSnapshot:
    """Immutable view of the table at one point in time."""

    current_player_index: int
    pending_penalty: int
    deck_size: int
    opponents: tuple[Opponent, ...] = ()
    top_card: Card | None = None
    status: GameStatus = GameStatus.IN_PROGRESS
    winner_index: int | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> GameStateSnapshot:
        """
        Build a snapshot from the game service's JSON payload.

        Raises:
            SnapshotError: a required field is missing or has the wrong type.
        """
        if not isinstance(raw, dict):
            raise SnapshotError(f"Snapshot must be a JSON object, got {type(raw).__name__}")

        try:
            opponents = tuple(
                Opponent(
                    nickname=str(o.get("nickname") or "Opponent"),
                    card_count=_non_negative(o.get("cardCount", 0), "opponents[].cardCount"),
                )
                for o in raw.get("opponents") or []
            )
            snapshot = cls(
                current_player_index=_non_negative(raw["currentPlayerIndex"], "currentPlayerIndex"),
                pending_penalty=_non_negative(raw.get("pendingPenalty", 0), "pendingPenalty"),
                deck_size=_non_negative(raw.get("deckSize", 0), "deckSize"),
                opponents=opponents,
                top_card=_parse_card(raw.get("topCard")),
                status=_parse_status(raw.get("status", "IN_PROGRESS")),
                winner_index=_optional_int(raw.get("winnerIndex")),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise SnapshotError(f"Invalid snapshot structure: {exc}") from exc

        return snapshot


@dataclass(frozen=True)
class PlayerContext:
    """Who is looking at the table. local_player_number is 1-indexed."""

    local_player_number: int
    fallback_name: str = field(default="Opponent", compare=False)

    @property
    def local_seat(self) -> int:
        return self.local_player_number - 1

    def opponent_position(self, seat: int) -> int | None:
        """
        Map an absolute seat to its position in snapshot.opponents.

        The service lists every other seat in seat order with the local seat
        removed. Returns None for the local seat itself.
        """
        if seat < 0 or seat == self.local_seat:
            return None
        return seat if seat < self.local_seat else seat - 1

    def seat_of(self, position: int) -> int:
        """Inverse of opponent_position()."""
        return position if position < self.local_seat else position + 1

    def opponent_at(self, snapshot: GameStateSnapshot, seat: int) -> Opponent | None:
        position = self.opponent_position(seat)
        if position is None or position >= len(snapshot.opponents):
            return None
        return snapshot.opponents[position]

    def name_of(self, snapshot: GameStateSnapshot, seat: int) -> str:
        opponent = self.opponent_at(snapshot, seat)
        return opponent.nickname if opponent else self.fallback_name


# --------------------------------------------------------------------------- #
# Parsing helpers                                                              #
# --------------------------------------------------------------------------- #

def _non_negative(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise SnapshotError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"{name} must be an integer, got {value!r}") from exc
    if number < 0:
        raise SnapshotError(f"{name} must be >= 0, got {number}")
    return number


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return _non_negative(value, "winnerIndex")


def _parse_card(raw: Any) -> Card | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise SnapshotError(f"topCard must be an object or null, got {raw!r}")
    suit = str(raw.get("suit", "")).upper()
    # The service calls it "value"; older recordings use "rank"
    rank = raw.get("value", raw.get("rank"))
    if not suit or rank is None:
        raise SnapshotError(f"topCard needs a suit and a value, got {raw!r}")
    return Card(suit=suit, rank=_normalise_rank(rank))


def _normalise_rank(rank: Any) -> int | str:
    if isinstance(rank, int) and not isinstance(rank, bool):
        return rank
    text = str(rank).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    if text.upper() == "WHOT":
        return WHOT_RANK
    return text


def _parse_status(raw: Any) -> GameStatus:
    text = str(raw).strip().upper().replace(" ", "_")
    try:
        return GameStatus(text)
    except ValueError as exc:
        raise SnapshotError(f"Unknown game status: {raw!r}") from exc
