"""
Snapshot history — the "previous" half of every snapshot pair.

The tracker keeps the last-observed value of each field the detectors compare.
Every field starts at SENTINEL, which no detector may read as a real value.

The cycle is always:
    previous = tracker.previous()      # detectors compare against this
    ...evaluate detectors...
    tracker.update(snapshot)           # unconditional, exactly once per snapshot
"""

from __future__ import annotations

from dataclasses import dataclass

from whotnotify.snapshot import Card, GameStateSnapshot, GameStatus

SENTINEL = -1


@dataclass(frozen=True)
class TrackedPrevious:
    """Last-observed values. Anything equal to SENTINEL (or top_card_seen=False) was never observed."""

    pending_penalty: int = SENTINEL
    current_player_index: int = SENTINEL
    deck_size: int = SENTINEL
    opponent_card_counts: tuple[int, ...] = ()
    top_card: Card | None = None
    top_card_seen: bool = False
    status: GameStatus | None = None

    def opponent_card_count(self, position: int) -> int:
        if 0 <= position < len(self.opponent_card_counts):
            return self.opponent_card_counts[position]
        return SENTINEL

    @property
    def top_card_key(self) -> str | None:
        return self.top_card.key if self.top_card else None


class SnapshotHistory:
    def __init__(self) -> None:
        self._previous = TrackedPrevious()

    def previous(self) -> TrackedPrevious:
        return self._previous

    def update(self, snapshot: GameStateSnapshot) -> None:
        # Opponents that vanished from the payload keep their last count;
        # seat order is stable for a game so positions never shift.
        counts = list(self._previous.opponent_card_counts)
        for position, opponent in enumerate(snapshot.opponents):
            if position < len(counts):
                counts[position] = opponent.card_count
            else:
                counts.append(opponent.card_count)

        self._previous = TrackedPrevious(
            pending_penalty=snapshot.pending_penalty,
            current_player_index=snapshot.current_player_index,
            deck_size=snapshot.deck_size,
            opponent_card_counts=tuple(counts),
            top_card=snapshot.top_card,
            top_card_seen=True,
            status=snapshot.status,
        )

    def reset(self) -> None:
        self._previous = TrackedPrevious()

    @property
    def has_observed(self) -> bool:
        return self._previous.current_player_index != SENTINEL
