"""
Abstract Detector interface and the Transition passed to each detector per cycle.

A detector is a pure function of (transition, state) -> (event | None, state).
Whatever it needs to remember between cycles lives in its own frozen state
record, which the session stores and hands back on the next call. Detectors
keep no mutable attributes of their own.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from whotnotify.events import Event
from whotnotify.history import SENTINEL, TrackedPrevious
from whotnotify.snapshot import GameStateSnapshot, GameStatus, PlayerContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """One snapshot pair, seen from the local player's seat."""

    previous: TrackedPrevious
    current: GameStateSnapshot
    context: PlayerContext

    @property
    def local_seat(self) -> int:
        return self.context.local_seat

    @property
    def acting_seat(self) -> int:
        """The seat whose turn it was before this snapshot — SENTINEL if never observed."""
        return self.previous.current_player_index

    @property
    def local_acted(self) -> bool:
        return self.acting_seat != SENTINEL and self.acting_seat == self.local_seat

    @property
    def in_play(self) -> bool:
        """Both snapshots were taken mid-game; false across the deal and the final snapshot."""
        return (
            self.previous.status is GameStatus.IN_PROGRESS
            and self.current.status is GameStatus.IN_PROGRESS
        )

    @property
    def is_my_turn(self) -> bool:
        return self.current.current_player_index == self.local_seat

    @property
    def top_card_key(self) -> str | None:
        return self.current.top_card.key if self.current.top_card else None

    @property
    def top_card_changed(self) -> bool:
        """True only when a previous top card was observed and the current one differs."""
        return self.previous.top_card_seen and self.previous.top_card_key != self.top_card_key


Detection = tuple[Event | None, Any]


class Detector(ABC):
    """Abstract base class for all snapshot-diff detectors."""

    name: str = "detector"

    def initial_state(self) -> Any:
        """State record at the start of a game session. Stateless detectors use None."""
        return None

    @abstractmethod
    def evaluate(self, transition: Transition, state: Any) -> Detection:
        """
        Compare the transition's previous and current values.

        Returns (event, new_state). event is None when nothing personally
        relevant happened. Implementations may raise on odd input; detect()
        turns that into "no event".
        """
        ...

    def detect(self, transition: Transition, state: Any) -> Detection:
        """evaluate(), made total: any fault means "insufficient information, suppress"."""
        try:
            event, new_state = self.evaluate(transition, state)
        except Exception:
            logger.warning("%s could not evaluate snapshot; suppressing", self.name, exc_info=True)
            return None, state
        if event is not None:
            logger.debug("%s fired %s: %s", self.name, event.kind, event.message)
        return event, new_state

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
