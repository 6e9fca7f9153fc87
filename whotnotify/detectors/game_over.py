"""Announces the winner once, when the table switches to FINISHED."""

from __future__ import annotations

from whotnotify.detectors.base import Detection, Detector, Transition
from whotnotify.events import GameOverEvent
from whotnotify.snapshot import GameStatus


class GameOverDetector(Detector):
    name = "game-over"

    def evaluate(self, transition: Transition, state: None) -> Detection:
        current = transition.current
        previous_status = transition.previous.status
        if previous_status is None or previous_status == GameStatus.FINISHED:
            return None, state
        if current.status != GameStatus.FINISHED or current.winner_index is None:
            return None, state

        winner = current.winner_index
        local_won = winner == transition.local_seat
        winner_name = "You" if local_won else transition.context.name_of(current, winner)
        event = GameOverEvent(
            message="You won!" if local_won else f"{winner_name} won the game.",
            cause_key=f"game-over:{winner}",
            winner_seat=winner,
            winner_name=winner_name,
            local_won=local_won,
        )
        return event, state
