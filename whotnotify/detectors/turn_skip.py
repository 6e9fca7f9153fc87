"""
Hold On / Suspension — "your turn was skipped".

The snapshot carries no player count, so the detector tries every table size
the game supports: if the local seat would have been next at a table of 2, 3
or 4 and the turn went elsewhere, the local player was skipped. Two table
sizes can disagree about who was next, so this is a best guess; an explicit
list of skipped seats from the service would make it exact.
"""

from __future__ import annotations

from whotnotify.detectors.base import Detection, Detector, Transition
from whotnotify.events import TurnSkippedEvent
from whotnotify.history import SENTINEL

TABLE_SIZES = (2, 3, 4)


class TurnSkipDetector(Detector):
    name = "turn-skip"

    def evaluate(self, transition: Transition, state: None) -> Detection:
        previous = transition.previous.current_player_index
        current = transition.current.current_player_index
        if previous == SENTINEL or not transition.in_play:
            return None, state
        # Same seat counts only when a card landed on a real discard top
        if previous == current and (
            transition.previous.top_card is None or not transition.top_card_changed
        ):
            return None, state

        local = transition.local_seat
        expected = {(previous + 1) % size for size in TABLE_SIZES}
        if local in expected and current != local:
            event = TurnSkippedEvent(
                message="Hold On! Your turn was skipped.",
                cause_key=f"turn-skipped:{previous}->{current}:{transition.top_card_key}",
                from_seat=previous,
                to_seat=current,
            )
            return event, state
        return None, state
