"""
Opponent hand-size detectors: cards drawn, and "last card".

Both watch one opponent position in snapshot.opponents; the session creates a
pair per opponent as they appear. A previous count of 0 or below is never a
real hand. It is either the tracker's sentinel or an empty hand before the
deal, so neither detector fires off it.
"""

from __future__ import annotations

from dataclasses import dataclass

from whotnotify.detectors.base import Detection, Detector, Transition
from whotnotify.events import DrawEvent, LastCardEvent


def _plural(count: int) -> str:
    return "card" if count == 1 else "cards"


class _OpponentDetector(Detector):
    kind_name = "opponent"

    def __init__(self, position: int) -> None:
        self.position = position
        self.name = f"{self.kind_name}[{position}]"

    def _sizes(self, transition: Transition) -> tuple[int, int] | None:
        """(previous, current) hand size, or None when this opponent is absent from the snapshot."""
        opponents = transition.current.opponents
        if self.position >= len(opponents):
            return None
        return (
            transition.previous.opponent_card_count(self.position),
            opponents[self.position].card_count,
        )


class DrawDetector(_OpponentDetector):
    kind_name = "draw"

    def evaluate(self, transition: Transition, state: None) -> Detection:
        sizes = self._sizes(transition)
        if sizes is None or transition.is_my_turn:
            return None, state
        previous, current = sizes
        if previous > 0 and current > previous:
            drawn = current - previous
            player_name = transition.current.opponents[self.position].nickname
            event = DrawEvent(
                message=(
                    f"{player_name} drew {drawn} {_plural(drawn)} from deck. "
                    f"Current hand: {current} {_plural(current)}."
                ),
                cause_key=(
                    f"draw:{self.position}:{previous}->{current}:{transition.top_card_key}"
                ),
                player_name=player_name,
                drawn=drawn,
                hand_size=current,
            )
            return event, state
        return None, state


@dataclass(frozen=True)
class LastCardState:
    shown_for_state: bool = False
    times_shown: int = 0   # distinguishes one drop to 1 from the next


class LastCardDetector(_OpponentDetector):
    kind_name = "last-card"

    def initial_state(self) -> LastCardState:
        return LastCardState()

    def evaluate(self, transition: Transition, state: LastCardState) -> Detection:
        sizes = self._sizes(transition)
        if sizes is None:
            return None, state
        previous, current = sizes

        if current != 1:
            return None, LastCardState(shown_for_state=False, times_shown=state.times_shown)

        if previous > 1 and not state.shown_for_state:
            player_name = transition.current.opponents[self.position].nickname
            times_shown = state.times_shown + 1
            event = LastCardEvent(
                message=f"{player_name} has only 1 card left! Be careful, they're about to win!",
                cause_key=f"last-card:{self.position}:{times_shown}",
                player_name=player_name,
            )
            return event, LastCardState(shown_for_state=True, times_shown=times_shown)

        return None, state
