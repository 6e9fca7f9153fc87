"""
Pick Two / Pick Three penalties.

The pending penalty only grows on the turn of the player who played the card,
so "penalty went up while the local seat was acting" means the local player
issued (or stacked) it. A penalty dropping back to 0 means the acting seat
drew it; the local player hears about that only when the acting seat is
theirs and they did not issue it.
"""

from __future__ import annotations

from dataclasses import dataclass

from whotnotify.detectors.base import Detection, Detector, Transition
from whotnotify.events import PenaltyClearedEvent, PenaltyIssuedEvent
from whotnotify.history import SENTINEL

# Cards a single Pick Two / Pick Three adds to the pending penalty
PICK_TWO = 2
PICK_THREE = 3


@dataclass(frozen=True)
class PenaltyState:
    sent_by_me: bool = False
    issuer_seat: int | None = None   # seat that made the most recent increase


class PenaltyDetector(Detector):
    name = "penalty"

    def initial_state(self) -> PenaltyState:
        return PenaltyState()

    def evaluate(self, transition: Transition, state: PenaltyState) -> Detection:
        previous = transition.previous.pending_penalty
        current = transition.current.pending_penalty
        if previous == SENTINEL:
            return None, state

        if current > previous:
            issuer = transition.acting_seat if transition.acting_seat != SENTINEL else None
            if not transition.local_acted:
                # Someone else raised it; whoever clears it next may be us
                return None, PenaltyState(sent_by_me=False, issuer_seat=issuer)
            target = transition.context.name_of(
                transition.current, transition.current.current_player_index
            )
            event = PenaltyIssuedEvent(
                message=issued_message(previous, current, target),
                cause_key=f"penalty-issued:{previous}->{current}:{transition.top_card_key}",
                total=current,
                added=current - previous,
                stacked=previous > 0,
                target_name=target,
            )
            return event, PenaltyState(sent_by_me=True, issuer_seat=issuer)

        if current == 0 and previous > 0:
            if state.sent_by_me:
                # The issuer already saw the issue notification
                return None, PenaltyState()
            if not transition.local_acted:
                # A third seat drew someone else's penalty
                return None, PenaltyState()
            issuer_name = (
                transition.context.name_of(transition.current, state.issuer_seat)
                if state.issuer_seat is not None
                else transition.context.fallback_name
            )
            event = PenaltyClearedEvent(
                message=cleared_message(previous, issuer_name),
                cause_key=f"penalty-cleared:{previous}:{transition.top_card_key}",
                cards_drawn=previous,
            )
            return event, PenaltyState()

        return None, state


def issued_message(previous: int, current: int, target: str) -> str:
    """Phrase a fresh issue (previous == 0) or a stack (previous > 0)."""
    if previous == 0:
        if current == PICK_TWO:
            return f"Pick 2 sent! {target} must draw 2 cards or block with another Pick 2."
        if current == PICK_THREE:
            return f"Pick 3 sent! {target} must draw 3 cards or block with another Pick 3."
        return f"Penalty sent! {target} must draw {current} cards or block."

    added = current - previous
    family = _stack_family(previous, added)
    if family is not None:
        return f"You blocked with Pick {family}! {target} now faces {current} cards total!"
    # Unknown progression: still tell the player what happened
    return f"You stacked +{added}! {target} now faces {current} cards total!"


def _stack_family(previous: int, added: int) -> int | None:
    """Which Pick family a stack belongs to: 2 (2,4,6,8,…), 3 (3,6,9,12,…) or None."""
    if added == PICK_TWO and previous >= PICK_TWO and previous % PICK_TWO == 0:
        return PICK_TWO
    if added == PICK_THREE and previous >= PICK_THREE and previous % PICK_THREE == 0:
        return PICK_THREE
    return None


def cleared_message(previous: int, issuer_name: str) -> str:
    match previous:
        case 2:
            return f"You drew 2 cards from {issuer_name}'s Pick 2."
        case 3:
            return f"You drew 3 cards from {issuer_name}'s Pick 3."
        case 4:
            return "You drew 4 cards from stacked Pick 2's! (2+2)"
        case 6:
            return "You drew 6 cards from stacked Pick 3's! (3+3)"
        case _:
            noun = "card" if previous == 1 else "cards"
            return f"You drew {previous} {noun} from stacked penalties!"
