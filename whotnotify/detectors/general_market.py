"""
General Market (14) — every other seat draws one card.

Recognised by the deck shrinking by 1–4 cards in the same snapshot that
passed the turn on, with a 14 on top of the discard pile. The top card's
identity is remembered so the same unresolved 14 never fires twice.
"""

from __future__ import annotations

from dataclasses import dataclass

from whotnotify.detectors.base import Detection, Detector, Transition
from whotnotify.events import GeneralMarketEvent
from whotnotify.history import SENTINEL
from whotnotify.snapshot import GENERAL_MARKET_RANK, Card

# One card per other seat, for 2 to 4 opponents
MIN_DRAWN = 1
MAX_DRAWN = 4


@dataclass(frozen=True)
class GeneralMarketState:
    last_processed_card: Card | None = None
    shown_for_current_card: bool = False


class GeneralMarketDetector(Detector):
    name = "general-market"

    def initial_state(self) -> GeneralMarketState:
        return GeneralMarketState()

    def evaluate(self, transition: Transition, state: GeneralMarketState) -> Detection:
        top = transition.current.top_card
        if (
            top is not None
            and state.last_processed_card is not None
            and top.key != state.last_processed_card.key
        ):
            state = GeneralMarketState(last_processed_card=state.last_processed_card)

        previous_deck = transition.previous.deck_size
        current_deck = transition.current.deck_size
        acting = transition.acting_seat
        if previous_deck == SENTINEL or acting == SENTINEL:
            return None, state
        if top is None or top.rank != GENERAL_MARKET_RANK:
            return None, state
        if state.shown_for_current_card and state.last_processed_card == top:
            return None, state

        drawn = previous_deck - current_deck
        if (
            drawn > 0
            and acting != transition.current.current_player_index
            and acting != transition.local_seat
            and MIN_DRAWN <= drawn <= MAX_DRAWN
        ):
            player_name = transition.context.name_of(transition.current, acting)
            event = GeneralMarketEvent(
                message=(
                    f"{player_name} played 14 for General Market "
                    "so you get one extra card added"
                ),
                cause_key=f"general-market:{top.key}",
                player_name=player_name,
                cards_drawn=drawn,
            )
            return event, GeneralMarketState(last_processed_card=top, shown_for_current_card=True)

        return None, state
