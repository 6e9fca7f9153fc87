"""
Detector factory.

create_detectors() is the single entry point for the table-wide detectors;
opponent_detectors() builds the per-opponent pair for one position.

To add a new notification (e.g., "Whot demand changed"):
  1. Add its event variant to whotnotify/events.py
  2. Create whotnotify/detectors/<name>.py implementing Detector
  3. Add it to create_detectors() here
"""

from __future__ import annotations

from whotnotify.detectors.base import Detection, Detector, Transition
from whotnotify.detectors.game_over import GameOverDetector
from whotnotify.detectors.general_market import GeneralMarketDetector, GeneralMarketState
from whotnotify.detectors.hand_size import DrawDetector, LastCardDetector, LastCardState
from whotnotify.detectors.penalty import PenaltyDetector, PenaltyState
from whotnotify.detectors.turn_skip import TurnSkipDetector

__all__ = [
    "Detection",
    "Detector",
    "Transition",
    "PenaltyDetector",
    "PenaltyState",
    "TurnSkipDetector",
    "GeneralMarketDetector",
    "GeneralMarketState",
    "DrawDetector",
    "LastCardDetector",
    "LastCardState",
    "GameOverDetector",
    "create_detectors",
    "opponent_detectors",
]


def create_detectors(announce_game_over: bool = True) -> list[Detector]:
    detectors: list[Detector] = [
        PenaltyDetector(),
        TurnSkipDetector(),
        GeneralMarketDetector(),
    ]
    if announce_game_over:
        detectors.append(GameOverDetector())
    return detectors


def opponent_detectors(position: int) -> list[Detector]:
    return [DrawDetector(position), LastCardDetector(position)]
