import unittest

from whotnotify.detectors import Transition, TurnSkipDetector
from whotnotify.events import TurnSkippedEvent
from whotnotify.history import SENTINEL, TrackedPrevious
from whotnotify.snapshot import Card, GameStateSnapshot, GameStatus, Opponent, PlayerContext


def _transition(
    previous_seat: int,
    current_seat: int,
    local_player_number: int,
    previous_top: Card | None = Card("STAR", 3),
    top: Card | None = Card("CIRCLE", 1),
    previous_status: GameStatus = GameStatus.IN_PROGRESS,
    status: GameStatus = GameStatus.IN_PROGRESS,
) -> Transition:
    previous = TrackedPrevious(
        pending_penalty=0,
        current_player_index=previous_seat,
        deck_size=20,
        top_card=previous_top,
        top_card_seen=previous_seat != SENTINEL,
        status=None if previous_seat == SENTINEL else previous_status,
    )
    current = GameStateSnapshot(
        current_player_index=current_seat,
        pending_penalty=0,
        deck_size=20,
        opponents=(Opponent("Ada", 4), Opponent("Bo", 4)),
        top_card=top,
        status=status,
    )
    return Transition(previous, current, PlayerContext(local_player_number))


class TurnSkipDetectorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.detector = TurnSkipDetector()

    def test_hold_on_at_a_table_of_two(self) -> None:
        # Seat 0 played Hold On and kept the turn; local seat 1 was next
        event, _ = self.detector.evaluate(_transition(0, 0, local_player_number=2), None)

        self.assertIsInstance(event, TurnSkippedEvent)
        self.assertEqual(event.message, "Hold On! Your turn was skipped.")
        self.assertEqual((event.from_seat, event.to_seat), (0, 0))

    def test_same_seat_and_same_top_card_is_no_transition(self) -> None:
        same = Card("CIRCLE", 1)
        event, _ = self.detector.evaluate(
            _transition(0, 0, local_player_number=2, previous_top=same, top=same), None
        )
        self.assertIsNone(event)

    def test_skip_at_a_table_of_three(self) -> None:
        event, _ = self.detector.evaluate(_transition(0, 2, local_player_number=2), None)
        self.assertIsInstance(event, TurnSkippedEvent)

    def test_normal_turn_pass_to_local_seat(self) -> None:
        event, _ = self.detector.evaluate(_transition(0, 1, local_player_number=2), None)
        self.assertIsNone(event)

    def test_local_seat_was_not_next(self) -> None:
        # 1 → 0: seat 1 is not (1 + 1) mod N for any N in 2..4
        event, _ = self.detector.evaluate(_transition(1, 0, local_player_number=2), None)
        self.assertIsNone(event)

    def test_sentinel_previous_never_fires(self) -> None:
        for current_seat in (0, 2, 3):
            with self.subTest(current_seat=current_seat):
                event, _ = self.detector.evaluate(
                    _transition(SENTINEL, current_seat, local_player_number=1, previous_top=None),
                    None,
                )
                self.assertIsNone(event)

    def test_local_player_holding_on_is_not_skipped(self) -> None:
        event, _ = self.detector.evaluate(_transition(1, 1, local_player_number=2), None)
        self.assertIsNone(event)

    def test_first_card_on_an_empty_discard_is_not_a_skip(self) -> None:
        # Seat 0 keeps the turn while the first card is turned over
        event, _ = self.detector.evaluate(
            _transition(0, 0, local_player_number=2, previous_top=None), None
        )
        self.assertIsNone(event)

    def test_deal_out_of_the_lobby_never_fires(self) -> None:
        event, _ = self.detector.evaluate(
            _transition(
                0, 0, local_player_number=2,
                previous_top=None, previous_status=GameStatus.WAITING,
            ),
            None,
        )
        self.assertIsNone(event)

    def test_final_snapshot_never_fires(self) -> None:
        event, _ = self.detector.evaluate(
            _transition(0, 2, local_player_number=2, status=GameStatus.FINISHED), None
        )
        self.assertIsNone(event)

    def test_seat_change_out_of_the_lobby_never_fires(self) -> None:
        event, _ = self.detector.evaluate(
            _transition(0, 2, local_player_number=2, previous_status=GameStatus.WAITING), None
        )
        self.assertIsNone(event)
