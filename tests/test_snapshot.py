import unittest

from whotnotify.snapshot import (
    Card,
    GameStateSnapshot,
    GameStatus,
    Opponent,
    PlayerContext,
    SnapshotError,
)


def _payload(**overrides) -> dict:
    base = {
        "currentPlayerIndex": 1,
        "pendingPenalty": 0,
        "deckSize": 30,
        "opponents": [{"nickname": "Ada", "cardCount": 5}],
        "topCard": {"suit": "star", "value": "14"},
        "status": "in_progress",
        "winnerIndex": None,
    }
    base.update(overrides)
    return base


class SnapshotParsingTests(unittest.TestCase):
    def test_from_dict_reads_camel_case_payload(self) -> None:
        snapshot = GameStateSnapshot.from_dict(_payload())

        self.assertEqual(snapshot.current_player_index, 1)
        self.assertEqual(snapshot.deck_size, 30)
        self.assertEqual(snapshot.opponents, (Opponent("Ada", 5),))
        self.assertEqual(snapshot.top_card, Card("STAR", 14))
        self.assertEqual(snapshot.status, GameStatus.IN_PROGRESS)
        self.assertIsNone(snapshot.winner_index)

    def test_optional_parts_may_be_missing(self) -> None:
        snapshot = GameStateSnapshot.from_dict({"currentPlayerIndex": 0})

        self.assertEqual(snapshot.opponents, ())
        self.assertIsNone(snapshot.top_card)
        self.assertEqual(snapshot.pending_penalty, 0)

    def test_whot_rank_is_normalised(self) -> None:
        snapshot = GameStateSnapshot.from_dict(_payload(topCard={"suit": "STAR", "value": "Whot"}))
        self.assertEqual(snapshot.top_card.rank, 20)

    def test_missing_player_index_raises(self) -> None:
        raw = _payload()
        del raw["currentPlayerIndex"]
        with self.assertRaises(SnapshotError):
            GameStateSnapshot.from_dict(raw)

    def test_negative_counts_are_rejected(self) -> None:
        with self.assertRaises(SnapshotError):
            GameStateSnapshot.from_dict(_payload(deckSize=-3))

    def test_unknown_status_is_rejected(self) -> None:
        with self.assertRaises(SnapshotError):
            GameStateSnapshot.from_dict(_payload(status="PAUSED"))

    def test_non_object_payload_is_rejected(self) -> None:
        with self.assertRaises(SnapshotError):
            GameStateSnapshot.from_dict(["not", "a", "snapshot"])

    def test_malformed_opponent_is_rejected(self) -> None:
        with self.assertRaises(SnapshotError):
            GameStateSnapshot.from_dict(_payload(opponents=["Ada"]))


class PlayerContextTests(unittest.TestCase):
    def test_opponent_positions_skip_the_local_seat(self) -> None:
        context = PlayerContext(local_player_number=2)   # seat 1

        self.assertEqual(context.opponent_position(0), 0)
        self.assertIsNone(context.opponent_position(1))
        self.assertEqual(context.opponent_position(2), 1)
        self.assertEqual(context.seat_of(1), 2)

    def test_name_of_falls_back_when_seat_unknown(self) -> None:
        context = PlayerContext(local_player_number=1, fallback_name="Someone")
        snapshot = GameStateSnapshot(
            current_player_index=0,
            pending_penalty=0,
            deck_size=10,
            opponents=(Opponent("Ada", 3),),
        )

        self.assertEqual(context.name_of(snapshot, 1), "Ada")
        self.assertEqual(context.name_of(snapshot, 3), "Someone")
        self.assertEqual(context.name_of(snapshot, 0), "Someone")
