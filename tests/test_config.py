import unittest
import uuid
from pathlib import Path

from whotnotify.config import Config, load_config, load_config_or_default
from whotnotify.notifications import DEFAULT_TTLS


class ConfigTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        path = Path(f".test_config_{uuid.uuid4().hex}.yaml")
        self.addCleanup(lambda: path.unlink(missing_ok=True))
        path.write_text(text, encoding="utf-8")
        return path

    def test_loads_ttls_and_session(self) -> None:
        path = self._write(
            "notifications:\n"
            "  ttl:\n"
            "    draw: 3.5\n"
            "  announce_game_over: false\n"
            "session:\n"
            "  local_player_number: 2\n"
            "  replay_delay: 0\n"
        )
        config = load_config(path)

        self.assertEqual(config.notifications.ttls["draw"], 3.5)
        self.assertEqual(config.notifications.ttls["last-card"], DEFAULT_TTLS["last-card"])
        self.assertFalse(config.notifications.announce_game_over)
        self.assertEqual(config.session.local_player_number, 2)
        self.assertEqual(config.session.replay_delay, 0.0)

    def test_empty_file_means_defaults(self) -> None:
        config = load_config(self._write(""))
        self.assertEqual(config.notifications.ttls, DEFAULT_TTLS)
        self.assertEqual(config.session.local_player_number, 1)

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(Path(f".missing_{uuid.uuid4().hex}.yaml"))

    def test_missing_file_falls_back_to_defaults(self) -> None:
        config = load_config_or_default(Path(f".missing_{uuid.uuid4().hex}.yaml"))
        self.assertEqual(config, Config())

    def test_unknown_kind_is_rejected(self) -> None:
        path = self._write("notifications:\n  ttl:\n    confetti: 4\n")
        with self.assertRaises(ValueError):
            load_config(path)

    def test_non_positive_ttl_is_rejected(self) -> None:
        path = self._write("notifications:\n  ttl:\n    draw: 0\n")
        with self.assertRaises(ValueError):
            load_config(path)

    def test_ttl_outside_three_to_five_seconds_is_rejected(self) -> None:
        for seconds in (2.9, 5.1, 30):
            with self.subTest(seconds=seconds):
                path = self._write(f"notifications:\n  ttl:\n    draw: {seconds}\n")
                with self.assertRaises(ValueError):
                    load_config(path)

    def test_ttl_range_is_inclusive(self) -> None:
        path = self._write("notifications:\n  ttl:\n    draw: 3\n    last-card: 5\n")
        config = load_config(path)

        self.assertEqual(config.notifications.ttls["draw"], 3.0)
        self.assertEqual(config.notifications.ttls["last-card"], 5.0)

    def test_invalid_player_number_is_rejected(self) -> None:
        path = self._write("session:\n  local_player_number: 0\n")
        with self.assertRaises(ValueError):
            load_config(path)

    def test_wrong_structure_is_a_value_error(self) -> None:
        path = self._write("notifications: [1, 2]\n")
        with self.assertRaises(ValueError):
            load_config(path)
