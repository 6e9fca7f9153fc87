"""
Integration tests for the notification WebSocket.

Drives a real session through FastAPI's synchronous TestClient: snapshots go
in as JSON frames, notifications come back out as "shown" / "dismissed"
frames. Protocol errors must be reported without dropping the connection.
"""

import unittest

from fastapi.testclient import TestClient

from whotnotify.web import app as web_app


def _state(seat: int, deck: int, ada: int, top: dict | None) -> dict:
    return {
        "currentPlayerIndex": seat,
        "pendingPenalty": 0,
        "deckSize": deck,
        "opponents": [{"nickname": "Ada", "cardCount": ada}],
        "topCard": top,
        "status": "IN_PROGRESS",
    }


BEFORE = _state(0, 30, 5, {"suit": "CIRCLE", "value": 3})
GENERAL_MARKET = _state(1, 29, 4, {"suit": "STAR", "value": 14})


class ConfigEndpointTests(unittest.TestCase):
    def test_exposes_ttls(self) -> None:
        client = TestClient(web_app.app)
        response = client.get("/api/config")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIn("general-market", body["ttls"])
        self.assertIn("announce_game_over", body)


class NotificationSocketTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(web_app.app)

    def test_general_market_is_shown_then_hidden(self) -> None:
        with self.client.websocket_connect("/ws/notifications?player=2") as ws:
            ws.send_json({"type": "snapshot", "state": BEFORE})
            ws.send_json({"type": "snapshot", "state": GENERAL_MARKET})

            shown = ws.receive_json()
            self.assertEqual(shown["type"], "shown")
            self.assertEqual(shown["event"]["kind"], "general-market")
            self.assertEqual(shown["event"]["type"], "GeneralMarketEvent")
            self.assertEqual(
                shown["event"]["message"],
                "Ada played 14 for General Market so you get one extra card added",
            )

            ws.send_json({"type": "visibility", "hidden": True})
            dismissed = ws.receive_json()
            self.assertEqual(
                dismissed, {"type": "dismissed", "kind": "general-market", "reason": "hidden"}
            )

    def test_manual_dismiss(self) -> None:
        with self.client.websocket_connect("/ws/notifications?player=2") as ws:
            ws.send_json({"type": "snapshot", "state": BEFORE})
            ws.send_json({"type": "snapshot", "state": GENERAL_MARKET})
            self.assertEqual(ws.receive_json()["type"], "shown")

            ws.send_json({"type": "dismiss", "kind": "general-market"})
            self.assertEqual(ws.receive_json()["reason"], "dismissed")

    def test_protocol_errors_keep_the_socket_open(self) -> None:
        with self.client.websocket_connect("/ws/notifications?player=1") as ws:
            ws.send_text("{not json")
            self.assertEqual(ws.receive_json(), {"type": "error", "message": "Invalid JSON"})

            ws.send_json({"type": "confetti"})
            self.assertIn("Unknown message type", ws.receive_json()["message"])

            ws.send_json({"type": "dismiss", "kind": "confetti"})
            self.assertIn("Unknown notification kind", ws.receive_json()["message"])

            ws.send_json({"type": "snapshot", "state": {"deckSize": 3}})
            self.assertEqual(ws.receive_json()["type"], "error")

            # Still usable after the errors
            ws.send_json({"type": "reset"})
            ws.send_json({"type": "snapshot", "state": BEFORE})
            ws.send_json(["not", "an", "object"])
            self.assertEqual(
                ws.receive_json(),
                {"type": "error", "message": "Messages must be JSON objects"},
            )

    def test_visibility_needs_a_real_boolean(self) -> None:
        with self.client.websocket_connect("/ws/notifications?player=2") as ws:
            ws.send_json({"type": "snapshot", "state": BEFORE})
            ws.send_json({"type": "snapshot", "state": GENERAL_MARKET})
            self.assertEqual(ws.receive_json()["type"], "shown")

            ws.send_json({"type": "visibility", "hidden": "false"})
            error = ws.receive_json()
            self.assertEqual(error["type"], "error")
            self.assertIn("hidden must be true or false", error["message"])

            # The string was not taken as "hidden": the notification is still live
            ws.send_json({"type": "dismiss", "kind": "general-market"})
            self.assertEqual(
                ws.receive_json(),
                {"type": "dismissed", "kind": "general-market", "reason": "dismissed"},
            )

    def test_invalid_player_is_rejected(self) -> None:
        with self.client.websocket_connect("/ws/notifications?player=0") as ws:
            message = ws.receive_json()
        self.assertEqual(message["type"], "error")
