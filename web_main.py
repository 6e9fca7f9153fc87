"""
Entry point for the notification WebSocket server.

Development (hot-reload):
    uv run python web_main.py

The browser client connects to ws://localhost:8000/ws/notifications?player=N
and forwards every game-service snapshot it receives.
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "whotnotify.web.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
