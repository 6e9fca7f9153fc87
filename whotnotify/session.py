"""
Notification session — the per-game orchestrator.

This module is UI-agnostic. It never prints and never touches the network;
it turns snapshots into events and hands them to the NotificationCenter.

One cycle per snapshot:
  1. every detector compares the tracker's previous values with the snapshot
  2. candidates go to the NotificationCenter (dedup, ttl, one per kind)
  3. the tracker takes the snapshot's values, unconditionally

Consumers:
  CLI   → replay_main.py + whotnotify/cli/display.py
  Web   → whotnotify/web/app.py (WebSocket)
  Tests → session.observe(snapshot) / async for event in session.watch(...)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncGenerator, AsyncIterator

from whotnotify.detectors import Detector, Transition, create_detectors, opponent_detectors
from whotnotify.events import Event
from whotnotify.history import SnapshotHistory
from whotnotify.notifications import NotificationCenter
from whotnotify.snapshot import GameStateSnapshot, GameStatus, PlayerContext

logger = logging.getLogger(__name__)


class NotificationSession:
    def __init__(
        self,
        context: PlayerContext,
        center: NotificationCenter | None = None,
        announce_game_over: bool = True,
    ) -> None:
        self.context = context
        self.center = center or NotificationCenter()
        self.history = SnapshotHistory()
        self._announce_game_over = announce_game_over
        self._detectors: list[Detector] = []
        self._states: dict[str, Any] = {}
        self._opponents_tracked = 0
        self._finished_seen = False
        self._install_detectors()

    # ------------------------------------------------------------------ #
    # Public API                                                           #
    # ------------------------------------------------------------------ #

    def observe(self, snapshot: GameStateSnapshot) -> list[Event]:
        """Run one cycle. Returns the events that actually went live."""
        if self._finished_seen and snapshot.status == GameStatus.WAITING:
            logger.info("New game in the lobby; resetting notification session")
            self.reset()

        self._track_opponents(len(snapshot.opponents))
        transition = Transition(
            previous=self.history.previous(),
            current=snapshot,
            context=self.context,
        )
        self.center.enter_scope(transition.top_card_key)

        shown: list[Event] = []
        for detector in self._detectors:
            event, self._states[detector.name] = detector.detect(
                transition, self._states[detector.name]
            )
            if event is None:
                continue
            live = self.center.submit(event)
            if live is not None:
                shown.append(live)

        self.history.update(snapshot)
        if snapshot.status == GameStatus.FINISHED:
            self._finished_seen = True
        return shown

    async def watch(
        self,
        snapshots: AsyncIterator[GameStateSnapshot],
        stop_event: asyncio.Event | None = None,
    ) -> AsyncGenerator[Event, None]:
        """
        Consume snapshots as they arrive, yielding every event that goes live.

        The generator completes when the source is exhausted or when
        stop_event is set.
        """
        async for snapshot in snapshots:
            if stop_event and stop_event.is_set():
                return
            for event in self.observe(snapshot):
                yield event

    def reset(self) -> None:
        """Forget everything: new game, new sentinels, new detector state."""
        self.history.reset()
        self.center.clear()
        self._opponents_tracked = 0
        self._finished_seen = False
        self._install_detectors()

    def state_of(self, detector_name: str) -> Any:
        return self._states[detector_name]

    @property
    def detectors(self) -> list[Detector]:
        return list(self._detectors)

    # ------------------------------------------------------------------ #
    # Internal                                                             #
    # ------------------------------------------------------------------ #

    def _install_detectors(self) -> None:
        self._detectors = create_detectors(self._announce_game_over)
        self._states = {d.name: d.initial_state() for d in self._detectors}

    def _track_opponents(self, count: int) -> None:
        # Seat order never changes mid-game, so positions only ever get added
        while self._opponents_tracked < count:
            for detector in opponent_detectors(self._opponents_tracked):
                self._detectors.append(detector)
                self._states[detector.name] = detector.initial_state()
            self._opponents_tracked += 1
