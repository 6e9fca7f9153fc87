"""
NotificationCenter — owns every event once a detector has produced it.

Responsibilities:
  - dedup by cause_key: a cause already shown in the current scope (the card on
    top of the discard pile) is never shown again; the set is cleared when the
    scope changes
  - stamp the kind-specific ttl and schedule a cancellable dismissal
  - at most one live event per kind; a newer one replaces the older and
    cancels its timer first, so a stale timer can never dismiss it early
  - hide_all() for the page-hidden signal, dismiss() for the close button and
    close() for teardown, all of which cancel the pending timer

Timers are asyncio TimerHandles; TimerHandle.cancel() guarantees the callback
does not run afterwards. Listeners are called synchronously with
(action, event, reason) where action is "shown" or "dismissed".
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Callable, Literal, Mapping

from whotnotify.events import Event, EventKind

logger = logging.getLogger(__name__)

Action = Literal["shown", "dismissed"]
Reason = Literal["shown", "expired", "dismissed", "replaced", "hidden", "closed", "reset"]
Listener = Callable[[Action, Event, Reason], None]

# Seconds on screen per kind. Warnings about opponents stay longest.
DEFAULT_TTLS: dict[EventKind, float] = {
    "penalty-issued": 4.0,
    "penalty-cleared": 4.0,
    "turn-skipped": 4.0,
    "general-market": 5.0,
    "draw": 3.0,
    "last-card": 5.0,
    "game-over": 5.0,
}


class NotificationCenter:
    def __init__(
        self,
        ttls: Mapping[EventKind, float] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._ttls: dict[EventKind, float] = {**DEFAULT_TTLS, **(ttls or {})}
        self._loop = loop
        self._live: dict[EventKind, Event] = {}
        self._timers: dict[EventKind, asyncio.TimerHandle] = {}
        self._emitted: set[str] = set()
        self._scope: str | None = None
        self._hidden = False
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------ #
    # Public API                                                           #
    # ------------------------------------------------------------------ #

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def enter_scope(self, scope_key: str | None) -> None:
        """Called once per snapshot with the identity of the discard-pile top."""
        if scope_key != self._scope:
            self._emitted.clear()
            self._scope = scope_key

    def submit(self, event: Event) -> Event | None:
        """
        Accept a candidate event. Returns the live event (with its ttl set), or
        None when it was a duplicate cause or the page is hidden.
        """
        if event.cause_key in self._emitted:
            logger.debug("Dropping duplicate %s (%s)", event.kind, event.cause_key)
            return None
        self._emitted.add(event.cause_key)

        if self._hidden:
            logger.debug("Page hidden; not showing %s", event.kind)
            return None

        if event.kind in self._live:
            self._remove(event.kind, "replaced")

        ttl = self.ttl_for(event.kind)
        live = dataclasses.replace(event, ttl=ttl)
        self._live[event.kind] = live
        self._timers[event.kind] = self._get_loop().call_later(ttl, self._expire, live)
        logger.debug("Showing %s for %.1fs: %s", live.kind, ttl, live.message)
        self._notify("shown", live, "shown")
        return live

    def dismiss(self, kind: EventKind) -> bool:
        """Close button. Returns False if nothing of that kind was live."""
        if kind not in self._live:
            return False
        self._remove(kind, "dismissed")
        return True

    def set_hidden(self, hidden: bool) -> None:
        """Page visibility changed. Hiding drops everything; showing replays nothing."""
        self._hidden = hidden
        if hidden:
            self.hide_all()

    def hide_all(self) -> None:
        for kind in list(self._live):
            self._remove(kind, "hidden")

    def clear(self) -> None:
        """Session restart: drop live events and forget every cause."""
        for kind in list(self._live):
            self._remove(kind, "reset")
        self._emitted.clear()
        self._scope = None

    def close(self) -> None:
        """Teardown. No timer fires after this returns."""
        for kind in list(self._live):
            self._remove(kind, "closed")
        self._listeners.clear()

    @property
    def live(self) -> dict[EventKind, Event]:
        return dict(self._live)

    @property
    def hidden(self) -> bool:
        return self._hidden

    def ttl_for(self, kind: EventKind) -> float:
        return self._ttls[kind]

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    # ------------------------------------------------------------------ #
    # Internal                                                             #
    # ------------------------------------------------------------------ #

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _expire(self, event: Event) -> None:
        # Only the event this timer was started for
        if self._live.get(event.kind) is event:
            self._timers.pop(event.kind, None)
            self._remove(event.kind, "expired")

    def _remove(self, kind: EventKind, reason: Reason) -> None:
        handle = self._timers.pop(kind, None)
        if handle is not None:
            handle.cancel()
        event = self._live.pop(kind, None)
        if event is not None:
            logger.debug("Dismissed %s (%s)", kind, reason)
            self._notify("dismissed", event, reason)

    def _notify(self, action: Action, event: Event, reason: Reason) -> None:
        for listener in list(self._listeners):
            listener(action, event, reason)
