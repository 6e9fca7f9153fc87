"""
Rich-based CLI notification consumer.

This is the ONLY place where terminal output happens.
It translates notification events into formatted Rich output, and is wired to
a NotificationCenter as a listener so dismissals show up too.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from whotnotify.events import (
    DrawEvent,
    Event,
    GameOverEvent,
    GeneralMarketEvent,
    LastCardEvent,
    PenaltyClearedEvent,
    PenaltyIssuedEvent,
    TurnSkippedEvent,
)
from whotnotify.notifications import Action, Reason
from whotnotify.snapshot import GameStateSnapshot

console = Console(legacy_windows=False)

# Border colours mirror the browser client's notification cards
_STYLES: dict[str, str] = {
    "penalty-issued": "red",
    "penalty-cleared": "red",
    "turn-skipped": "blue",
    "general-market": "magenta",
    "draw": "cyan",
    "last-card": "yellow",
    "game-over": "green",
}


def on_notification(action: Action, event: Event, reason: Reason) -> None:
    """NotificationCenter listener."""
    if action == "shown":
        display_event(event)
    else:
        console.print(f"  [dim]× {event.kind} dismissed ({reason})[/]")


def display_event(event: Event) -> None:
    """Dispatch an event to the appropriate display function."""
    match event:
        case PenaltyIssuedEvent():
            title = "Penalty stacked" if event.stacked else "Penalty sent"
            _card(event, title, border="magenta" if event.stacked else None)
        case PenaltyClearedEvent():
            _card(event, "Penalty drawn", border="magenta" if event.cards_drawn > 3 else None)
        case TurnSkippedEvent():
            _card(event, "Hold On")
        case GeneralMarketEvent():
            _card(event, "General Market")
        case DrawEvent():
            console.print(f"  [cyan]🎴[/] {event.message}")
        case LastCardEvent():
            _card(event, "Last card!")
        case GameOverEvent():
            _game_over(event)


def display_snapshot(index: int, snapshot: GameStateSnapshot) -> None:
    """One dim status line per snapshot, so a replay can be followed."""
    hands = ", ".join(f"{o.nickname}:{o.card_count}" for o in snapshot.opponents) or "-"
    top = str(snapshot.top_card) if snapshot.top_card else "none"
    console.print(
        f"[dim]#{index:<4} seat {snapshot.current_player_index}  "
        f"deck {snapshot.deck_size:<3} penalty {snapshot.pending_penalty}  "
        f"top {top}  hands {hands}  [{snapshot.status.value.lower()}][/]",
        highlight=False,
    )


# --------------------------------------------------------------------------- #
# Display functions                                                            #
# --------------------------------------------------------------------------- #

def _card(event: Event, title: str, border: str | None = None) -> None:
    style = border or _STYLES.get(event.kind, "white")
    console.print(
        Panel(
            Text(event.message, style="bold"),
            title=f"[bold]{title}[/]",
            subtitle=f"[dim]{event.ttl:.0f}s[/]" if event.ttl else None,
            border_style=style,
            expand=False,
        )
    )


def _game_over(event: GameOverEvent) -> None:
    style = "bold green" if event.local_won else "bold red"
    console.print()
    console.print(
        Panel(
            f"[{style}]{event.message}[/]",
            title="[bold]Game Over[/]",
            border_style=style.replace("bold ", ""),
            expand=False,
        )
    )
