"""Navigator states, the events it consumes and the outcome it reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from .items import ArgsAction, Item, Producer


class NavState(str, Enum):
    BROWSING = "browsing"
    COLLECTING = "collecting"
    SHOWING_DETAIL = "showing_detail"
    LOADING = "loading"
    QUITTING = "quitting"


# ═══════════════════════════════════════════════════════════════════════════════
# EVENTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class KeyPress:
    """A key, named the way prompt_toolkit names it ("enter", "c-c", "q")."""

    key: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    """Spinner frame advance while a dynamic submenu is loading."""


@dataclass(frozen=True)
class Loaded:
    """Result of a dynamic submenu producer, posted back to the event loop."""

    title: str
    items: Sequence[Item]


@dataclass(frozen=True)
class LoadRequest:
    """Effect: run `producer` off the event loop and answer with `Loaded`."""

    title: str
    producer: Producer


# ═══════════════════════════════════════════════════════════════════════════════
# OUTCOME
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class PendingAction:
    """An action deferred until the full-screen renderer released the terminal."""

    action: ArgsAction
    args: list[str] = field(default_factory=list)

    def run(self) -> None:
        self.action(list(self.args))


@dataclass(frozen=True)
class Outcome:
    """What the navigator hands to the dispatcher once it is quitting.

    Attributes:
        choice: Title of the chosen item, empty on a plain quit
        category: Breadcrumb of the screen the choice was made on
        args: Values collected by a prompt sequence
        quitted: True when the user quit without choosing anything
        pending: Deferred action to run after the menu exits
    """

    choice: str = ""
    category: str = ""
    args: list[str] = field(default_factory=list)
    quitted: bool = False
    pending: PendingAction | None = None
