"""Top-level interactive loop: menu, command dispatch, acknowledgment."""
from __future__ import annotations

import logging
import os
import sys
import termios
import tty
from functools import partial
from typing import TYPE_CHECKING, Callable, Sequence, TextIO

from .app import run_menu as run_full_screen_menu
from .components import render_error, render_executing
from .navigator import Navigator
from .registry import CATEGORY_SEPARATOR, CommandRegistry, Handler
from .state import Outcome, PendingAction

if TYPE_CHECKING:
    from rich.console import Console

    from ..settings import Settings
    from .items import Item

logger = logging.getLogger(__name__)

RETURN_HINT = "\n⏎ Press Enter to return to menu, 'q' to quit: "

MenuRunner = Callable[[Navigator, "Settings"], Outcome]


def wait_for_return(console: Console, stream: TextIO | None = None) -> bool:
    """Wait for one keystroke after a command printed its output.

    Reads a single raw keystroke; `q`/`Q` ends the session, anything else
    (Enter, Esc, ...) returns to the menu. When the terminal cannot be put
    in raw mode the whole line is read instead and a line starting with `q`
    quits.

    Returns:
        True to return to the menu, False to quit
    """
    stream = stream or sys.stdin
    console.print(RETURN_HINT, end="")

    try:
        fd = stream.fileno()
        old_settings = termios.tcgetattr(fd)
    except (termios.error, AttributeError, OSError, ValueError):
        line = stream.readline()
        if not line:
            return False
        return not line.strip().lower().startswith("q")

    try:
        # TCSANOW keeps a key typed while the command was finishing.
        tty.setraw(fd, termios.TCSANOW)
        data = os.read(fd, 3)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        console.print()

    if not data:
        return False
    return data[:1] not in (b"q", b"Q")


def category_candidates(category: str, choice: str, root_title: str) -> list[str]:
    """Categories to try for a selection, most direct first.

    The screen breadcrumb is tried as-is, then with the chosen title appended
    for leaves registered one level deeper than their menu. Choices made on
    the root screen are looked up by title alone.
    """
    if not category or category == root_title:
        return [choice] if choice else []
    candidates = [category]
    if choice:
        candidates.append(f"{category}{CATEGORY_SEPARATOR}{choice}")
    return candidates


class Dispatcher:
    """Main interactive loop with category-based command dispatch.

    Each turn builds the root menu, runs the full-screen navigator until it
    quits, routes the selection to a registered handler, runs any deferred
    action once the renderer is gone, and optionally waits for the user to
    acknowledge the output before redrawing.
    """

    def __init__(
        self,
        console: Console,
        settings: Settings,
        registry: CommandRegistry,
        menus: Callable[[], Sequence[Item]],
        run_menu: MenuRunner = run_full_screen_menu,
        wait: Callable[[], bool] | None = None,
    ):
        """Initialize dispatcher with dependencies.

        Args:
            console: Rich Console for output
            settings: Application settings
            registry: Command registry, built once at startup
            menus: Builds the top-level menu items for each turn
            run_menu: Runs a navigator to completion and returns its outcome
            wait: Acknowledgment pause; True returns to the menu
        """
        self.console = console
        self.settings = settings
        self.registry = registry
        self.menus = menus
        self.run_menu = run_menu
        self.wait = wait or partial(wait_for_return, console)

    def run(self) -> None:
        """Run until the user quits from the menu or from the pause.

        Raises:
            MenuUnavailable: when the full-screen menu cannot start
        """
        while True:
            # Rebuilt every turn: the available categories may have changed.
            navigator = Navigator(self.menus(), root_title=self.settings.STACK_CTL_ROOT_TITLE)
            outcome = self.run_menu(navigator, self.settings)

            if outcome.quitted:
                break
            if not self.handle(outcome):
                break

        self.console.print("\n[dim]👋 Goodbye![/]")

    def handle(self, outcome: Outcome) -> bool:
        """Execute one selection.

        Returns:
            False when the user chose to quit at the acknowledgment pause
        """
        should_wait = False
        if outcome.choice:
            should_wait = self.execute_selection(outcome)

        if outcome.pending is not None:
            self.run_pending(outcome.pending)
            should_wait = True

        if should_wait:
            return self.wait()
        return True

    def resolve(self, category: str, choice: str) -> Handler | None:
        for candidate in category_candidates(category, choice, self.settings.STACK_CTL_ROOT_TITLE):
            handler = self.registry.lookup(candidate)
            if handler is not None:
                return handler
        return None

    def execute_selection(self, outcome: Outcome) -> bool:
        """Route a selection to its handler.

        Returns:
            Whether to pause for acknowledgment
        """
        self.console.clear()
        render_executing(self.console, outcome.choice, outcome.category)

        handler = self.resolve(outcome.category, outcome.choice)
        if handler is None:
            if outcome.pending is not None:
                # The deferred action is the whole behavior of this item.
                return False
            logger.warning("No command registered for %r (%s)", outcome.choice, outcome.category)
            render_error(
                self.console,
                "No command registered",
                f"'{outcome.choice}' in '{outcome.category}' has no handler",
                "Register a handler for this category",
            )
            return True

        logger.info("Dispatching %r (%s) args=%d", outcome.choice, outcome.category, len(outcome.args))
        try:
            return bool(handler(outcome.choice, list(outcome.args)))
        except Exception as exc:
            logger.exception("Command %r (%s) failed", outcome.choice, outcome.category)
            render_error(self.console, f"{outcome.choice} failed", str(exc))
            return True

    def run_pending(self, pending: PendingAction) -> None:
        """Run a deferred action; the full-screen renderer is already gone."""
        try:
            pending.run()
        except Exception as exc:
            logger.exception("Deferred action failed")
            render_error(self.console, "Action failed", str(exc))
