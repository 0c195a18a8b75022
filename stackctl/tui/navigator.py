"""Navigation stack and interaction state machine for the menu."""
from __future__ import annotations

import logging
from typing import Sequence

from .items import ArgsAction, Item, ItemKind, error_item
from .screen import Screen, breadcrumb
from .state import (
    KeyPress,
    Loaded,
    LoadRequest,
    NavState,
    Outcome,
    PendingAction,
    Resize,
    Tick,
)

logger = logging.getLogger(__name__)

ROOT_TITLE = "Stack Control CLI"

INTERRUPT = "c-c"
QUIT_KEYS = frozenset({"q", INTERRUPT})
BACK_KEYS = frozenset({"escape", "backspace"})
DETAIL_CLOSE_KEYS = frozenset({"escape", "backspace", "q"})

SPINNER_FRAMES = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")
MASK_CHAR = "•"

Event = KeyPress | Resize | Tick | Loaded


def is_password_label(label: str) -> bool:
    return "password" in label.lower()


def _is_text(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def run_producer(request: LoadRequest) -> Loaded:
    """Run a dynamic submenu producer, turning failures into an error item."""
    try:
        items = list(request.producer())
    except Exception as exc:
        logger.warning("Loading %r failed: %s", request.title, exc)
        items = [error_item(str(exc))]
    return Loaded(title=request.title, items=items)


def fetch_detail(item: Item) -> tuple[str, str]:
    """Run a detail fetcher, turning failures into an error body."""
    try:
        heading, body = item.fetcher()
    except Exception as exc:
        logger.warning("Fetching detail %r failed: %s", item.title, exc)
        return item.title, f"Error: {exc}"
    return heading, body


class Navigator:
    """Stack of screens plus the state machine that drives them.

    Events are processed one at a time through `update()`:

    - BROWSING: move the cursor, filter, enter submenus, go back, quit.
    - COLLECTING: edit the prompt buffer, confirm each label, cancel.
    - SHOWING_DETAIL: read-only text until closed.
    - LOADING: a dynamic submenu is being produced; only quit is honored.
    - QUITTING: terminal; the dispatcher reads `outcome()`.

    The root screen is never popped, so the stack is never empty.
    """

    def __init__(self, items: Sequence[Item], root_title: str = ROOT_TITLE):
        self.root_title = root_title
        self.stack: list[Screen] = [Screen.of(root_title, items)]
        self.state = NavState.BROWSING

        # Prompt collection
        self.prompts: list[str] = []
        self.args: list[str] = []
        self.input = ""
        self.masked = False

        # Detail view
        self.detail_heading = ""
        self.detail_body = ""

        # Dynamic submenu loading
        self.loading_label = ""
        self.spinner_frame = 0

        # Outcome
        self.choice = ""
        self.category = ""
        self.quitted = False
        self._action_with_args: ArgsAction | None = None
        self._pending: PendingAction | None = None
        self._size: tuple[int, int] | None = None

    # ── Stack ───────────────────────────────────────────────────────────────

    def push(self, screen: Screen) -> None:
        """Navigate to a new screen by pushing onto the stack."""
        if self._size is not None:
            screen.set_size(*self._size)
        self.stack.append(screen)

    def pop(self) -> Screen | None:
        """Go back to the previous screen.

        Returns:
            The screen that was popped, or None if at root
        """
        if len(self.stack) > 1:
            return self.stack.pop()
        return None

    def current(self) -> Screen:
        return self.stack[-1]

    def breadcrumbs(self) -> str:
        """Breadcrumb of the current screen, e.g. "Vault/Secrets"."""
        return self.current().title

    def depth(self) -> int:
        return len(self.stack)

    # ── Events ──────────────────────────────────────────────────────────────

    def update(self, event: Event) -> LoadRequest | None:
        """Process one event.

        Returns:
            A LoadRequest when a dynamic submenu must be produced; the caller
            runs it off the event loop and answers with a Loaded event.
        """
        if self.state is NavState.QUITTING:
            return None
        if isinstance(event, KeyPress):
            return self._on_key(event.key)
        if isinstance(event, Resize):
            self._resize(event.width, event.height)
        elif isinstance(event, Tick):
            if self.state is NavState.LOADING:
                self.spinner_frame = (self.spinner_frame + 1) % len(SPINNER_FRAMES)
        elif isinstance(event, Loaded):
            self._on_loaded(event)
        return None

    def _on_key(self, key: str) -> LoadRequest | None:
        if self.state is NavState.LOADING:
            if key in QUIT_KEYS:
                self.quit()
            return None

        if self.state is NavState.SHOWING_DETAIL:
            if key in DETAIL_CLOSE_KEYS:
                self.close_detail()
            elif key == INTERRUPT:
                self.quit()
            return None

        if self.state is NavState.COLLECTING:
            self._on_collect_key(key)
            return None

        return self._on_browse_key(key)

    def _on_browse_key(self, key: str) -> LoadRequest | None:
        screen = self.current()
        if screen.filtering:
            self._on_filter_key(screen, key)
            return None

        if key in QUIT_KEYS:
            self.quit()
        elif key in BACK_KEYS:
            if screen.filter_text:
                screen.clear_filter()
            else:
                self.pop()
        elif key == "enter":
            return self.activate()
        elif key in ("up", "k"):
            screen.move(-1)
        elif key in ("down", "j"):
            screen.move(1)
        elif key in ("pageup", "left"):
            screen.move(-screen.height)
        elif key in ("pagedown", "right"):
            screen.move(screen.height)
        elif key in ("home", "g"):
            screen.jump(0)
        elif key in ("end", "G"):
            screen.jump(len(screen.visible()) - 1)
        elif key == "/":
            screen.start_filter()
        return None

    def _on_filter_key(self, screen: Screen, key: str) -> None:
        if key == INTERRUPT:
            self.quit()
        elif key == "escape":
            screen.clear_filter()
        elif key == "enter":
            screen.accept_filter()
        elif key == "backspace":
            screen.erase_filter()
        elif key == "up":
            screen.move(-1)
        elif key == "down":
            screen.move(1)
        elif _is_text(key):
            screen.type_filter(key)

    def _on_collect_key(self, key: str) -> None:
        if key == INTERRUPT:
            self.quit()
        elif key == "enter":
            self.confirm()
        elif key == "escape":
            self.cancel()
        elif key == "backspace":
            self.input = self.input[:-1]
        elif _is_text(key):
            self.input += key

    def _resize(self, width: int, height: int) -> None:
        self._size = (width, height)
        for screen in self.stack:
            screen.set_size(width, height)

    # ── Transitions ─────────────────────────────────────────────────────────

    def activate(self) -> LoadRequest | None:
        """Activate the selected item of the current screen."""
        item = self.current().selected()
        if item is None:
            return None

        if item.kind is ItemKind.DETAIL:
            self.detail_heading, self.detail_body = fetch_detail(item)
            self.state = NavState.SHOWING_DETAIL
        elif item.kind is ItemKind.DYNAMIC:
            return self.request_load(item)
        elif item.kind is ItemKind.SUBMENU:
            title = breadcrumb(self.current().title, item.title, self.root_title)
            self.push(Screen.of(title, item.children))
        elif item.kind is ItemKind.PROMPT:
            self._begin_collecting(item)
        elif item.action is not None:
            self.choice = item.title
            self.category = self.current().title
            self.state = NavState.QUITTING
        # Read-only leaf: stay in the current menu.
        return None

    def request_load(self, item: Item) -> LoadRequest | None:
        """Start loading a dynamic submenu; only one load may be in flight."""
        if self.state is not NavState.BROWSING or item.producer is None:
            logger.debug("Ignoring load of %r in state %s", item.title, self.state.value)
            return None
        self.state = NavState.LOADING
        self.loading_label = item.title
        self.spinner_frame = 0
        return LoadRequest(title=item.title, producer=item.producer)

    def _on_loaded(self, event: Loaded) -> None:
        if self.state is not NavState.LOADING:
            logger.debug("Dropping late result for %r", event.title)
            return
        title = breadcrumb(self.current().title, event.title, self.root_title)
        self.push(Screen.of(title, event.items))
        self.loading_label = ""
        self.state = NavState.BROWSING

    def _begin_collecting(self, item: Item) -> None:
        self.state = NavState.COLLECTING
        self.prompts = list(item.prompts)
        self.args = []
        self.input = ""
        self.masked = is_password_label(self.prompts[0])
        self.choice = item.title
        self.category = self.current().title
        self._action_with_args = item.action_with_args

    def confirm(self) -> None:
        """Accept the current prompt value and advance or finish."""
        self.args.append(self.input)
        self.input = ""

        if len(self.args) < len(self.prompts):
            self.masked = is_password_label(self.prompts[len(self.args)])
            return

        if self._action_with_args is not None:
            self._pending = PendingAction(self._action_with_args, list(self.args))
            self._action_with_args = None
        self.masked = False
        self.state = NavState.QUITTING

    def cancel(self) -> None:
        """Abandon prompt collection and return to the list."""
        self.prompts = []
        self.args = []
        self.input = ""
        self.masked = False
        self.choice = ""
        self.category = ""
        self._action_with_args = None
        self.state = NavState.BROWSING

    def close_detail(self) -> None:
        self.detail_heading = ""
        self.detail_body = ""
        self.state = NavState.BROWSING

    def quit(self) -> None:
        """Quit without a selection."""
        self.choice = ""
        self.category = ""
        self.args = []
        self.input = ""
        self._action_with_args = None
        self._pending = None
        self.quitted = True
        self.state = NavState.QUITTING

    # ── Views ───────────────────────────────────────────────────────────────

    def current_prompt(self) -> str:
        if self.state is not NavState.COLLECTING or len(self.args) >= len(self.prompts):
            return ""
        return self.prompts[len(self.args)]

    def display_input(self) -> str:
        if self.masked:
            return MASK_CHAR * len(self.input)
        return self.input

    def spinner(self) -> str:
        return SPINNER_FRAMES[self.spinner_frame]

    def take_pending(self) -> PendingAction | None:
        """Hand out the deferred action; later calls return None."""
        pending, self._pending = self._pending, None
        return pending

    def outcome(self) -> Outcome:
        return Outcome(
            choice=self.choice,
            category=self.category,
            args=list(self.args),
            quitted=self.quitted,
            pending=self.take_pending(),
        )
