"""Full-screen menu application.

Feeds key, resize, tick and load-result events into the Navigator one at a
time on prompt_toolkit's event loop and renders whatever state it is in.
"""
from __future__ import annotations

import asyncio
import logging
import sys
import threading
from functools import partial
from typing import TYPE_CHECKING

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

from .components import menu_style
from .navigator import Event, Navigator, run_producer
from .state import KeyPress, Loaded, LoadRequest, NavState, Outcome, Resize, Tick

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)

TICK_INTERVAL = 0.1
# Rows used around the item list: title, filter, status and help lines.
CHROME_LINES = 8

NAMED_KEYS = (
    "enter",
    "escape",
    "backspace",
    "up",
    "down",
    "left",
    "right",
    "pageup",
    "pagedown",
    "home",
    "end",
    "c-c",
)

BROWSE_HELP = "↑/↓ navigate • enter select • / filter • esc back • q quit"
FILTER_HELP = "type to filter • enter apply • esc clear"
INPUT_HELP = "(enter to confirm, esc to back)"
DETAIL_HELP = "(esc/q to back)"


class MenuUnavailable(RuntimeError):
    """The terminal UI could not be started."""


class MenuApp:
    """prompt_toolkit host for a Navigator.

    Dynamic submenu producers run on a daemon thread and report back through
    `call_soon_threadsafe`, so the event loop keeps rendering the spinner and
    a producer that never returns cannot keep the process alive.
    """

    def __init__(
        self,
        navigator: Navigator,
        style: Style | None = None,
        tick_interval: float = TICK_INTERVAL,
    ):
        self.navigator = navigator
        self.tick_interval = tick_interval
        self._size: tuple[int, int] | None = None
        self._exited = False

        control = FormattedTextControl(self.render, show_cursor=False)
        self.app: Application[Outcome] = Application(
            layout=Layout(Window(content=control, wrap_lines=False)),
            key_bindings=self._bindings(),
            style=style,
            full_screen=True,
            mouse_support=False,
        )
        # Escape must not wait half a second for a possible sequence.
        self.app.ttimeoutlen = 0.05
        self.app.before_render += self._on_before_render

    def _bindings(self) -> KeyBindings:
        kb = KeyBindings()

        for name in NAMED_KEYS:
            kb.add(name)(partial(self._on_named_key, name))

        @kb.add(Keys.Any)
        def _(event: KeyPressEvent) -> None:
            # Unbound escape sequences (F1, ...) are not text.
            if event.data.startswith("\x1b"):
                return
            for char in event.data:
                self.post(KeyPress(char))

        @kb.add(Keys.BracketedPaste)
        def _(event: KeyPressEvent) -> None:
            for char in event.data:
                if char.isprintable():
                    self.post(KeyPress(char))

        return kb

    def _on_named_key(self, name: str, event: KeyPressEvent) -> None:
        self.post(KeyPress(name))

    # ── Event loop side ─────────────────────────────────────────────────────

    def post(self, event: Event) -> None:
        """Deliver one event to the navigator and react to the result."""
        if self._exited:
            return
        request = self.navigator.update(event)
        if request is not None:
            self._start_load(request)

        if self.navigator.state is NavState.QUITTING:
            self._exited = True
            self.app.exit(result=self.navigator.outcome())
            return
        self.app.invalidate()

    def _start_load(self, request: LoadRequest) -> None:
        loop = asyncio.get_running_loop()

        def work() -> None:
            loaded = run_producer(request)
            try:
                loop.call_soon_threadsafe(self._deliver, loaded)
            except RuntimeError:
                logger.debug("Menu closed before %r finished loading", request.title)

        threading.Thread(target=work, name=f"menu-load-{request.title}", daemon=True).start()
        self.app.create_background_task(self._spin())

    def _deliver(self, loaded: Loaded) -> None:
        self.post(loaded)

    async def _spin(self) -> None:
        while not self._exited and self.navigator.state is NavState.LOADING:
            await asyncio.sleep(self.tick_interval)
            self.post(Tick())

    def _on_before_render(self, app: Application) -> None:
        size = app.output.get_size()
        current = (size.columns, max(1, size.rows - CHROME_LINES))
        if current != self._size:
            self._size = current
            self.navigator.update(Resize(*current))

    # ── Rendering ───────────────────────────────────────────────────────────

    def render(self) -> StyleAndTextTuples:
        nav = self.navigator
        if nav.state is NavState.LOADING:
            return [
                ("", "\n  "),
                ("class:spinner", nav.spinner()),
                ("", " "),
                ("class:title", f"Loading {nav.loading_label}..."),
                ("", "\n"),
            ]

        if nav.state is NavState.SHOWING_DETAIL:
            return [
                ("", "\n  "),
                ("class:title", nav.detail_heading),
                ("", "\n\n"),
                ("", nav.detail_body),
                ("", "\n\n  "),
                ("class:help", DETAIL_HELP),
                ("", "\n"),
            ]

        if nav.state is NavState.COLLECTING:
            step = ""
            if len(nav.prompts) > 1:
                step = f" ({len(nav.args) + 1}/{len(nav.prompts)})"
            return [
                ("", "\n  "),
                ("class:title", nav.choice),
                ("class:status", step),
                ("", "\n\n  "),
                ("class:prompt", f"{nav.current_prompt()}: "),
                ("class:input", nav.display_input()),
                ("class:input", "▏"),
                ("", "\n\n  "),
                ("class:help", INPUT_HELP),
                ("", "\n"),
            ]

        if nav.state is NavState.QUITTING:
            return [("", "\n    Bye!\n")]

        return self._render_list()

    def _render_list(self) -> StyleAndTextTuples:
        screen = self.navigator.current()
        fragments: StyleAndTextTuples = [
            ("", "\n  "),
            ("class:title", screen.title),
            ("", "\n\n"),
        ]

        if screen.filtering or screen.filter_text:
            cursor = "▏" if screen.filtering else ""
            fragments += [("class:filter", f"  Filter: {screen.filter_text}{cursor}"), ("", "\n\n")]

        page = screen.page()
        if not page:
            fragments += [("class:empty", "    No items."), ("", "\n")]
        for index, item in page:
            label = f"{index + 1}. {item.title}"
            if index == screen.cursor:
                fragments.append(("class:selected", f"  > {label}"))
                if item.description:
                    fragments.append(("class:description", f"  {item.description}"))
            else:
                fragments.append(("class:item", f"    {label}"))
            fragments.append(("", "\n"))

        count = len(screen.visible())
        status = f"  {count} item" + ("" if count == 1 else "s")
        if count > screen.height:
            pages = (count + screen.height - 1) // screen.height
            status += f" • page {screen.offset // screen.height + 1}/{pages}"
        fragments += [
            ("", "\n"),
            ("class:status", status),
            ("", "\n  "),
            ("class:help", FILTER_HELP if screen.filtering else BROWSE_HELP),
            ("", "\n"),
        ]
        return fragments


def run_menu(navigator: Navigator, settings: Settings | None = None) -> Outcome:
    """Run the full-screen menu until the navigator quits.

    The renderer is torn down before this returns, so anything that prints or
    prompts on the real terminal can run afterwards.

    Raises:
        MenuUnavailable: when there is no terminal to draw on
    """
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise MenuUnavailable("the interactive menu needs a terminal (stdin/stdout are not a TTY)")

    style = menu_style(settings) if settings is not None else None
    menu = MenuApp(navigator, style=style)
    try:
        outcome = menu.app.run()
    except (EOFError, KeyboardInterrupt):
        navigator.quit()
        return navigator.outcome()
    except OSError as exc:
        raise MenuUnavailable(str(exc)) from exc

    if outcome is None:
        navigator.quit()
        return navigator.outcome()
    return outcome
