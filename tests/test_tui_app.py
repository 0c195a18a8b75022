"""Tests for the prompt_toolkit host of the navigator."""
from __future__ import annotations

import io
import time

import pytest
from prompt_toolkit.application import create_app_session
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from stackctl.tui.app import BROWSE_HELP, DETAIL_HELP, FILTER_HELP, MenuApp, MenuUnavailable, run_menu
from stackctl.tui.items import (
    action_item,
    detail_item,
    dynamic_item,
    multi_prompt_item,
    prompt_item,
    submenu_item,
)
from stackctl.tui.navigator import SPINNER_FRAMES, Navigator
from stackctl.tui.state import KeyPress, NavState, Resize, Tick


@pytest.fixture
def pipe_input():
    with create_pipe_input() as inp:
        with create_app_session(input=inp, output=DummyOutput()):
            yield inp


def _menu():
    return [
        submenu_item("NetBird", "VPN", [action_item("Status", "Check status")]),
        detail_item("Help", "Shortcuts", lambda: ("Help", "press q to quit")),
        dynamic_item("List", "Secrets", lambda: [action_item("ci")]),
        multi_prompt_item("Remote", "SSH", ["Host", "Password"]),
    ]


def _text(menu: MenuApp) -> str:
    return "".join(fragment[1] for fragment in menu.render())


def test_render_list(pipe_input):
    menu = MenuApp(Navigator(_menu()))
    text = _text(menu)

    assert "Stack Control CLI" in text
    assert "  > 1. NetBird" in text
    assert "VPN" in text
    assert "    2. Help" in text
    # Only the selected row shows its description.
    assert "Shortcuts" not in text
    assert "4 items" in text
    assert BROWSE_HELP in text


def test_render_filter_without_matches(pipe_input):
    nav = Navigator(_menu())
    menu = MenuApp(nav)
    for key in ("/", "z"):
        nav.update(KeyPress(key))

    text = _text(menu)
    assert "Filter: z" in text
    assert "No items." in text
    assert "0 items" in text
    assert FILTER_HELP in text


def test_render_paging_status(pipe_input):
    nav = Navigator([action_item(f"item-{i}") for i in range(20)])
    menu = MenuApp(nav)
    nav.update(Resize(80, 5))

    text = _text(menu)
    assert "20 items • page 1/4" in text
    assert "item-5" not in text


def test_render_detail(pipe_input):
    nav = Navigator(_menu())
    menu = MenuApp(nav)
    nav.current().jump(1)
    nav.update(KeyPress("enter"))

    text = _text(menu)
    assert "press q to quit" in text
    assert DETAIL_HELP in text


def test_render_loading(pipe_input):
    nav = Navigator(_menu())
    menu = MenuApp(nav)
    nav.current().jump(2)
    nav.update(KeyPress("enter"))

    text = _text(menu)
    assert "Loading List..." in text
    assert SPINNER_FRAMES[0] in text


def test_render_collecting_steps_and_masking(pipe_input):
    nav = Navigator(_menu())
    menu = MenuApp(nav)
    nav.current().jump(3)
    for key in ("enter", "h", "enter", "p", "w"):
        nav.update(KeyPress(key))

    text = _text(menu)
    assert "Remote (2/2)" in text
    assert "Password: ••" in text
    assert "pw" not in text


def test_post_updates_navigator(pipe_input):
    nav = Navigator(_menu())
    menu = MenuApp(nav)

    menu.post(KeyPress("down"))

    assert nav.current().cursor == 1
    assert nav.state is NavState.BROWSING


def test_post_exits_once_with_outcome(pipe_input, monkeypatch):
    nav = Navigator(_menu())
    menu = MenuApp(nav)
    results = []
    monkeypatch.setattr(menu.app, "exit", lambda result=None: results.append(result))

    menu.post(KeyPress("q"))
    menu.post(KeyPress("enter"))

    assert len(results) == 1
    assert results[0].quitted


def test_before_render_sizes_screens(pipe_input):
    nav = Navigator(_menu())
    menu = MenuApp(nav)

    menu._on_before_render(menu.app)

    # DummyOutput reports 40 rows by 80 columns.
    assert nav.current().width == 80
    assert nav.current().height == 40 - 8


def test_application_run_returns_selection(pipe_input):
    """Keys typed into the terminal select NetBird > Status."""
    nav = Navigator(_menu())
    menu = MenuApp(nav)
    pipe_input.send_text("\r\r")

    outcome = menu.app.run()

    assert outcome.choice == "Status"
    assert outcome.category == "NetBird"
    assert not outcome.quitted


def test_run_menu_requires_terminal(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO())
    with pytest.raises(MenuUnavailable):
        run_menu(Navigator(_menu()))


def test_dynamic_load_runs_off_the_event_loop(pipe_input, monkeypatch):
    """Keys typed while a producer runs are ignored; its result is browsable."""

    def producer():
        pipe_input.send_text("xj\r")
        time.sleep(0.3)
        return [action_item("ci"), action_item("prod")]

    nav = Navigator([dynamic_item("Secrets", "Pick a secret", producer)])
    menu = MenuApp(nav, tick_interval=0.02)
    deliver = menu._deliver
    ticks = []
    post = menu.post

    def deliver_then_select(loaded):
        deliver(loaded)
        pipe_input.send_text("j\r")

    def counting_post(event):
        if isinstance(event, Tick):
            ticks.append(event)
        post(event)

    monkeypatch.setattr(menu, "_deliver", deliver_then_select)
    monkeypatch.setattr(menu, "post", counting_post)
    pipe_input.send_text("\r")

    outcome = menu.app.run()

    assert outcome.choice == "prod"
    assert outcome.category == "Secrets"
    assert nav.depth() == 2
    assert ticks


def test_unbound_escape_sequences_are_not_typed(pipe_input):
    """F1 arrives as ESC O P; none of it reaches the prompt buffer."""
    nav = Navigator([prompt_item("Get", "Read a secret", "Key")])
    menu = MenuApp(nav)
    pipe_input.send_text("\r\x1bOPab\r")

    outcome = menu.app.run()

    assert outcome.choice == "Get"
    assert outcome.args == ["ab"]
