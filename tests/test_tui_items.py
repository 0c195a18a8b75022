"""Unit tests for menu items."""
from __future__ import annotations

import pytest

from stackctl.tui.items import (
    Item,
    ItemError,
    ItemKind,
    action_item,
    detail_item,
    dispatch,
    dynamic_item,
    error_item,
    multi_prompt_item,
    prompt_item,
    prompt_item_with_args,
    submenu_item,
)


def test_factories_set_kind_and_payload():
    """Each factory produces the matching kind with its payload populated."""
    leaf = action_item("Status", "Check status")
    assert leaf.kind is ItemKind.ACTION
    assert leaf.action is dispatch

    menu = submenu_item("NetBird", "VPN", [leaf])
    assert menu.kind is ItemKind.SUBMENU
    assert menu.children == (leaf,)

    dynamic = dynamic_item("List", "List secrets", lambda: [leaf])
    assert dynamic.kind is ItemKind.DYNAMIC
    assert dynamic.producer is not None

    detail = detail_item("Policy", "Rules", lambda: ("Policy", "path {}"))
    assert detail.kind is ItemKind.DETAIL
    assert detail.fetcher() == ("Policy", "path {}")


def test_prompt_factories():
    """Single and multi prompts share the PROMPT kind."""
    single = prompt_item("Get", "Read a secret", "Key")
    assert single.kind is ItemKind.PROMPT
    assert single.prompts == ("Key",)

    multi = multi_prompt_item("From Remote", "SSH", ["Host", "User", "Path"])
    assert multi.prompts == ("Host", "User", "Path")

    def run(args):
        return None

    with_args = prompt_item_with_args("Login", "Auth", ["User", "Password"], run)
    assert with_args.action_with_args is run
    assert with_args.action is None


def test_error_item_is_not_actionable():
    """Producer failures become a read-only 'Error' entry."""
    item = error_item("connection refused")
    assert item.title == "Error"
    assert item.description == "connection refused"
    assert item.action is None
    assert not item.actionable


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": ItemKind.ACTION, "children": (action_item("x"),)},
        {"kind": ItemKind.SUBMENU, "children": (action_item("x"),), "producer": lambda: []},
        {"kind": ItemKind.DETAIL, "fetcher": lambda: ("a", "b"), "prompts": ("Key",)},
        {"kind": ItemKind.DYNAMIC, "producer": lambda: [], "action": dispatch},
    ],
)
def test_payload_inconsistent_with_kind_is_rejected(kwargs):
    """An item never carries a payload that belongs to another kind."""
    with pytest.raises(ItemError):
        Item(title="Broken", **kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": ItemKind.SUBMENU},
        {"kind": ItemKind.DYNAMIC},
        {"kind": ItemKind.DETAIL},
        {"kind": ItemKind.PROMPT},
        {"kind": ItemKind.PROMPT, "prompts": ("Key",), "action": dispatch, "action_with_args": lambda a: None},
    ],
)
def test_missing_or_conflicting_payload_is_rejected(kwargs):
    with pytest.raises(ItemError):
        Item(title="Broken", **kwargs)


def test_items_are_immutable():
    item = action_item("Status")
    with pytest.raises(AttributeError):
        item.title = "Other"  # type: ignore[misc]


def test_filter_value_is_title():
    assert action_item("Connect (up)", "Start VPN").filter_value == "Connect (up)"
