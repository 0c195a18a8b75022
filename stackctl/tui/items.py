"""Menu items: the atomic nodes of the navigation tree.

Every item is a tagged variant. `kind` decides which payload slot is
populated, and construction fails when a payload does not belong to the kind:

- ACTION: optional `action`. Without one the item is a read-only leaf.
- SUBMENU: non-empty `children`.
- DYNAMIC: `producer`, called lazily when the item is selected.
- PROMPT: non-empty `prompts`, plus at most one of `action` /
  `action_with_args`. A multi-prompt is a PROMPT with several labels.
- DETAIL: `fetcher`, returning a `(heading, body)` pair.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

Action = Callable[[], None]
ArgsAction = Callable[[list[str]], None]
Producer = Callable[[], Sequence["Item"]]
DetailFetcher = Callable[[], "tuple[str, str]"]


class ItemError(ValueError):
    """Raised when an item's payload does not match its kind."""


class ItemKind(str, Enum):
    ACTION = "action"
    SUBMENU = "submenu"
    DYNAMIC = "dynamic"
    PROMPT = "prompt"
    DETAIL = "detail"


@dataclass(frozen=True)
class Item:
    title: str
    description: str = ""
    kind: ItemKind = ItemKind.ACTION
    children: tuple[Item, ...] = ()
    producer: Producer | None = None
    fetcher: DetailFetcher | None = None
    prompts: tuple[str, ...] = ()
    action: Action | None = None
    action_with_args: ArgsAction | None = None

    def __post_init__(self) -> None:
        allowed = _PAYLOADS[self.kind]
        for slot in _SLOTS:
            if slot not in allowed and getattr(self, slot):
                raise ItemError(f"{self.kind.value} item {self.title!r} cannot carry {slot}")

        if self.kind is ItemKind.SUBMENU and not self.children:
            raise ItemError(f"submenu {self.title!r} needs at least one child")
        if self.kind is ItemKind.DYNAMIC and self.producer is None:
            raise ItemError(f"dynamic item {self.title!r} needs a producer")
        if self.kind is ItemKind.DETAIL and self.fetcher is None:
            raise ItemError(f"detail item {self.title!r} needs a fetcher")
        if self.kind is ItemKind.PROMPT:
            if not self.prompts:
                raise ItemError(f"prompt item {self.title!r} needs at least one label")
            if self.action is not None and self.action_with_args is not None:
                raise ItemError(f"prompt item {self.title!r} has two actions")

    @property
    def filter_value(self) -> str:
        return self.title

    @property
    def actionable(self) -> bool:
        """Whether activating this item does anything at all."""
        return self.kind is not ItemKind.ACTION or self.action is not None


_SLOTS = ("children", "producer", "fetcher", "prompts", "action", "action_with_args")

_PAYLOADS: dict[ItemKind, frozenset[str]] = {
    ItemKind.ACTION: frozenset({"action"}),
    ItemKind.SUBMENU: frozenset({"children"}),
    ItemKind.DYNAMIC: frozenset({"producer"}),
    ItemKind.PROMPT: frozenset({"prompts", "action", "action_with_args"}),
    ItemKind.DETAIL: frozenset({"fetcher"}),
}


# ═══════════════════════════════════════════════════════════════════════════════
# FACTORIES
# ═══════════════════════════════════════════════════════════════════════════════

def dispatch() -> None:
    """Action marker: the selection is routed through the command registry."""


def action_item(title: str, description: str = "", action: Action | None = dispatch) -> Item:
    """Leaf item. Pass `action=None` for a read-only (informational) entry."""
    return Item(title=title, description=description, kind=ItemKind.ACTION, action=action)


def submenu_item(title: str, description: str, children: Sequence[Item]) -> Item:
    return Item(title=title, description=description, kind=ItemKind.SUBMENU, children=tuple(children))


def dynamic_item(title: str, description: str, producer: Producer) -> Item:
    """Item whose submenu is produced at selection time (e.g. fetched from an API)."""
    return Item(title=title, description=description, kind=ItemKind.DYNAMIC, producer=producer)


def detail_item(title: str, description: str, fetcher: DetailFetcher) -> Item:
    """Item that shows read-only `(heading, body)` content when selected."""
    return Item(title=title, description=description, kind=ItemKind.DETAIL, fetcher=fetcher)


def prompt_item(title: str, description: str, prompt: str, action: Action | None = dispatch) -> Item:
    return multi_prompt_item(title, description, [prompt], action)


def multi_prompt_item(
    title: str,
    description: str,
    prompts: Sequence[str],
    action: Action | None = dispatch,
) -> Item:
    return Item(
        title=title,
        description=description,
        kind=ItemKind.PROMPT,
        prompts=tuple(prompts),
        action=action,
    )


def prompt_item_with_args(
    title: str,
    description: str,
    prompts: Sequence[str],
    action: ArgsAction,
) -> Item:
    """Collect every prompt, then run `action(args)` once the menu has exited."""
    return Item(
        title=title,
        description=description,
        kind=ItemKind.PROMPT,
        prompts=tuple(prompts),
        action_with_args=action,
    )


def error_item(message: str) -> Item:
    """Non-actionable placeholder shown when a producer fails."""
    return action_item("Error", message, action=None)
