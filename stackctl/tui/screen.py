"""A Screen is one navigable list of items under a breadcrumb title."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .items import Item

SEPARATOR = "/"
DEFAULT_HEIGHT = 16
DEFAULT_WIDTH = 80


def breadcrumb(parent: str, title: str, root_title: str) -> str:
    """Title of a screen entered from `parent` through the item `title`.

    The root title is never part of a breadcrumb, so children of the root
    are titled by the item alone: "Vault", then "Vault/Secrets".
    """
    if parent == root_title:
        return title
    return f"{parent}{SEPARATOR}{title}"


@dataclass(eq=False)
class Screen:
    """Ordered, filterable and scrollable list of items.

    `cursor` indexes the filtered view, `offset` is the first visible row.
    Screens compare by identity; two screens with the same title are still
    different stack entries.
    """

    title: str
    items: list[Item] = field(default_factory=list)
    cursor: int = 0
    offset: int = 0
    height: int = DEFAULT_HEIGHT
    width: int = DEFAULT_WIDTH
    filter_text: str = ""
    filtering: bool = False

    @classmethod
    def of(cls, title: str, items: Sequence[Item]) -> Screen:
        return cls(title=title, items=list(items))

    # ── Filtering ───────────────────────────────────────────────────────────

    def visible(self) -> list[Item]:
        """Items matching the current filter (case-insensitive substring)."""
        if not self.filter_text:
            return list(self.items)
        needle = self.filter_text.lower()
        return [i for i in self.items if needle in i.filter_value.lower()]

    def start_filter(self) -> None:
        self.filtering = True

    def accept_filter(self) -> None:
        self.filtering = False
        self._clamp()

    def clear_filter(self) -> None:
        self.filter_text = ""
        self.filtering = False
        self._clamp()

    def type_filter(self, text: str) -> None:
        self.filter_text += text
        self.cursor = 0
        self.offset = 0

    def erase_filter(self) -> None:
        self.filter_text = self.filter_text[:-1]
        self._clamp()

    # ── Cursor / viewport ───────────────────────────────────────────────────

    def selected(self) -> Item | None:
        visible = self.visible()
        if not visible:
            return None
        return visible[min(self.cursor, len(visible) - 1)]

    def move(self, delta: int) -> None:
        self.cursor += delta
        self._clamp()

    def jump(self, index: int) -> None:
        self.cursor = index
        self._clamp()

    def set_size(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self._clamp()

    def page(self) -> list[tuple[int, Item]]:
        """(index, item) pairs inside the viewport."""
        visible = self.visible()
        end = self.offset + self.height
        return list(enumerate(visible))[self.offset:end]

    def _clamp(self) -> None:
        count = len(self.visible())
        if count == 0:
            self.cursor = 0
            self.offset = 0
            return
        self.cursor = max(0, min(self.cursor, count - 1))
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + self.height:
            self.offset = self.cursor - self.height + 1
        self.offset = max(0, min(self.offset, max(0, count - self.height)))
