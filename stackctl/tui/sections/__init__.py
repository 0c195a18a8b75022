"""Built-in top-level menus and the handlers they dispatch to."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..registry import CommandRegistry
from . import help, system

if TYPE_CHECKING:
    import typer
    from rich.console import Console

    from ...settings import Settings
    from ..items import Item

__all__ = ["build_menus", "build_registry", "help", "system"]


def build_menus(settings: Settings, console: Console) -> list[Item]:
    """Top-level items of the root screen, in display order."""
    return [
        system.menu(settings, console),
        help.menu(),
    ]


def build_registry(app: typer.Typer) -> CommandRegistry:
    """Registry for every section, built once at startup."""
    return CommandRegistry().combine(system.commands(app))
