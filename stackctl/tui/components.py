"""Reusable UI components: styles and rich renderers used around the menu."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import questionary
from prompt_toolkit.styles import Style
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .items import Item, ItemKind

if TYPE_CHECKING:
    from rich.console import Console

    from ..settings import Settings
    from .registry import CommandRegistry


# ═══════════════════════════════════════════════════════════════════════════════
# BRAND STYLING
# ═══════════════════════════════════════════════════════════════════════════════

_BASE16 = (
    "#000000", "#800000", "#008000", "#808000", "#000080", "#800080", "#008080", "#c0c0c0",
    "#808080", "#ff0000", "#00ff00", "#ffff00", "#0000ff", "#ff00ff", "#00ffff", "#ffffff",
)
_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


def color_value(raw: str) -> str:
    """Translate a configured color into something prompt_toolkit accepts.

    "86" (xterm 256-color index) -> "#5fffd7"; hex and named colors pass through.
    """
    value = str(raw).strip()
    if not value.isdigit():
        return value
    index = int(value)
    if index < 16:
        return _BASE16[index]
    if index < 232:
        index -= 16
        r, g, b = index // 36, (index // 6) % 6, index % 6
        return "#{:02x}{:02x}{:02x}".format(_CUBE_LEVELS[r], _CUBE_LEVELS[g], _CUBE_LEVELS[b])
    if index < 256:
        level = 8 + (index - 232) * 10
        return "#{:02x}{:02x}{:02x}".format(level, level, level)
    return "default"


def menu_style(settings: Settings) -> Style:
    """prompt_toolkit style for the full-screen menu."""
    title = color_value(settings.STACK_CTL_TITLE_COLOR)
    item = color_value(settings.STACK_CTL_ITEM_COLOR)
    selected = color_value(settings.STACK_CTL_SELECTED_ITEM_COLOR)
    return Style.from_dict(
        {
            "title": f"fg:{title} bold",
            "item": f"fg:{item}",
            "selected": f"fg:{selected} bold",
            "description": "fg:#808080 italic",
            "spinner": f"fg:{title}",
            "prompt": "bold",
            "input": f"fg:{selected}",
            "filter": f"fg:{selected}",
            "status": "fg:#808080",
            "help": "fg:#626262",
            "empty": "fg:#808080 italic",
        }
    )


def brand_style(settings: Settings) -> questionary.Style:
    """questionary style for prompts shown after the menu released the terminal."""
    accent = color_value(settings.STACK_CTL_TITLE_COLOR)
    selected = color_value(settings.STACK_CTL_SELECTED_ITEM_COLOR)
    return questionary.Style([
        ("qmark", f"fg:{accent} bold"),
        ("question", "bold"),
        ("answer", f"fg:{selected} bold"),
        ("highlighted", f"fg:{accent} bold"),
        ("pointer", f"fg:{accent} bold"),
        ("selected", f"fg:{selected}"),
    ])


# ═══════════════════════════════════════════════════════════════════════════════
# PANELS
# ═══════════════════════════════════════════════════════════════════════════════

def render_executing(console: Console, choice: str, category: str) -> None:
    console.print(f"[bold cyan]▶[/bold cyan] Executing: [bold]{escape(choice)}[/bold] [dim]({escape(category)})[/dim]")


def render_result_panel(console: Console, message: str, stats: dict[str, str | int] | None = None) -> None:
    """Success panel for a command that changed something.

    `stats` rows are listed under the message; integers get thousands separators.
    """
    lines = [f"[bold green]✓ {escape(message)}[/bold green]"]
    if stats:
        lines.append("")
        for key, value in stats.items():
            shown = f"{value:,}" if isinstance(value, int) else escape(str(value))
            lines.append(f"  {key}: [cyan]{shown}[/cyan]")

    console.print(Panel.fit("\n".join(lines), border_style="green", title="Result"))
    console.print()


def render_error(console: Console, title: str, cause: str, action: str | None = None) -> None:
    """Error panel: what failed, why, and optionally what to do about it.

    Args:
        console: Rich Console for output
        title: Short description of what failed
        cause: Exception text or other explanation, printed verbatim
        action: Suggested next step
    """
    lines = [f"[bold red]✗ {escape(title)}[/bold red]", "", f"[yellow]Cause:[/yellow] {escape(cause)}"]
    if action:
        lines += ["", f"[dim]→ {escape(action)}[/dim]"]

    console.print(Panel.fit("\n".join(lines), border_style="red", title="Error"))
    console.print()


# ═══════════════════════════════════════════════════════════════════════════════
# MENU INTROSPECTION
# ═══════════════════════════════════════════════════════════════════════════════

_KIND_LABELS = {
    ItemKind.ACTION: "action",
    ItemKind.SUBMENU: "menu",
    ItemKind.DYNAMIC: "dynamic",
    ItemKind.PROMPT: "prompt",
    ItemKind.DETAIL: "detail",
}


def render_menu_tree(console: Console, root_title: str, items: Sequence[Item]) -> None:
    """Print the static menu hierarchy. Dynamic submenus are not expanded."""
    tree = Tree(f"[bold cyan]{escape(root_title)}[/bold cyan]")

    def _add(branch: Tree, children: Sequence[Item]) -> None:
        for item in children:
            label = f"{escape(item.title)} [dim]{_KIND_LABELS[item.kind]}[/dim]"
            if item.kind is ItemKind.PROMPT:
                label += f" [dim]({escape(', '.join(item.prompts))})[/dim]"
            node = branch.add(label)
            if item.kind is ItemKind.SUBMENU:
                _add(node, item.children)

    _add(tree, items)
    console.print(tree)


def render_routes_table(console: Console, registry: CommandRegistry) -> None:
    """Two-column table of registered categories and their handlers."""
    table = Table(title="[bold]Command Routes[/bold]", show_header=True, header_style="bold cyan")
    table.add_column("Category", style="bold")
    table.add_column("Handler", style="cyan")

    for category in registry.categories():
        handler = registry.lookup(category)
        table.add_row(escape(category), escape(getattr(handler, "__name__", None) or repr(handler)))

    console.print(table)
    console.print()


def confirm_destructive_action(message: str, settings: Settings, default: bool = False) -> bool:
    """Confirm a destructive action with explicit warning.

    Args:
        message: Confirmation message
        settings: Application settings (for styling)
        default: Default choice

    Returns:
        True if confirmed, False otherwise (including Ctrl+C)
    """
    answer = questionary.confirm(f"⚠  {message}", default=default, style=brand_style(settings)).ask()
    return bool(answer)
