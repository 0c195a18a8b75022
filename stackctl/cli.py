from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import logging as stack_logging
from .settings import load_settings
from .tui.components import (
    confirm_destructive_action,
    render_error,
    render_menu_tree,
    render_result_panel,
    render_routes_table,
)
from .tui.sections import build_menus, build_registry

app = typer.Typer(
    add_completion=False,
    help="stackctl: interactive menu for stack operations",
    rich_markup_mode="rich",
)
config_app = typer.Typer(add_completion=False, help="Inspect configuration")
logs_app = typer.Typer(add_completion=False, help="Inspect and manage diagnostic logs")
menu_app = typer.Typer(add_completion=False, help="Inspect the interactive menu")
app.add_typer(config_app, name="config")
app.add_typer(logs_app, name="logs")
app.add_typer(menu_app, name="menu")

console = Console()


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN CALLBACK
# ═══════════════════════════════════════════════════════════════════════════════

@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context):
    """
    [bold]stackctl[/bold]: navigate categorized actions and dispatch them.

    [dim]Run without arguments to launch the interactive menu.[/dim]

    [bold]Quick Commands:[/bold]
      stackctl config show     Effective settings
      stackctl logs show       Print the log file
      stackctl menu tree       Print the menu hierarchy
      stackctl menu routes     List command categories
    """
    if ctx.invoked_subcommand is None:
        _interactive_menu()
        raise typer.Exit(code=0)

    # Commands dispatched from the menu keep the menu's file-only logging.
    if not (ctx.obj or {}).get("embedded"):
        stack_logging.setup_logging(load_settings(), console=True)


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIG
# ═══════════════════════════════════════════════════════════════════════════════

@config_app.command("show", help="Show the effective settings")
def config_show():
    s = load_settings()
    table = Table(title="[bold]Settings[/bold]", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value", style="cyan")
    for key, value in sorted(s.model_dump().items()):
        table.add_row(key, str(value))
    console.print(table)


# ═══════════════════════════════════════════════════════════════════════════════
# LOGS
# ═══════════════════════════════════════════════════════════════════════════════

@logs_app.command("path", help="Print the log file path")
def logs_path():
    console.print(str(stack_logging.resolve_log_file(load_settings())))


@logs_app.command("show", help="Print the end of a log file")
def logs_show(
    lines: int = typer.Option(200, "--lines", "-n", help="Number of lines (0 = all)"),
    file: Optional[str] = typer.Option(None, "--file", help="Log file name inside the log directory"),
):
    s = load_settings()
    path = stack_logging.resolve_log_file(s)
    if file:
        path = path.parent / Path(file).name

    try:
        out = stack_logging.tail_log(path, lines)
    except FileNotFoundError:
        render_error(console, "Log file not found", str(path), "Run a command first, or check STACK_CTL_LOG_DIR")
        raise typer.Exit(code=1)

    console.print(f"[dim]{path}[/dim]\n")
    if not out:
        console.print("[dim](empty log)[/dim]")
    for line in out:
        console.print(line, markup=False, highlight=False)


@logs_app.command("clear", help="Delete rotated logs and truncate the current log")
def logs_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    s = load_settings()
    files = stack_logging.log_files(s)
    if not files:
        console.print("[yellow]No log files to clear.[/yellow]")
        return

    if not yes and not confirm_destructive_action(f"Clear {len(files)} log file(s)?", s):
        console.print("[dim]Cancelled.[/dim]")
        return

    cleared = stack_logging.clear_logs(s)
    render_result_panel(console, "Logs cleared", {"Files": cleared})


@logs_app.command("write", help="Write an operator note to the log")
def logs_write(
    level: str = typer.Argument(..., help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    message: str = typer.Argument(..., help="Message to log"),
):
    used = stack_logging.write_entry(level, message)
    console.print(f"[green]✓[/green] Logged at [cyan]{used}[/cyan]: {message}")


# ═══════════════════════════════════════════════════════════════════════════════
# MENU
# ═══════════════════════════════════════════════════════════════════════════════

@menu_app.command("tree", help="Print the menu hierarchy")
def menu_tree():
    s = load_settings()
    render_menu_tree(console, s.STACK_CTL_ROOT_TITLE, build_menus(s, console))


@menu_app.command("routes", help="List registered command categories")
def menu_routes():
    render_routes_table(console, build_registry(app))


# ═══════════════════════════════════════════════════════════════════════════════
# INTERACTIVE MENU
# ═══════════════════════════════════════════════════════════════════════════════

def _interactive_menu() -> None:
    """Run the full-screen menu and dispatch loop until the user quits."""
    from .tui.app import MenuUnavailable
    from .tui.dispatcher import Dispatcher

    settings = load_settings()
    stack_logging.setup_logging(settings, console=False)
    dispatcher = Dispatcher(
        console=console,
        settings=settings,
        registry=build_registry(app),
        menus=lambda: build_menus(settings, console),
    )

    try:
        dispatcher.run()
    except MenuUnavailable as exc:
        render_error(console, "Cannot start the interactive menu", str(exc), "Run stackctl from a terminal")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("\n[dim]👋 Interrupted. Goodbye![/]")


def main():
    app()
