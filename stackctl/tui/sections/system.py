"""System section: settings, environment, logs and command routes."""
from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ... import logging as stack_logging
from ..items import (
    Item,
    action_item,
    detail_item,
    dynamic_item,
    prompt_item_with_args,
    submenu_item,
)
from ..registry import CliCommand, CommandRegistry

if TYPE_CHECKING:
    import typer
    from rich.console import Console

    from ...settings import Settings

CATEGORY_SYSTEM = "System"
CATEGORY_LOGS = "Logs"
CATEGORY_LOG_FILES = "Log Files"
CATEGORY_SHOW_LOG = "Show Log"
CATEGORY_CLEAR_LOGS = "Clear Logs"
CATEGORY_ROUTES = "Routes"

ENV_PREFIX = "STACK_CTL_"
SENSITIVE_MARKERS = ("PASSWORD", "TOKEN", "SECRET", "KEY")
DETAIL_TAIL_LINES = 40


def _settings_detail(settings: Settings):
    def fetch() -> tuple[str, str]:
        rows = [f"  {key} = {value}" for key, value in sorted(settings.model_dump().items())]
        return "Settings", "\n".join(rows)

    return fetch


def _mask(name: str, value: str) -> str:
    if any(marker in name.upper() for marker in SENSITIVE_MARKERS):
        return "•" * 8
    return value


def environment_items() -> list[Item]:
    """STACK_CTL_* environment variables as read-only detail items."""
    names = sorted(n for n in os.environ if n.startswith(ENV_PREFIX))
    if not names:
        return [action_item("No variables set", f"Export {ENV_PREFIX}* to override defaults", action=None)]

    items = []
    for name in names:
        value = _mask(name, os.environ.get(name, ""))
        items.append(detail_item(name, value, lambda n=name, v=value: (n, f"  {v}")))
    return items


def log_file_items(settings: Settings) -> list[Item]:
    """One entry per log file; selecting it prints the file."""
    files = stack_logging.log_files(settings)
    if not files:
        return [action_item("No log files", str(stack_logging.resolve_log_file(settings).parent), action=None)]
    return [action_item(p.name, f"{p.stat().st_size:,} bytes") for p in files]


def _log_tail_detail(settings: Settings):
    def fetch() -> tuple[str, str]:
        path = stack_logging.resolve_log_file(settings)
        lines = stack_logging.tail_log(path, DETAIL_TAIL_LINES)
        return str(path), "\n".join(f"  {line}" for line in lines) or "  (empty log)"

    return fetch


def menu(settings: Settings, console: Console) -> Item:
    """Top-level System menu."""

    def write_entry(args: list[str]) -> None:
        level, message = (args + ["", ""])[:2]
        used = stack_logging.write_entry(level, message)
        console.print(f"[green]✓[/green] Logged at [cyan]{used}[/cyan]: {message}")

    log_items = [
        action_item(CATEGORY_SHOW_LOG, "Print the current log file"),
        detail_item("Tail", "Last lines of the current log file", _log_tail_detail(settings)),
        dynamic_item(CATEGORY_LOG_FILES, "Pick a log file to print", lambda: log_file_items(settings)),
        prompt_item_with_args("Write Entry", "Add an operator note to the log", ["Level", "Message"], write_entry),
        action_item(CATEGORY_CLEAR_LOGS, "Delete rotated logs and truncate the current one"),
    ]

    items = [
        detail_item("Settings", "Show the effective configuration", _settings_detail(settings)),
        dynamic_item("Environment", f"List {ENV_PREFIX}* variables", environment_items),
        submenu_item(CATEGORY_LOGS, "Inspect and manage diagnostic logs", log_items),
        action_item(CATEGORY_ROUTES, "List registered command categories"),
    ]
    return submenu_item(CATEGORY_SYSTEM, "Configuration, environment and logs", items)


def commands(app: typer.Typer) -> CommandRegistry:
    """Handlers for the System section, keyed by category."""
    registry = CommandRegistry()
    registry.register(
        CliCommand(app, "logs", "show", pass_choice=False),
        CATEGORY_SYSTEM, CATEGORY_LOGS, CATEGORY_SHOW_LOG,
    )
    registry.register(
        CliCommand(app, "logs", "show", "--file"),
        CATEGORY_SYSTEM, CATEGORY_LOGS, CATEGORY_LOG_FILES,
    )
    registry.register(
        CliCommand(app, "logs", "clear", pass_choice=False),
        CATEGORY_SYSTEM, CATEGORY_LOGS, CATEGORY_CLEAR_LOGS,
    )
    registry.register(
        CliCommand(app, "menu", "routes", pass_choice=False),
        CATEGORY_SYSTEM, CATEGORY_ROUTES,
    )
    return registry
