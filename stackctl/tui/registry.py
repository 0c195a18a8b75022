"""Command registry: routes a menu selection to its handler by category."""
from __future__ import annotations

import logging
from typing import Callable, Iterator

import click
import typer

logger = logging.getLogger(__name__)

CATEGORY_SEPARATOR = "/"

Handler = Callable[[str, list[str]], bool]
"""Called with (choice, args); returns True when its output must be read."""


def category_of(*parts: str) -> str:
    """Join category parts: ("Vault", "Secrets", "Delete") -> "Vault/Secrets/Delete"."""
    if not parts:
        raise ValueError("at least one category part is required")
    return CATEGORY_SEPARATOR.join(parts)


class CommandRegistry:
    """Mapping of category paths to command handlers.

    Built once at startup and read-only afterwards. Lookups are prefix-based:
    a handler registered under "Vault/Secrets/Delete" answers for the
    selection "Vault/Secrets/Delete/my-secret", but not for
    "Vault/Secrets/List", and "Secrets/Delete" never answers for
    "Vault/Secrets/Delete" because the key must align with the start.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, handler: Handler | None, *parts: str) -> CommandRegistry:
        """Register `handler` under the category formed by `parts`.

        A None handler is ignored; registering a category again replaces the
        previous handler.
        """
        if handler is None:
            return self
        self._handlers[category_of(*parts)] = handler
        return self

    def command(self, *parts: str) -> Callable[[Handler], Handler]:
        """Decorator form of `register`.

        Usage:
            @registry.command("System", "Routes")
            def show_routes(choice, args):
                ...
        """
        category = category_of(*parts)

        def decorator(fn: Handler) -> Handler:
            self._handlers[category] = fn
            return fn

        return decorator

    def lookup(self, candidate: str) -> Handler | None:
        """Find the handler whose category is a prefix of `candidate`.

        When several categories match, the longest (most specific) wins.

        Returns:
            The handler, or None when nothing matches or `candidate` is empty
        """
        if not candidate:
            return None
        matches = [key for key in self._handlers if candidate.startswith(key)]
        if not matches:
            return None
        return self._handlers[max(matches, key=len)]

    def combine(self, other: CommandRegistry | None) -> CommandRegistry:
        """Merge `other` into this registry; its entries win on collision."""
        if other is None:
            return self
        for category, handler in other._handlers.items():
            if handler is None:
                continue
            self._handlers[category] = handler
        return self

    def categories(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, category: object) -> bool:
        return category in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(self.categories())


class CliCommand:
    """Handler that runs a typer sub-command in-process.

    The command line is `argv + [choice] + args`; pass `pass_choice=False`
    for leaves whose title is part of the category rather than an argument.
    The context object marks the run as embedded so the CLI callback leaves
    logging as the menu configured it.

    Example:
        CliCommand(app, "logs", "show", pass_choice=False)
    """

    def __init__(self, app: typer.Typer, *argv: str, pass_choice: bool = True):
        self.app = app
        self.argv = list(argv)
        self.pass_choice = pass_choice

    def command_line(self, choice: str, args: list[str]) -> list[str]:
        line = list(self.argv)
        if self.pass_choice and choice:
            line.append(choice)
        line.extend(args)
        return line

    def __call__(self, choice: str, args: list[str]) -> bool:
        line = self.command_line(choice, args)
        logger.info("Running command: %s", " ".join(line))
        command = typer.main.get_command(self.app)
        try:
            command.main(
                args=line,
                prog_name="stackctl",
                standalone_mode=False,
                obj={"embedded": True},
            )
        except click.exceptions.Exit:
            pass
        except click.exceptions.Abort:
            logger.info("Command aborted: %s", " ".join(line))
        except click.ClickException as exc:
            logger.warning("Command failed: %s: %s", " ".join(line), exc.format_message())
            exc.show()
        return True

    def __repr__(self) -> str:
        return f"CliCommand({' '.join(self.argv)!r}, pass_choice={self.pass_choice})"
