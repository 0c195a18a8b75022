"""TUI (Terminal User Interface) module for stackctl.

Provides the menu navigator, the command registry and the dispatch loop.
"""
from .dispatcher import Dispatcher
from .navigator import Navigator
from .registry import CliCommand, CommandRegistry
from .state import NavState, Outcome

__all__ = ["CliCommand", "CommandRegistry", "Dispatcher", "NavState", "Navigator", "Outcome"]
