"""Help and shortcuts screen."""
from __future__ import annotations

from ..items import Item, detail_item

HELP_TEXT = """\
  Navigation
    ↑/↓ j/k      Move the cursor
    ←/→          Previous / next page
    g / G        First / last item
    Enter        Select
    /            Filter the current list
    Esc          Clear filter, or go back one level
    q  Ctrl+C    Quit

  Prompts
    Enter        Confirm the current value
    Esc          Cancel and return to the list
    Labels containing "password" hide what you type.

  After a command
    Enter        Return to the menu
    q            Quit

  Command line
    stackctl                 Interactive menu
    stackctl config show     Effective settings
    stackctl logs show       Print the log file
    stackctl menu tree       Print the menu hierarchy
    stackctl menu routes     List command categories"""


def menu() -> Item:
    return detail_item("Help", "Keyboard shortcuts and usage", lambda: ("Help", HELP_TEXT))
