"""stackctl: interactive menu navigator with category-based command dispatch."""

__version__ = "0.1.0"
