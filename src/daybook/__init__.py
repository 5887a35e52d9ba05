"""daybook: day-scoped task lists with pinned carry-forward and a completion log."""

__version__ = "0.1.0"
