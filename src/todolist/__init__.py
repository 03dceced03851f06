"""Task list manager with a persisted collection and an undoable delete window."""

__version__ = "0.1.0"
