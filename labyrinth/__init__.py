"""Labyrinth: random mazes for a blind solver."""

__version__ = "1.0.0"
