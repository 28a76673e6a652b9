"""Dungeon invasion engine: turn-based invasion encounters and their economy."""

__version__ = "0.1.0"
