"""Exceptions raised at the outer edges of the engine.

The combat core itself is total: unknown ids and bad positions degrade to
no-ops. These errors are reserved for strict lookups and for building an
encounter from a layout that cannot host one.
"""

from __future__ import annotations


class InvasionError(Exception):
    """Base class for all invasion engine errors."""


class UnknownContentError(InvasionError, LookupError):
    """A strict content lookup found no definition for the given id."""

    def __init__(self, kind: str, content_id: str) -> None:
        super().__init__(f"Unknown {kind} definition: {content_id!r}")
        self.kind = kind
        self.content_id = content_id


class InvalidLayoutError(InvasionError, ValueError):
    """The dungeon layout cannot host an invasion (e.g. no altar room)."""
