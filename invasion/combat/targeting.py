"""Spatial targeting on the implicit tile grid.

There is no board object: positions are integer tiles and adjacency is the
four cardinal neighbours (no diagonals).
"""

from __future__ import annotations

from typing import Sequence

from invasion.core.enums import TurnAction
from invasion.core.models import CARDINAL_OFFSETS, Combatant, Position


def are_positions_adjacent(a: Position, b: Position) -> bool:
    """Manhattan distance of exactly 1."""
    return a.manhattan(b) == 1


def get_adjacent_positions(pos: Position) -> list[Position]:
    """The four cardinal neighbours: north, south, west, east."""
    return [pos + offset for offset in CARDINAL_OFFSETS]


def get_valid_move_targets(actor: Combatant, all_combatants: Sequence[Combatant]) -> list[Position]:
    """Adjacent tiles with non-negative coordinates not held by another living combatant."""
    if actor.position is None:
        return []

    occupied = {
        c.position
        for c in all_combatants
        if c.hp > 0 and c.id != actor.id and c.position is not None
    }
    return [
        p for p in get_adjacent_positions(actor.position)
        if p.x >= 0 and p.y >= 0 and p not in occupied
    ]


def get_valid_attack_targets(actor: Combatant, all_combatants: Sequence[Combatant]) -> list[Combatant]:
    """Living enemies standing next to the actor."""
    if actor.position is None:
        return []

    return [
        c for c in all_combatants
        if c.hp > 0
        and c.side != actor.side
        and c.position is not None
        and are_positions_adjacent(actor.position, c.position)
    ]


def get_available_actions(actor: Combatant, all_combatants: Sequence[Combatant]) -> list[TurnAction]:
    """Attack and move when they have targets; waiting is always possible."""
    actions: list[TurnAction] = []
    if get_valid_attack_targets(actor, all_combatants):
        actions.append(TurnAction.ATTACK)
    if get_valid_move_targets(actor, all_combatants):
        actions.append(TurnAction.MOVE)
    actions.append(TurnAction.WAIT)
    return actions
