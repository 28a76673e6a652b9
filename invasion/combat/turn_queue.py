"""Initiative scheduler — speed-ordered turn queue with a round lifecycle.

Order: speed descending; on equal speed defenders act before invaders.
Every function returns a new ``TurnQueue``; the input is never modified.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from invasion.core.enums import CombatantSide
from invasion.core.models import Combatant, CombatantStats, Position, TurnQueue

logger = logging.getLogger(__name__)


def create_combatant(
    combatant_id: str,
    side: CombatantSide,
    name: str,
    stats: CombatantStats,
    position: Position | None = None,
) -> Combatant:
    """Build a combatant for the turn queue. No validation beyond structure."""
    return Combatant(
        id=combatant_id,
        side=side,
        name=name,
        speed=stats.speed,
        hp=stats.hp,
        max_hp=stats.max_hp,
        attack=stats.attack,
        defense=stats.defense,
        has_acted=False,
        position=position,
    )


def _initiative_key(c: Combatant) -> tuple[int, int]:
    return (-c.speed, 0 if c.side == CombatantSide.DEFENDER else 1)


def _sorted_by_initiative(combatants: Iterable[Combatant]) -> tuple[Combatant, ...]:
    # sorted() is stable, so equal keys keep their input order
    return tuple(sorted(combatants, key=_initiative_key))


def build_turn_queue(combatants: Iterable[Combatant]) -> TurnQueue:
    """Sort combatants into initiative order and start round 1."""
    return TurnQueue(combatants=_sorted_by_initiative(combatants), current_index=0, round=1)


def _is_eligible(c: Combatant) -> bool:
    return c.hp > 0 and not c.has_acted


def _next_eligible_index(combatants: tuple[Combatant, ...], start: int) -> int:
    for i in range(start, len(combatants)):
        if _is_eligible(combatants[i]):
            return i
    return len(combatants)


def get_current_actor(queue: TurnQueue) -> Combatant | None:
    """First alive, not-yet-acted combatant at or after ``current_index``."""
    idx = _next_eligible_index(queue.combatants, queue.current_index)
    return queue.combatants[idx] if idx < len(queue.combatants) else None


def advance_turn(queue: TurnQueue) -> TurnQueue:
    """Mark the current actor as acted and move to the next eligible combatant."""
    current = _next_eligible_index(queue.combatants, queue.current_index)
    if current >= len(queue.combatants):
        return replace(queue, current_index=len(queue.combatants))

    combatants = tuple(
        replace(c, has_acted=True) if i == current else c
        for i, c in enumerate(queue.combatants)
    )
    for i in range(current + 1, len(combatants)):
        if _is_eligible(combatants[i]):
            return replace(queue, combatants=combatants, current_index=i)
    return replace(queue, combatants=combatants, current_index=len(combatants))


def is_round_complete(queue: TurnQueue) -> bool:
    """True once every alive combatant has acted."""
    return all(c.has_acted for c in queue.combatants if c.hp > 0)


def start_new_round(queue: TurnQueue) -> TurnQueue:
    """Drop the dead, reset ``has_acted``, re-sort by current speed."""
    survivors = [replace(c, has_acted=False) for c in queue.combatants if c.hp > 0]
    dropped = len(queue.combatants) - len(survivors)
    if dropped:
        logger.debug("Round %d: removed %d fallen combatants", queue.round + 1, dropped)
    return TurnQueue(
        combatants=_sorted_by_initiative(survivors),
        current_index=0,
        round=queue.round + 1,
    )


def get_alive_combatants(queue: TurnQueue) -> list[Combatant]:
    return [c for c in queue.combatants if c.hp > 0]
