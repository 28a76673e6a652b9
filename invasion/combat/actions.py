"""Action execution — move, attack and wait.

Executors return ``(queue, result)`` and never advance the turn; callers
call ``advance_turn`` themselves. That keeps "what happened" apart from
"whose turn is next" so the same primitives serve player and AI turns.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from invasion.combat.resolver import resolve_combat
from invasion.core.enums import TurnAction
from invasion.core.models import ActionResult, Position, TurnQueue

logger = logging.getLogger(__name__)


def execute_move(queue: TurnQueue, actor_id: str, target: Position) -> tuple[TurnQueue, ActionResult]:
    """Place the actor on *target*. Validation is the caller's job."""
    combatants = tuple(
        replace(c, position=target) if c.id == actor_id else c
        for c in queue.combatants
    )
    logger.debug("Round %d: %s moves to %s", queue.round, actor_id, target)
    return (
        replace(queue, combatants=combatants),
        ActionResult(action=TurnAction.MOVE, actor_id=actor_id, target_position=target),
    )


def execute_attack(
    queue: TurnQueue,
    attacker_id: str,
    target_id: str,
    rng: Callable[[], float],
) -> tuple[TurnQueue, ActionResult]:
    """Roll an attack and apply the damage inside a new queue.

    Unknown attacker or target ids leave the queue untouched and return a
    result without a ``combat_result``.
    """
    attacker = queue.find(attacker_id)
    defender = queue.find(target_id)
    if attacker is None or defender is None:
        logger.debug("Attack %s -> %s ignored: combatant missing", attacker_id, target_id)
        return queue, ActionResult(action=TurnAction.ATTACK, actor_id=attacker_id, target_id=target_id)

    combat = resolve_combat(attacker, defender, rng)
    combatants = tuple(
        replace(c, hp=combat.defender_hp) if c.id == target_id else c
        for c in queue.combatants
    )

    if combat.hit:
        logger.info(
            "Round %d: %s hits %s for %d%s [roll %d, HP: %d/%d]",
            queue.round, attacker.name, defender.name, combat.damage,
            " CRIT!" if combat.critical else "",
            combat.roll, combat.defender_hp, defender.max_hp,
        )
    else:
        logger.info("Round %d: %s misses %s [roll %d]", queue.round, attacker.name, defender.name, combat.roll)

    return (
        replace(queue, combatants=combatants),
        ActionResult(
            action=TurnAction.ATTACK,
            actor_id=attacker_id,
            target_id=target_id,
            target_position=defender.position,
            combat_result=combat,
        ),
    )


def execute_wait(actor_id: str | None) -> ActionResult:
    return ActionResult(action=TurnAction.WAIT, actor_id=actor_id)
