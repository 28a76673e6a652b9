"""AI decision policy for computer-controlled combatants.

Priority:
  1. Attack an adjacent enemy (lowest current HP first).
  2. Step one tile toward the nearest enemy along the axis with the larger
     distance (ties step along y). If that tile is blocked, try the other
     axis when it also closes distance.
  3. Wait.

The policy is fully deterministic; only the attack roll consumes RNG.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from invasion.combat.actions import execute_attack, execute_move, execute_wait
from invasion.combat.targeting import get_valid_attack_targets, get_valid_move_targets
from invasion.combat.turn_queue import get_current_actor
from invasion.core.enums import TurnAction
from invasion.core.models import ActionResult, Combatant, Position, TurnQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AiDecision:
    action: TurnAction
    target_id: str | None = None
    target_position: Position | None = None


_WAIT = AiDecision(action=TurnAction.WAIT)


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def step_toward(origin: Position, goal: Position) -> Position | None:
    """One tile from *origin* toward *goal* along the dominant axis (ties: y)."""
    dx = goal.x - origin.x
    dy = goal.y - origin.y
    if dx == 0 and dy == 0:
        return None
    if abs(dx) > abs(dy):
        return Position(origin.x + _sign(dx), origin.y)
    return Position(origin.x, origin.y + _sign(dy))


def _secondary_step(origin: Position, goal: Position) -> Position | None:
    """The step along the non-dominant axis, if it closes any distance."""
    dx = goal.x - origin.x
    dy = goal.y - origin.y
    if abs(dx) > abs(dy):
        return Position(origin.x, origin.y + _sign(dy)) if dy else None
    return Position(origin.x + _sign(dx), origin.y) if dx else None


def choose_step(actor: Combatant, goal: Position, all_combatants: Sequence[Combatant]) -> Position | None:
    """Pick a legal step toward *goal*, or ``None`` when both axes are blocked."""
    if actor.position is None:
        return None
    legal = set(get_valid_move_targets(actor, all_combatants))
    for step in (step_toward(actor.position, goal), _secondary_step(actor.position, goal)):
        if step is not None and step in legal:
            return step
    return None


def find_nearest_enemy(actor: Combatant, all_combatants: Sequence[Combatant]) -> Combatant | None:
    """Closest living, positioned enemy by Manhattan distance; ties keep enumeration order."""
    if actor.position is None:
        return None
    nearest: Combatant | None = None
    nearest_dist = 0
    for c in all_combatants:
        if c.hp <= 0 or c.side == actor.side or c.position is None:
            continue
        dist = actor.position.manhattan(c.position)
        if nearest is None or dist < nearest_dist:
            nearest = c
            nearest_dist = dist
    return nearest


def resolve_ai_action(actor: Combatant, all_combatants: Sequence[Combatant]) -> AiDecision:
    if actor.position is None:
        return _WAIT

    targets = get_valid_attack_targets(actor, all_combatants)
    if targets:
        weakest = targets[0]
        for t in targets[1:]:
            if t.hp < weakest.hp:
                weakest = t
        return AiDecision(action=TurnAction.ATTACK, target_id=weakest.id)

    enemy = find_nearest_enemy(actor, all_combatants)
    if enemy is not None and enemy.position is not None:
        step = choose_step(actor, enemy.position, all_combatants)
        if step is not None:
            return AiDecision(action=TurnAction.MOVE, target_position=step)

    return _WAIT


def execute_ai_turn(queue: TurnQueue, rng: Callable[[], float]) -> tuple[TurnQueue, ActionResult]:
    """Decide and apply the current actor's action. Does not advance the turn."""
    actor = get_current_actor(queue)
    if actor is None:
        return queue, execute_wait(None)

    decision = resolve_ai_action(actor, queue.combatants)
    logger.debug("Round %d: AI %s decides %s", queue.round, actor.id, decision.action)

    match decision.action:
        case TurnAction.ATTACK if decision.target_id is not None:
            return execute_attack(queue, actor.id, decision.target_id, rng)
        case TurnAction.MOVE if decision.target_position is not None:
            return execute_move(queue, actor.id, decision.target_position)
        case _:
            return queue, execute_wait(actor.id)
