"""Invasion state machine — altar HP, turn counter, end conditions, results.

States: active -> ended (exactly one end reason). ``check_invasion_end`` is
evaluated after every state-changing step, in strict priority order:

  1. altar_destroyed          altar HP reached 0
  2. objectives_completed     enough secondary objectives done
  3. all_invaders_eliminated  every invader is down (true for an empty party)
  4. turn_limit_reached       current turn >= max turns

Losing conditions are checked first, so a dead altar beats a dead party.
All mutators are pure and return a new ``InvasionState``.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Iterable

from invasion.core.enums import InvasionEndReason, InvasionOutcome, ObjectiveType
from invasion.core.models import InvaderInstance
from invasion.systems.objectives import InvasionObjective, resolve_outcome
from invasion.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

ALTAR_MAX_HP = 100
MAX_TURNS = 30
SECONDARY_OBJECTIVES_FOR_VICTORY = 2


@dataclass(frozen=True, slots=True)
class InvasionState:
    invasion_id: str
    current_turn: int
    max_turns: int
    altar_hp: int
    altar_max_hp: int
    invaders: tuple[InvaderInstance, ...]
    objectives: tuple[InvasionObjective, ...]
    defender_count: int
    defenders_lost: int = 0
    invaders_killed: int = 0
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class DetailedInvasionResult:
    """Terminal, read-only summary of an invasion."""

    invasion_id: str
    day: int
    outcome: InvasionOutcome
    end_reason: InvasionEndReason
    turns_taken: int
    invader_count: int
    invaders_killed: int
    defender_count: int
    defenders_lost: int
    objectives_completed: int
    objectives_total: int
    reward_multiplier: float


@dataclass(frozen=True, slots=True)
class InvasionHistoryEntry:
    """Log record kept on the invasion schedule.

    Special invasions are logged when they trigger, before any combat, so the
    combat fields are optional.
    """

    day: int
    type: str = "scheduled"
    outcome: InvasionOutcome | None = None
    end_reason: InvasionEndReason | None = None
    invader_count: int | None = None
    invaders_killed: int | None = None
    defender_count: int | None = None
    defenders_lost: int | None = None
    turns_taken: int | None = None


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def create_invasion_state(
    invaders: Iterable[InvaderInstance],
    objectives: Iterable[InvasionObjective],
    defender_count: int,
    invasion_id: str | None = None,
    max_turns: int = MAX_TURNS,
    altar_max_hp: int = ALTAR_MAX_HP,
) -> InvasionState:
    return InvasionState(
        invasion_id=invasion_id or uuid.uuid4().hex,
        current_turn=0,
        max_turns=max_turns,
        altar_hp=altar_max_hp,
        altar_max_hp=altar_max_hp,
        invaders=tuple(invaders),
        objectives=tuple(objectives),
        defender_count=defender_count,
    )


# ---------------------------------------------------------------------------
# Condition checks
# ---------------------------------------------------------------------------

def is_altar_destroyed(state: InvasionState) -> bool:
    return state.altar_hp <= 0


def are_secondary_objectives_completed(state: InvasionState) -> bool:
    completed = sum(1 for o in state.objectives if not o.is_primary and o.is_completed)
    return completed >= SECONDARY_OBJECTIVES_FOR_VICTORY


def are_all_invaders_eliminated(state: InvasionState) -> bool:
    return all(i.current_hp <= 0 for i in state.invaders)


def is_turn_limit_reached(state: InvasionState) -> bool:
    return state.current_turn >= state.max_turns


def check_invasion_end(state: InvasionState) -> InvasionEndReason | None:
    """The end reason that applies now, or ``None`` while the invasion goes on."""
    if not state.is_active:
        return None
    if is_altar_destroyed(state):
        return InvasionEndReason.ALTAR_DESTROYED
    if are_secondary_objectives_completed(state):
        return InvasionEndReason.OBJECTIVES_COMPLETED
    if are_all_invaders_eliminated(state):
        return InvasionEndReason.ALL_INVADERS_ELIMINATED
    if is_turn_limit_reached(state):
        return InvasionEndReason.TURN_LIMIT_REACHED
    return None


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def damage_altar(state: InvasionState, damage: int) -> InvasionState:
    """Lower altar HP (never below 0) and track it on the DestroyAltar objective."""
    new_hp = max(0, state.altar_hp - damage)
    progress = (
        round_half_up((state.altar_max_hp - new_hp) / state.altar_max_hp * 100)
        if state.altar_max_hp > 0 else 100
    )
    objectives = tuple(
        replace(o, progress=min(100, progress), is_completed=new_hp <= 0)
        if o.type == ObjectiveType.DESTROY_ALTAR else o
        for o in state.objectives
    )
    logger.debug("Altar takes %d damage [HP: %d/%d]", damage, new_hp, state.altar_max_hp)
    return replace(state, altar_hp=new_hp, objectives=objectives)


def advance_invasion_turn(state: InvasionState) -> InvasionState:
    return replace(state, current_turn=state.current_turn + 1)


def mark_invader_killed(state: InvasionState, invader_id: str) -> InvasionState:
    """Set an invader's HP to 0 and count the kill once.

    Unknown ids and already-dead invaders return *state* itself.
    """
    invader = next((i for i in state.invaders if i.id == invader_id), None)
    if invader is None or invader.current_hp <= 0:
        return state
    return replace(
        state,
        invaders=tuple(replace(i, current_hp=0) if i.id == invader_id else i for i in state.invaders),
        invaders_killed=state.invaders_killed + 1,
    )


def record_defender_loss(state: InvasionState) -> InvasionState:
    return replace(state, defenders_lost=state.defenders_lost + 1)


def update_objective(state: InvasionState, objective: InvasionObjective) -> InvasionState:
    """Swap in an updated copy of one objective, matched by id."""
    return replace(
        state,
        objectives=tuple(objective if o.id == objective.id else o for o in state.objectives),
    )


def end_invasion(state: InvasionState) -> InvasionState:
    return replace(state, is_active=False)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

def resolve_detailed_result(
    state: InvasionState,
    day: int,
    end_reason: InvasionEndReason,
) -> DetailedInvasionResult:
    outcome = resolve_outcome(state.objectives)
    return DetailedInvasionResult(
        invasion_id=state.invasion_id,
        day=day,
        outcome=outcome.outcome,
        end_reason=end_reason,
        turns_taken=state.current_turn,
        invader_count=len(state.invaders),
        invaders_killed=state.invaders_killed,
        defender_count=state.defender_count,
        defenders_lost=state.defenders_lost,
        objectives_completed=outcome.secondaries_completed,
        objectives_total=outcome.secondaries_total,
        reward_multiplier=outcome.reward_multiplier,
    )


def create_history_entry(result: DetailedInvasionResult) -> InvasionHistoryEntry:
    return InvasionHistoryEntry(
        day=result.day,
        type="scheduled",
        outcome=result.outcome,
        end_reason=result.end_reason,
        invader_count=result.invader_count,
        invaders_killed=result.invaders_killed,
        defender_count=result.defender_count,
        defenders_lost=result.defenders_lost,
        turns_taken=result.turns_taken,
    )
