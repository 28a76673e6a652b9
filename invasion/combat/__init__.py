"""Combat layer: turn queue, targeting, attack resolution and action execution."""

from invasion.combat.actions import execute_attack, execute_move, execute_wait
from invasion.combat.resolver import resolve_combat, roll_d20
from invasion.combat.targeting import (
    are_positions_adjacent,
    get_adjacent_positions,
    get_available_actions,
    get_valid_attack_targets,
    get_valid_move_targets,
)
from invasion.combat.turn_queue import (
    advance_turn,
    build_turn_queue,
    create_combatant,
    get_alive_combatants,
    get_current_actor,
    is_round_complete,
    start_new_round,
)

__all__ = [
    "advance_turn",
    "are_positions_adjacent",
    "build_turn_queue",
    "create_combatant",
    "execute_attack",
    "execute_move",
    "execute_wait",
    "get_adjacent_positions",
    "get_alive_combatants",
    "get_available_actions",
    "get_current_actor",
    "get_valid_attack_targets",
    "get_valid_move_targets",
    "is_round_complete",
    "resolve_combat",
    "roll_d20",
    "start_new_round",
]
