"""Invasion systems: RNG, objectives, win/loss, rewards, composition, schedule."""

from invasion.systems.composition import DungeonProfile, calculate_dungeon_profile, generate_invasion_party
from invasion.systems.objectives import InvasionObjective, ObjectiveAssigner, assign_objectives
from invasion.systems.rewards import calculate_defense_penalties, calculate_defense_rewards, handle_prisoner
from invasion.systems.rng import DeterministicRNG
from invasion.systems.schedule import InvasionSchedule, process_schedule
from invasion.systems.win_loss import InvasionState, check_invasion_end, create_invasion_state

__all__ = [
    "DeterministicRNG",
    "DungeonProfile",
    "InvasionObjective",
    "InvasionSchedule",
    "InvasionState",
    "ObjectiveAssigner",
    "assign_objectives",
    "calculate_defense_penalties",
    "calculate_defense_rewards",
    "calculate_dungeon_profile",
    "check_invasion_end",
    "create_invasion_state",
    "generate_invasion_party",
    "handle_prisoner",
    "process_schedule",
]
