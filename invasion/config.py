"""Invasion configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InvasionConfig:
    """Immutable configuration for one invasion run."""

    # Run
    seed: str = "invasion-42"
    day: int = 12

    # State machine
    max_turns: int = 30
    altar_max_hp: int = 100

    # Arena
    grid_width: int = 9
    grid_height: int = 9
    entrance_row: int = 0                  # Invaders spawn along this row
    altar_x: int = 4
    altar_y: int = 7

    # Secondary objective requirements
    # Turn-based objectives advance one turn per round with any unengaged invader
    seal_portal_turns: int = 12
    scout_turns: int = 15
    defile_turns: int = 10
    rescue_turns: int = 12
    steal_gold_target: int = 100
    gold_looted_per_invader: int = 2       # Gold carried off per unengaged invader per round

    # Schedule
    grace_period_end: int = 30

    # Economy
    current_gold: int = 400                # Base for the defeat gold loss

    # Logging
    log_level: str = "INFO"
    replay_file: str = "invasion_replay.json"
