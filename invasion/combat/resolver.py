"""To-hit and damage resolution for a single attack.

Roll model (d20):
  - roll = floor(rng() * 20) + 1
  - natural 1 always misses, natural 20 always hits and is a critical
  - otherwise the attack hits when ``roll + attack >= defense + HIT_THRESHOLD``

Damage on a hit is ``max(1, attack - defense)``, multiplied by
``CRITICAL_MULTIPLIER`` on a natural 20. Pure: the caller applies the result.
"""

from __future__ import annotations

import math
from typing import Callable

from invasion.core.models import Combatant, CombatResult

NATURAL_MISS = 1
NATURAL_HIT = 20
HIT_THRESHOLD = 10
CRITICAL_MULTIPLIER = 2


def roll_d20(rng: Callable[[], float]) -> int:
    """Roll 1-20 from a source returning floats in [0, 1)."""
    return math.floor(rng() * 20) + 1


def does_attack_hit(roll: int, attacker: Combatant, defender: Combatant) -> bool:
    if roll == NATURAL_HIT:
        return True
    if roll == NATURAL_MISS:
        return False
    return roll + attacker.attack >= defender.defense + HIT_THRESHOLD


def calculate_damage(attacker: Combatant, defender: Combatant, roll: int) -> int:
    """Damage dealt on a hit; never below 1."""
    damage = max(1, attacker.attack - defender.defense)
    if roll == NATURAL_HIT:
        damage *= CRITICAL_MULTIPLIER
    return damage


def resolve_combat(attacker: Combatant, defender: Combatant, rng: Callable[[], float]) -> CombatResult:
    roll = roll_d20(rng)
    hit = does_attack_hit(roll, attacker, defender)
    damage = calculate_damage(attacker, defender, roll) if hit else 0
    defender_hp = max(0, defender.hp - damage)
    return CombatResult(
        hit=hit,
        roll=roll,
        damage=damage,
        defender_hp=defender_hp,
        defender_dead=defender_hp == 0,
        critical=hit and roll == NATURAL_HIT,
    )
