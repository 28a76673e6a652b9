"""Post-invasion economy — defense rewards, defeat penalties, prisoners.

Everything here consumes a terminal ``DetailedInvasionResult`` and returns
plain value records. Nothing is applied to the dungeon; the caller owns the
resource pools and adds or subtracts the deltas itself.

Reward formula (victory):
  reputation  = 5 + 1 per kill + 3 if no secondary objective was completed
  experience  = round(invader_count * 10 * reward_multiplier)
  gold        = round(sum(class loot rolls) * reward_multiplier)

Penalty formula (defeat):
  gold lost   = round(current_gold * 0.2)
  reputation  = -3
  resources   = 10 crystals + 5 essence per completed secondary objective
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from invasion.core.content import DEFAULT_CATALOG, ContentCatalog
from invasion.core.enums import InvaderClass, PrisonerAction, ResourceType
from invasion.core.models import InvaderInstance, InvaderStats
from invasion.systems.rng import RandomSource
from invasion.systems.win_loss import DetailedInvasionResult
from invasion.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

BASE_REPUTATION_GAIN = 5
REPUTATION_PER_KILL = 1
ALL_SECONDARIES_PREVENTED_BONUS = 3
DEFEAT_REPUTATION_LOSS = 3
DEFEAT_GOLD_LOSS_PERCENT = 0.2
PRISONER_CAPTURE_CHANCE = 0.3
BASE_EXPERIENCE_PER_INVADER = 10

CRYSTALS_LOST_PER_OBJECTIVE = 10
ESSENCE_LOST_PER_OBJECTIVE = 5

ALTAR_REBUILD_COST: Mapping[ResourceType, int] = {
    ResourceType.CRYSTALS: 100,
    ResourceType.GOLD: 50,
    ResourceType.FLUX: 20,
}


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ClassLoot:
    gold_min: int
    gold_max: int
    bonus_resource: ResourceType
    bonus_min: int
    bonus_max: int


CLASS_LOOT: dict[InvaderClass, ClassLoot] = {
    InvaderClass.WARRIOR: ClassLoot(5, 15, ResourceType.CRYSTALS, 2, 8),
    InvaderClass.ROGUE: ClassLoot(10, 25, ResourceType.ESSENCE, 1, 5),
    InvaderClass.MAGE: ClassLoot(3, 10, ResourceType.FLUX, 3, 10),
    InvaderClass.CLERIC: ClassLoot(5, 12, ResourceType.ESSENCE, 2, 6),
    InvaderClass.PALADIN: ClassLoot(8, 20, ResourceType.FLUX, 2, 8),
    InvaderClass.RANGER: ClassLoot(4, 12, ResourceType.FOOD, 3, 10),
}

CONVERT_SUCCESS_RATES: dict[InvaderClass, float] = {
    InvaderClass.WARRIOR: 0.30,
    InvaderClass.ROGUE: 0.50,
    InvaderClass.MAGE: 0.20,
    InvaderClass.CLERIC: 0.10,
    InvaderClass.PALADIN: 0.05,
    InvaderClass.RANGER: 0.35,
}

RANSOM_GOLD: dict[InvaderClass, int] = {
    InvaderClass.WARRIOR: 30,
    InvaderClass.ROGUE: 25,
    InvaderClass.MAGE: 40,
    InvaderClass.CLERIC: 35,
    InvaderClass.PALADIN: 50,
    InvaderClass.RANGER: 20,
}

SACRIFICE_BOONS: tuple[ResourceType, ...] = (
    ResourceType.FLUX,
    ResourceType.ESSENCE,
    ResourceType.RESEARCH,
)
SACRIFICE_BOON_MIN = 10
SACRIFICE_BOON_MAX = 25


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CapturedPrisoner:
    id: str
    invader_class: InvaderClass
    name: str
    stats: InvaderStats
    capture_day: int


@dataclass(frozen=True, slots=True)
class DefenseRewards:
    reputation_gain: int
    experience_gain: int
    gold_gain: int
    resource_gains: dict[ResourceType, int] = field(default_factory=dict)
    captured_prisoners: tuple[CapturedPrisoner, ...] = ()


@dataclass(frozen=True, slots=True)
class DefensePenalties:
    reputation_loss: int
    gold_lost: int
    resource_losses: dict[ResourceType, int] = field(default_factory=dict)
    killed_inhabitant_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LootRoll:
    gold: int
    bonus_resource: ResourceType
    bonus_amount: int


@dataclass(frozen=True, slots=True)
class PrisonerHandlingResult:
    action: PrisonerAction
    success: bool
    resource_changes: dict[ResourceType, int] = field(default_factory=dict)
    reputation_change: int = 0
    corruption_change: int = 0
    fear_change: int = 0


def roll_range(low: int, high: int, rng: RandomSource) -> int:
    """Linear interpolation of one roll across [low, high], rounded."""
    return round_half_up(low + rng() * (high - low))


# ---------------------------------------------------------------------------
# Rewards and penalties
# ---------------------------------------------------------------------------

def calculate_defense_rewards(
    result: DetailedInvasionResult,
    killed_invader_classes: Iterable[InvaderClass],
    rng: RandomSource,
) -> DefenseRewards:
    """Rewards for a successful defense. Prisoners are added by the caller."""
    reputation = BASE_REPUTATION_GAIN + result.invaders_killed * REPUTATION_PER_KILL
    if result.objectives_total > 0 and result.objectives_completed == 0:
        reputation += ALL_SECONDARIES_PREVENTED_BONUS

    experience = round_half_up(
        result.invader_count * BASE_EXPERIENCE_PER_INVADER * result.reward_multiplier,
    )

    gold = 0
    resources: dict[ResourceType, int] = {}
    for invader_class in killed_invader_classes:
        loot = roll_loot(invader_class, rng)
        gold += loot.gold
        resources[loot.bonus_resource] = resources.get(loot.bonus_resource, 0) + loot.bonus_amount

    rewards = DefenseRewards(
        reputation_gain=reputation,
        experience_gain=experience,
        gold_gain=round_half_up(gold * result.reward_multiplier),
        resource_gains=resources,
    )
    logger.info(
        "Defense rewards: +%d reputation, +%d xp, +%d gold",
        rewards.reputation_gain, rewards.experience_gain, rewards.gold_gain,
    )
    return rewards


def calculate_defense_penalties(result: DetailedInvasionResult, current_gold: int) -> DefensePenalties:
    """Penalties for a failed defense. Killed inhabitants are filled in by the caller."""
    losses: dict[ResourceType, int] = {}
    if result.objectives_completed > 0:
        losses[ResourceType.CRYSTALS] = result.objectives_completed * CRYSTALS_LOST_PER_OBJECTIVE
        losses[ResourceType.ESSENCE] = result.objectives_completed * ESSENCE_LOST_PER_OBJECTIVE

    penalties = DefensePenalties(
        reputation_loss=DEFEAT_REPUTATION_LOSS,
        gold_lost=round_half_up(current_gold * DEFEAT_GOLD_LOSS_PERCENT),
        resource_losses=losses,
    )
    logger.info(
        "Defense penalties: -%d reputation, -%d gold",
        penalties.reputation_loss, penalties.gold_lost,
    )
    return penalties


def get_class_loot(invader_class: InvaderClass) -> ClassLoot:
    return CLASS_LOOT[invader_class]


def roll_loot(invader_class: InvaderClass, rng: RandomSource) -> LootRoll:
    """Gold first, then the bonus resource: two draws per invader."""
    loot = CLASS_LOOT[invader_class]
    gold = roll_range(loot.gold_min, loot.gold_max, rng)
    bonus = roll_range(loot.bonus_min, loot.bonus_max, rng)
    return LootRoll(gold=gold, bonus_resource=loot.bonus_resource, bonus_amount=bonus)


# ---------------------------------------------------------------------------
# Prisoners
# ---------------------------------------------------------------------------

def roll_prisoner_captures(
    invaders: Iterable[InvaderInstance],
    day: int,
    rng: RandomSource,
    catalog: ContentCatalog = DEFAULT_CATALOG,
) -> list[CapturedPrisoner]:
    """Each retreating invader is captured with a 30 % chance.

    One draw per invader, taken before the definition lookup; invaders whose
    definition is unknown are skipped.
    """
    prisoners: list[CapturedPrisoner] = []
    for invader in invaders:
        if rng() >= PRISONER_CAPTURE_CHANCE:
            continue
        definition = catalog.get_invader(invader.definition_id)
        if definition is None:
            logger.debug("No definition for captured invader %s, skipping", invader.definition_id)
            continue
        prisoners.append(CapturedPrisoner(
            id=f"prisoner-{day}-{invader.id}",
            invader_class=definition.invader_class,
            name=f"Captured {definition.name}",
            stats=definition.base_stats,
            capture_day=day,
        ))
    return prisoners


def handle_execute() -> PrisonerHandlingResult:
    return PrisonerHandlingResult(
        action=PrisonerAction.EXECUTE, success=True, reputation_change=1, fear_change=2,
    )


def handle_ransom(prisoner: CapturedPrisoner) -> PrisonerHandlingResult:
    return PrisonerHandlingResult(
        action=PrisonerAction.RANSOM,
        success=True,
        resource_changes={ResourceType.GOLD: RANSOM_GOLD[prisoner.invader_class]},
        reputation_change=-1,
    )


def handle_convert(prisoner: CapturedPrisoner, rng: RandomSource) -> PrisonerHandlingResult:
    """A successful conversion costs corruption; a failed one lets the prisoner escape."""
    success = rng() < CONVERT_SUCCESS_RATES[prisoner.invader_class]
    if not success:
        return PrisonerHandlingResult(action=PrisonerAction.CONVERT, success=False)
    return PrisonerHandlingResult(
        action=PrisonerAction.CONVERT,
        success=True,
        resource_changes={ResourceType.CORRUPTION: 5},
        corruption_change=5,
    )


def handle_sacrifice(rng: RandomSource) -> PrisonerHandlingResult:
    boon = SACRIFICE_BOONS[min(int(rng() * len(SACRIFICE_BOONS)), len(SACRIFICE_BOONS) - 1)]
    amount = roll_range(SACRIFICE_BOON_MIN, SACRIFICE_BOON_MAX, rng)
    return PrisonerHandlingResult(
        action=PrisonerAction.SACRIFICE,
        success=True,
        resource_changes={boon: amount, ResourceType.CORRUPTION: 5},
        reputation_change=2,
        corruption_change=5,
    )


def handle_experiment(prisoner: CapturedPrisoner) -> PrisonerHandlingResult:
    research = round_half_up(prisoner.stats.average())
    return PrisonerHandlingResult(
        action=PrisonerAction.EXPERIMENT,
        success=True,
        resource_changes={ResourceType.RESEARCH: research, ResourceType.CORRUPTION: 3},
        corruption_change=3,
    )


def handle_prisoner(
    action: PrisonerAction,
    prisoner: CapturedPrisoner,
    rng: RandomSource | None = None,
) -> PrisonerHandlingResult:
    """Dispatch a disposition. Without *rng*, the process-wide ``random`` is used."""
    source = rng if rng is not None else random.random
    match action:
        case PrisonerAction.EXECUTE:
            return handle_execute()
        case PrisonerAction.RANSOM:
            return handle_ransom(prisoner)
        case PrisonerAction.CONVERT:
            return handle_convert(prisoner, source)
        case PrisonerAction.SACRIFICE:
            return handle_sacrifice(source)
        case PrisonerAction.EXPERIMENT:
            return handle_experiment(prisoner)
    raise ValueError(f"Unknown prisoner action: {action!r}")


def get_convert_success_rate(invader_class: InvaderClass) -> float:
    return CONVERT_SUCCESS_RATES[invader_class]


def get_ransom_gold_value(invader_class: InvaderClass) -> int:
    return RANSOM_GOLD[invader_class]


def get_altar_rebuild_cost() -> dict[ResourceType, int]:
    """A fresh dict every call; callers may mutate it freely."""
    return dict(ALTAR_REBUILD_COST)
