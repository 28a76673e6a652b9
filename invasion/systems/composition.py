"""Invasion party composition — who shows up at the dungeon door.

The dungeon is summarised as a ``DungeonProfile`` (corruption, wealth,
knowledge, size, threat). Profiles above the threshold pick the matching
class weight set; a seeded weighted draw then fills the party, subject to:

  - at least one warrior;
  - no class above half of the party;
  - balanced dungeons get at least three distinct classes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import xxhash

from invasion.core.content import (
    DEFAULT_CATALOG,
    CompositionWeightConfig,
    ContentCatalog,
    InvaderDefinition,
)
from invasion.core.dungeon import DungeonLayout
from invasion.core.enums import Domain, InvaderClass, ResourceType
from invasion.core.models import InvaderInstance
from invasion.systems.rng import RandomSource, choice, seeded_stream
from invasion.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

PROFILE_THRESHOLD = 60
PROFILE_CAP = 100
ROOM_BONUS_CAP = 50
RESEARCH_POINTS_PER_NODE = 10
MAX_CLASS_SHARE = 0.5
MIN_BALANCED_CLASSES = 3

INVADER_CLASSES: tuple[InvaderClass, ...] = tuple(InvaderClass)

ClassWeights = dict[InvaderClass, int]


@dataclass(frozen=True, slots=True)
class DungeonProfile:
    corruption: int
    wealth: int
    knowledge: int
    size: int
    threat_level: int

    @property
    def is_balanced(self) -> bool:
        return (
            self.corruption <= PROFILE_THRESHOLD
            and self.wealth <= PROFILE_THRESHOLD
            and self.knowledge <= PROFILE_THRESHOLD
        )


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

def calculate_dungeon_profile(
    dungeon: DungeonLayout,
    catalog: ContentCatalog = DEFAULT_CATALOG,
) -> DungeonProfile:
    totals = {"corruption": 0, "wealth": 0, "knowledge": 0}
    for room in dungeon.rooms:
        definition = catalog.get_room(room.room_type_id)
        if definition is None or definition.invasion_profile is None:
            continue
        weight = definition.invasion_profile
        if weight.dimension in totals:
            totals[weight.dimension] += weight.weight

    corruption = min(PROFILE_CAP, dungeon.resource(ResourceType.CORRUPTION).current + totals["corruption"])

    gold = dungeon.resource(ResourceType.GOLD)
    gold_level = gold.current / gold.max * 50 if gold.max > 0 else 0
    wealth = min(PROFILE_CAP, round_half_up(gold_level + min(ROOM_BONUS_CAP, totals["wealth"])))

    research = min(ROOM_BONUS_CAP, dungeon.completed_research * RESEARCH_POINTS_PER_NODE)
    knowledge = min(PROFILE_CAP, round_half_up(research + min(ROOM_BONUS_CAP, totals["knowledge"])))

    return DungeonProfile(
        corruption=corruption,
        wealth=wealth,
        knowledge=knowledge,
        size=len(dungeon.rooms),
        threat_level=min(PROFILE_CAP, (dungeon.day - 1) // 3),
    )


# ---------------------------------------------------------------------------
# Weights and size
# ---------------------------------------------------------------------------

def get_composition_weights(profile: DungeonProfile, config: CompositionWeightConfig) -> ClassWeights:
    """Class weights for *profile*; several high dimensions are averaged."""
    sets: list[dict[InvaderClass, int]] = []
    if profile.corruption > PROFILE_THRESHOLD:
        sets.append(config.high_corruption)
    if profile.wealth > PROFILE_THRESHOLD:
        sets.append(config.high_wealth)
    if profile.knowledge > PROFILE_THRESHOLD:
        sets.append(config.high_knowledge)

    if not sets:
        return dict(config.balanced)

    return {
        cls: round_half_up(sum(s.get(cls, 0) for s in sets) / len(sets))
        for cls in INVADER_CLASSES
    }


def get_party_size(room_count: int, rng: RandomSource) -> int:
    """Small dungeons (<=10 rooms) draw 3-5, medium (<=25) 6-10, large 11-15."""
    if room_count <= 10:
        return 3 + int(rng() * 3)
    if room_count <= 25:
        return 6 + int(rng() * 5)
    return 11 + int(rng() * 5)


def _weighted_class(
    weights: ClassWeights,
    counts: dict[InvaderClass, int],
    max_per_class: int,
    available: Sequence[InvaderClass],
    rng: RandomSource,
) -> InvaderClass:
    """Weighted draw over *available* classes still under the cap."""
    eligible = [(cls, weights.get(cls, 0)) for cls in available if counts[cls] < max_per_class]
    if not eligible:
        # Every defined class is capped; overflow into any of them.
        return choice(available, rng)

    roll = rng() * sum(w for _, w in eligible)
    for cls, weight in eligible:
        roll -= weight
        if roll <= 0:
            return cls
    return eligible[-1][0]


# ---------------------------------------------------------------------------
# Party selection
# ---------------------------------------------------------------------------

def select_party_composition(
    profile: DungeonProfile,
    definitions: Sequence[InvaderDefinition],
    weights: ClassWeights,
    seed: str,
) -> list[InvaderDefinition]:
    """Seeded party draw. The same profile, pool and seed give the same party."""
    rng = seeded_stream(seed, Domain.COMPOSITION)
    size = get_party_size(profile.size, rng)
    max_per_class = int(size * MAX_CLASS_SHARE)

    by_class: dict[InvaderClass, list[InvaderDefinition]] = {
        cls: [d for d in definitions if d.invader_class == cls] for cls in INVADER_CLASSES
    }
    if not any(by_class.values()):
        return []

    counts = {cls: 0 for cls in INVADER_CLASSES}
    party: list[InvaderDefinition] = []

    warriors = by_class[InvaderClass.WARRIOR]
    if warriors:
        party.append(choice(warriors, rng))
        counts[InvaderClass.WARRIOR] += 1

    available = [cls for cls in INVADER_CLASSES if by_class[cls]]
    while len(party) < size:
        cls = _weighted_class(weights, counts, max_per_class, available, rng)
        party.append(choice(by_class[cls], rng))
        counts[cls] += 1

    if profile.is_balanced and size >= MIN_BALANCED_CLASSES:
        _ensure_class_diversity(party, by_class, counts)

    logger.debug(
        "Party for seed %r: %s", seed, ", ".join(d.invader_class.value for d in party),
    )
    return party


def _ensure_class_diversity(
    party: list[InvaderDefinition],
    by_class: dict[InvaderClass, list[InvaderDefinition]],
    counts: dict[InvaderClass, int],
) -> None:
    """Swap members of the most common class for missing classes, in place."""
    present = {d.invader_class for d in party}
    while len(present) < MIN_BALANCED_CLASSES:
        missing = next((c for c in INVADER_CLASSES if c not in present and by_class[c]), None)
        if missing is None:
            break

        most_common = max(INVADER_CLASSES, key=lambda c: counts[c])
        index = next(
            (i for i in range(len(party) - 1, -1, -1) if party[i].invader_class == most_common),
            None,
        )
        if index is None:
            break

        party[index] = choice(by_class[missing], seeded_stream(f"diversity-{missing.value}", Domain.COMPOSITION))
        counts[most_common] -= 1
        counts[missing] += 1
        present.add(missing)


def create_invader_instance(definition: InvaderDefinition, seed: str, index: int) -> InvaderInstance:
    digest = xxhash.xxh64(f"{seed}:{index}:{definition.id}".encode("utf-8")).hexdigest()
    return InvaderInstance(
        id=f"invader-{digest[:12]}",
        definition_id=definition.id,
        current_hp=definition.base_stats.hp,
        max_hp=definition.base_stats.hp,
    )


def generate_invasion_party(
    profile: DungeonProfile,
    seed: str,
    catalog: ContentCatalog = DEFAULT_CATALOG,
) -> list[InvaderInstance]:
    """Full party ready for combat; empty when the catalog has no invaders or weights."""
    definitions = catalog.invaders()
    config = catalog.composition
    if config is None or not definitions:
        return []

    weights = get_composition_weights(profile, config)
    selected = select_party_composition(profile, definitions, weights, seed)
    party = [create_invader_instance(d, seed, i) for i, d in enumerate(selected)]
    logger.info("Generated invasion party of %d for seed %r", len(party), seed)
    return party
