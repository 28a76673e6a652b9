"""Invasion objectives — seeded assignment, progress tracking, outcome.

Every invasion has exactly one primary objective (Destroy Altar) and up to
two secondary objectives of distinct types, chosen from what the dungeon
actually contains:

  - room-backed goals (vault, library, ley line nexus) need a matching
    room to be placed;
  - SlayMonster needs an inhabitant of tier 2 or higher;
  - RescuePrisoner needs any inhabitant and targets the first one;
  - ScoutDungeon is always eligible.

Selection is a seeded shuffle, so the same dungeon and seed always produce
the same objectives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Sequence

import xxhash

from invasion.core.content import DEFAULT_CATALOG, ContentCatalog
from invasion.core.dungeon import DungeonLayout
from invasion.core.enums import InvasionOutcome, ObjectiveType, RoomRole
from invasion.systems.rng import seeded_stream, shuffled
from invasion.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

MAX_SECONDARY_OBJECTIVES = 2
SLAY_MONSTER_MIN_TIER = 2
REWARD_STEP = 0.25


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InvasionObjective:
    id: str
    type: ObjectiveType
    name: str
    description: str
    target_id: str | None = None
    is_primary: bool = False
    is_completed: bool = False
    progress: int = 0


@dataclass(frozen=True, slots=True)
class InvasionResult:
    """Outcome derived purely from objective completion."""

    outcome: InvasionOutcome
    altar_destroyed: bool
    secondaries_completed: int
    secondaries_total: int
    reward_multiplier: float


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ObjectiveTemplate:
    type: ObjectiveType
    name: str
    description: str


PRIMARY_TEMPLATE = ObjectiveTemplate(
    type=ObjectiveType.DESTROY_ALTAR,
    name="Destroy Altar",
    description="Destroy the dungeon altar to cripple the dark lord's power.",
)

SECONDARY_TEMPLATES: tuple[ObjectiveTemplate, ...] = (
    ObjectiveTemplate(
        ObjectiveType.SLAY_MONSTER, "Slay Monster",
        "Kill a powerful creature defending the dungeon.",
    ),
    ObjectiveTemplate(
        ObjectiveType.STEAL_TREASURE, "Steal Treasure",
        "Loot gold from the dungeon treasury.",
    ),
    ObjectiveTemplate(
        ObjectiveType.DEFILE_LIBRARY, "Defile Library",
        "Destroy forbidden knowledge stored in the shadow library.",
    ),
    ObjectiveTemplate(
        ObjectiveType.SEAL_PORTAL, "Seal Portal",
        "Seal a dark energy nexus to weaken the dungeon.",
    ),
    ObjectiveTemplate(
        ObjectiveType.PLUNDER_VAULT, "Plunder Vault",
        "Break into the treasure vault and carry away riches.",
    ),
    ObjectiveTemplate(
        ObjectiveType.RESCUE_PRISONER, "Rescue Prisoner",
        "Free a captive creature from the dungeon.",
    ),
    ObjectiveTemplate(
        ObjectiveType.SCOUT_DUNGEON, "Scout Dungeon",
        "Map the dungeon layout for future invasions.",
    ),
)

TEMPLATE_MAP: dict[ObjectiveType, ObjectiveTemplate] = {
    t.type: t for t in (PRIMARY_TEMPLATE, *SECONDARY_TEMPLATES)
}


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------

class ObjectiveAssigner:
    """Builds objective lists for a dungeon.

    Owns the objective-type -> room-type lookup table. The table is built
    lazily from the catalog's room definitions and must be dropped with
    ``invalidate()`` whenever the room content changes.
    """

    __slots__ = ("_catalog", "_room_types_by_objective")

    def __init__(self, catalog: ContentCatalog = DEFAULT_CATALOG) -> None:
        self._catalog = catalog
        self._room_types_by_objective: dict[ObjectiveType, list[str]] | None = None

    def invalidate(self) -> None:
        self._room_types_by_objective = None

    @property
    def cache_built(self) -> bool:
        return self._room_types_by_objective is not None

    def _room_type_index(self) -> dict[ObjectiveType, list[str]]:
        if self._room_types_by_objective is None:
            index: dict[ObjectiveType, list[str]] = {}
            for room in self._catalog.rooms():
                for objective_type in room.objective_types:
                    index.setdefault(objective_type, []).append(room.id)
            self._room_types_by_objective = index
        return self._room_types_by_objective

    # -- world queries --

    def find_room_for(self, dungeon: DungeonLayout, objective_type: ObjectiveType) -> str | None:
        room = dungeon.find_room(self._room_type_index().get(objective_type, ()))
        return room.id if room is not None else None

    def _is_eligible(self, template: ObjectiveTemplate, dungeon: DungeonLayout) -> bool:
        match template.type:
            case ObjectiveType.SCOUT_DUNGEON:
                return True
            case ObjectiveType.SLAY_MONSTER:
                return dungeon.strongest_inhabitant(self._catalog, SLAY_MONSTER_MIN_TIER) is not None
            case ObjectiveType.RESCUE_PRISONER:
                return bool(dungeon.inhabitants)
            case _:
                return self.find_room_for(dungeon, template.type) is not None

    def _target_id(self, template: ObjectiveTemplate, dungeon: DungeonLayout) -> str | None:
        match template.type:
            case ObjectiveType.SCOUT_DUNGEON:
                return None
            case ObjectiveType.SLAY_MONSTER:
                target = dungeon.strongest_inhabitant(self._catalog, SLAY_MONSTER_MIN_TIER)
                return target.instance_id if target is not None else None
            case ObjectiveType.RESCUE_PRISONER:
                return dungeon.inhabitants[0].instance_id if dungeon.inhabitants else None
            case _:
                return self.find_room_for(dungeon, template.type)

    def eligible_templates(self, dungeon: DungeonLayout) -> list[ObjectiveTemplate]:
        return [t for t in SECONDARY_TEMPLATES if self._is_eligible(t, dungeon)]

    # -- assignment --

    def assign(self, dungeon: DungeonLayout, seed: str) -> list[InvasionObjective]:
        """One primary objective plus up to two distinct secondary objectives."""
        rng = seeded_stream(seed)
        altar = dungeon.find_room_by_role(self._catalog, RoomRole.ALTAR)
        objectives = [
            _from_template(PRIMARY_TEMPLATE, seed, 0, altar.id if altar else None, primary=True),
        ]

        selected: set[ObjectiveType] = set()
        for template in shuffled(self.eligible_templates(dungeon), rng):
            if len(selected) >= MAX_SECONDARY_OBJECTIVES:
                break
            if template.type in selected:
                continue
            selected.add(template.type)
            objectives.append(
                _from_template(template, seed, len(objectives), self._target_id(template, dungeon)),
            )

        logger.info(
            "Assigned objectives for seed %r: %s",
            seed, ", ".join(o.type.value for o in objectives),
        )
        return objectives


def _objective_id(seed: str, index: int, objective_type: ObjectiveType) -> str:
    return xxhash.xxh64(f"{seed}:{index}:{objective_type.value}".encode("utf-8")).hexdigest()


def _from_template(
    template: ObjectiveTemplate,
    seed: str,
    index: int,
    target_id: str | None,
    primary: bool = False,
) -> InvasionObjective:
    return InvasionObjective(
        id=_objective_id(seed, index, template.type),
        type=template.type,
        name=template.name,
        description=template.description,
        target_id=target_id,
        is_primary=primary,
    )


def assign_objectives(
    dungeon: DungeonLayout,
    seed: str,
    catalog: ContentCatalog = DEFAULT_CATALOG,
) -> list[InvasionObjective]:
    """Convenience wrapper building a fresh ``ObjectiveAssigner``."""
    return ObjectiveAssigner(catalog).assign(dungeon, seed)


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

def update_progress(objective: InvasionObjective, progress: float) -> InvasionObjective:
    """Copy of *objective* with progress clamped to [0, 100].

    Stored progress is rounded; completion is judged on the unrounded value.
    """
    clamped = max(0, min(100, progress))
    return replace(objective, progress=round_half_up(clamped), is_completed=clamped >= 100)


def slay_monster_progress(current_hp: int, max_hp: int) -> int:
    """Share of the target's HP that has been lost."""
    if max_hp <= 0:
        return 0
    return round_half_up((1 - current_hp / max_hp) * 100)


def steal_treasure_progress(gold_looted: int, gold_target: int) -> int:
    if gold_target <= 0:
        return 0
    return min(100, round_half_up(gold_looted / gold_target * 100))


def seal_portal_progress(turns_spent: int, turns_required: int) -> int:
    if turns_required <= 0:
        return 0
    return min(100, round_half_up(turns_spent / turns_required * 100))


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------

def reward_multiplier(secondaries_total: int, secondaries_completed: int) -> float:
    """1.0 base, +0.25 per prevented secondary, -0.25 per completed one, floored at 0."""
    prevented = secondaries_total - secondaries_completed
    value = max(0.0, 1.0 + prevented * REWARD_STEP - secondaries_completed * REWARD_STEP)
    return round(value, 2)


def resolve_outcome(objectives: Sequence[InvasionObjective]) -> InvasionResult:
    primary = next((o for o in objectives if o.is_primary), None)
    secondaries = [o for o in objectives if not o.is_primary]
    completed = sum(1 for o in secondaries if o.is_completed)
    total = len(secondaries)

    if primary is not None and primary.is_completed:
        return InvasionResult(
            outcome=InvasionOutcome.DEFEAT,
            altar_destroyed=True,
            secondaries_completed=completed,
            secondaries_total=total,
            reward_multiplier=0.0,
        )

    return InvasionResult(
        outcome=InvasionOutcome.VICTORY,
        altar_destroyed=False,
        secondaries_completed=completed,
        secondaries_total=total,
        reward_multiplier=reward_multiplier(total, completed),
    )


ProgressFormula = Callable[[int, int], int]

PROGRESS_FORMULAS: dict[ObjectiveType, ProgressFormula] = {
    ObjectiveType.SLAY_MONSTER: slay_monster_progress,
    ObjectiveType.STEAL_TREASURE: steal_treasure_progress,
    ObjectiveType.PLUNDER_VAULT: steal_treasure_progress,
    ObjectiveType.SEAL_PORTAL: seal_portal_progress,
    ObjectiveType.DEFILE_LIBRARY: seal_portal_progress,
    ObjectiveType.RESCUE_PRISONER: seal_portal_progress,
    ObjectiveType.SCOUT_DUNGEON: seal_portal_progress,
}
