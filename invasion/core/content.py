"""Content definitions — invaders, rooms, inhabitants, composition weights.

Definitions are immutable pydantic dataclasses so the same objects can be
served straight from the metadata API. The engine only ever reads them
through a ``ContentCatalog``; lookups return ``None`` for unknown ids and
never cache or mutate anything.

Key types:
  InvaderDefinition        — blueprint for one adventurer
  RoomDefinition           — room type, its role and the objectives it backs
  InhabitantDefinition     — dungeon creature type with a tier and stats
  CompositionWeightConfig  — class weights per dungeon profile
  ContentCatalog           — read-only registry over all of the above
"""

from __future__ import annotations

from typing import Iterable

from pydantic.dataclasses import dataclass as pydantic_dataclass

from invasion.core.enums import InvaderClass, ObjectiveType, RoomRole
from invasion.core.models import InvaderStats
from invasion.errors import UnknownContentError


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class InvaderDefinition:
    """Immutable blueprint for one kind of invader."""

    id: str
    name: str
    invader_class: InvaderClass
    base_stats: InvaderStats
    description: str = ""


@pydantic_dataclass(frozen=True)
class InvasionProfileWeight:
    """How much a room pushes one dungeon profile dimension."""

    dimension: str           # "corruption" | "wealth" | "knowledge"
    weight: int


@pydantic_dataclass(frozen=True)
class RoomDefinition:
    """A room type that can be placed in the dungeon."""

    id: str
    name: str
    role: RoomRole = RoomRole.OTHER
    objective_types: tuple[ObjectiveType, ...] = ()
    invasion_profile: InvasionProfileWeight | None = None


@pydantic_dataclass(frozen=True)
class InhabitantDefinition:
    """A creature type that defends the dungeon."""

    id: str
    name: str
    tier: int
    hp: int
    attack: int
    defense: int
    speed: int


@pydantic_dataclass(frozen=True)
class CompositionWeightConfig:
    """Invader class weights for each dungeon profile."""

    balanced: dict[InvaderClass, int]
    high_corruption: dict[InvaderClass, int]
    high_wealth: dict[InvaderClass, int]
    high_knowledge: dict[InvaderClass, int]


# ---------------------------------------------------------------------------
# Built-in content
# ---------------------------------------------------------------------------

INVADER_DEFS: dict[str, InvaderDefinition] = {}
ROOM_DEFS: dict[str, RoomDefinition] = {}
INHABITANT_DEFS: dict[str, InhabitantDefinition] = {}


def _reg_invader(d: InvaderDefinition) -> None:
    INVADER_DEFS[d.id] = d


def _reg_room(d: RoomDefinition) -> None:
    ROOM_DEFS[d.id] = d


def _reg_inhabitant(d: InhabitantDefinition) -> None:
    INHABITANT_DEFS[d.id] = d


# -- Invaders --
_reg_invader(InvaderDefinition(
    id="invader-sellsword", name="Sellsword", invader_class=InvaderClass.WARRIOR,
    base_stats=InvaderStats(hp=30, attack=8, defense=5, speed=4),
    description="A hired blade with more armour than sense.",
))
_reg_invader(InvaderDefinition(
    id="invader-shield-bearer", name="Shield Bearer", invader_class=InvaderClass.WARRIOR,
    base_stats=InvaderStats(hp=36, attack=6, defense=8, speed=3),
))
_reg_invader(InvaderDefinition(
    id="invader-cutpurse", name="Cutpurse", invader_class=InvaderClass.ROGUE,
    base_stats=InvaderStats(hp=20, attack=7, defense=3, speed=8),
    description="Quick fingers, quicker feet.",
))
_reg_invader(InvaderDefinition(
    id="invader-apprentice", name="Apprentice Mage", invader_class=InvaderClass.MAGE,
    base_stats=InvaderStats(hp=16, attack=10, defense=2, speed=5),
))
_reg_invader(InvaderDefinition(
    id="invader-acolyte", name="Acolyte", invader_class=InvaderClass.CLERIC,
    base_stats=InvaderStats(hp=22, attack=5, defense=4, speed=5),
))
_reg_invader(InvaderDefinition(
    id="invader-crusader", name="Crusader", invader_class=InvaderClass.PALADIN,
    base_stats=InvaderStats(hp=34, attack=9, defense=7, speed=3),
    description="Sworn to cleanse the dungeon of its master.",
))
_reg_invader(InvaderDefinition(
    id="invader-tracker", name="Tracker", invader_class=InvaderClass.RANGER,
    base_stats=InvaderStats(hp=22, attack=8, defense=3, speed=7),
))

# -- Rooms --
_reg_room(RoomDefinition(id="room-altar", name="Altar Room", role=RoomRole.ALTAR))
_reg_room(RoomDefinition(
    id="room-treasure-vault", name="Treasure Vault", role=RoomRole.TREASURE_VAULT,
    objective_types=(ObjectiveType.STEAL_TREASURE, ObjectiveType.PLUNDER_VAULT),
    invasion_profile=InvasionProfileWeight(dimension="wealth", weight=20),
))
_reg_room(RoomDefinition(
    id="room-shadow-library", name="Shadow Library", role=RoomRole.SHADOW_LIBRARY,
    objective_types=(ObjectiveType.DEFILE_LIBRARY,),
    invasion_profile=InvasionProfileWeight(dimension="knowledge", weight=20),
))
_reg_room(RoomDefinition(
    id="room-ley-line-nexus", name="Ley Line Nexus", role=RoomRole.LEY_LINE_NEXUS,
    objective_types=(ObjectiveType.SEAL_PORTAL,),
    invasion_profile=InvasionProfileWeight(dimension="corruption", weight=15),
))
_reg_room(RoomDefinition(
    id="room-torture-chamber", name="Torture Chamber", role=RoomRole.TORTURE_CHAMBER,
    invasion_profile=InvasionProfileWeight(dimension="corruption", weight=10),
))
_reg_room(RoomDefinition(id="room-barracks", name="Barracks", role=RoomRole.BARRACKS))
_reg_room(RoomDefinition(
    id="room-crystal-mine", name="Crystal Mine",
    invasion_profile=InvasionProfileWeight(dimension="wealth", weight=5),
))

# -- Inhabitants --
_reg_inhabitant(InhabitantDefinition(
    id="inhabitant-goblin", name="Goblin", tier=1, hp=20, attack=7, defense=3, speed=6))
_reg_inhabitant(InhabitantDefinition(
    id="inhabitant-kobold", name="Kobold", tier=1, hp=16, attack=6, defense=2, speed=7))
_reg_inhabitant(InhabitantDefinition(
    id="inhabitant-skeleton", name="Skeleton", tier=1, hp=22, attack=6, defense=4, speed=4))
_reg_inhabitant(InhabitantDefinition(
    id="inhabitant-orc-brute", name="Orc Brute", tier=2, hp=40, attack=11, defense=6, speed=4))
_reg_inhabitant(InhabitantDefinition(
    id="inhabitant-dark-wizard", name="Dark Wizard", tier=2, hp=24, attack=13, defense=3, speed=5))
_reg_inhabitant(InhabitantDefinition(
    id="inhabitant-wyrmling", name="Wyrmling", tier=3, hp=60, attack=14, defense=8, speed=5))

DEFAULT_COMPOSITION_WEIGHTS = CompositionWeightConfig(
    balanced={
        InvaderClass.WARRIOR: 25, InvaderClass.ROGUE: 15, InvaderClass.MAGE: 15,
        InvaderClass.CLERIC: 15, InvaderClass.PALADIN: 15, InvaderClass.RANGER: 15,
    },
    high_corruption={
        InvaderClass.WARRIOR: 20, InvaderClass.ROGUE: 5, InvaderClass.MAGE: 10,
        InvaderClass.CLERIC: 30, InvaderClass.PALADIN: 30, InvaderClass.RANGER: 5,
    },
    high_wealth={
        InvaderClass.WARRIOR: 25, InvaderClass.ROGUE: 40, InvaderClass.MAGE: 5,
        InvaderClass.CLERIC: 5, InvaderClass.PALADIN: 5, InvaderClass.RANGER: 20,
    },
    high_knowledge={
        InvaderClass.WARRIOR: 20, InvaderClass.ROGUE: 10, InvaderClass.MAGE: 40,
        InvaderClass.CLERIC: 15, InvaderClass.PALADIN: 5, InvaderClass.RANGER: 10,
    },
)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ContentCatalog:
    """Read-only view over content definitions.

    ``get_*`` lookups return ``None`` for unknown ids; ``require_*`` raise
    ``UnknownContentError`` for callers that want a strict lookup.
    """

    __slots__ = ("_invaders", "_rooms", "_inhabitants", "_composition")

    def __init__(
        self,
        invaders: Iterable[InvaderDefinition] = (),
        rooms: Iterable[RoomDefinition] = (),
        inhabitants: Iterable[InhabitantDefinition] = (),
        composition: CompositionWeightConfig | None = None,
    ) -> None:
        self._invaders: dict[str, InvaderDefinition] = {d.id: d for d in invaders}
        self._rooms: dict[str, RoomDefinition] = {d.id: d for d in rooms}
        self._inhabitants: dict[str, InhabitantDefinition] = {d.id: d for d in inhabitants}
        self._composition = composition

    @classmethod
    def default(cls) -> ContentCatalog:
        return cls(
            invaders=INVADER_DEFS.values(),
            rooms=ROOM_DEFS.values(),
            inhabitants=INHABITANT_DEFS.values(),
            composition=DEFAULT_COMPOSITION_WEIGHTS,
        )

    # -- lookups --

    def get_invader(self, definition_id: str) -> InvaderDefinition | None:
        return self._invaders.get(definition_id)

    def get_room(self, room_type_id: str) -> RoomDefinition | None:
        return self._rooms.get(room_type_id)

    def get_inhabitant(self, definition_id: str) -> InhabitantDefinition | None:
        return self._inhabitants.get(definition_id)

    def require_invader(self, definition_id: str) -> InvaderDefinition:
        d = self.get_invader(definition_id)
        if d is None:
            raise UnknownContentError("invader", definition_id)
        return d

    def require_inhabitant(self, definition_id: str) -> InhabitantDefinition:
        d = self.get_inhabitant(definition_id)
        if d is None:
            raise UnknownContentError("inhabitant", definition_id)
        return d

    # -- collections --

    def invaders(self) -> list[InvaderDefinition]:
        return list(self._invaders.values())

    def rooms(self) -> list[RoomDefinition]:
        return list(self._rooms.values())

    def inhabitants(self) -> list[InhabitantDefinition]:
        return list(self._inhabitants.values())

    def room_type_ids_for_role(self, role: RoomRole) -> list[str]:
        return [r.id for r in self._rooms.values() if r.role == role]

    def inhabitant_tier(self, definition_id: str) -> int:
        """Tier of an inhabitant definition; unknown definitions count as tier 1."""
        d = self.get_inhabitant(definition_id)
        return d.tier if d is not None else 1

    @property
    def composition(self) -> CompositionWeightConfig | None:
        return self._composition


DEFAULT_CATALOG = ContentCatalog.default()
