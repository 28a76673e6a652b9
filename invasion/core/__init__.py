"""Core data models, enums, content definitions and the dungeon view."""

from invasion.core.enums import (
    CombatantSide,
    Domain,
    InvaderClass,
    InvasionEndReason,
    InvasionOutcome,
    ObjectiveType,
    PrisonerAction,
    ResourceType,
    RoomRole,
    SpecialInvasionType,
    TurnAction,
)
from invasion.core.models import (
    ActionResult,
    Combatant,
    CombatantStats,
    CombatResult,
    InvaderInstance,
    InvaderStats,
    Position,
    TurnQueue,
)
from invasion.core.content import DEFAULT_CATALOG, ContentCatalog
from invasion.core.dungeon import DungeonLayout, PlacedInhabitant, PlacedRoom, ResourceLevel

__all__ = [
    "ActionResult",
    "Combatant",
    "CombatantSide",
    "CombatantStats",
    "CombatResult",
    "ContentCatalog",
    "DEFAULT_CATALOG",
    "Domain",
    "DungeonLayout",
    "InvaderClass",
    "InvaderInstance",
    "InvaderStats",
    "InvasionEndReason",
    "InvasionOutcome",
    "ObjectiveType",
    "PlacedInhabitant",
    "PlacedRoom",
    "Position",
    "PrisonerAction",
    "ResourceLevel",
    "ResourceType",
    "RoomRole",
    "SpecialInvasionType",
    "TurnAction",
    "TurnQueue",
]
