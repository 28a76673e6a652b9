"""Enumerations used throughout the invasion engine."""

from __future__ import annotations

from enum import IntEnum, StrEnum, unique


@unique
class CombatantSide(StrEnum):
    """Which side of the encounter a combatant fights for."""

    DEFENDER = "defender"
    INVADER = "invader"


@unique
class TurnAction(StrEnum):
    """Actions a combatant can take on its turn."""

    ATTACK = "attack"
    MOVE = "move"
    WAIT = "wait"


@unique
class ObjectiveType(StrEnum):
    """Goals an invading party can pursue."""

    DESTROY_ALTAR = "DestroyAltar"
    SLAY_MONSTER = "SlayMonster"
    RESCUE_PRISONER = "RescuePrisoner"
    STEAL_TREASURE = "StealTreasure"
    SEAL_PORTAL = "SealPortal"
    DEFILE_LIBRARY = "DefileLibrary"
    PLUNDER_VAULT = "PlunderVault"
    SCOUT_DUNGEON = "ScoutDungeon"


@unique
class InvasionOutcome(StrEnum):
    """Outcome from the defender's point of view."""

    VICTORY = "victory"
    DEFEAT = "defeat"


@unique
class InvasionEndReason(StrEnum):
    """Why an invasion ended. Declared in end-check priority order."""

    ALTAR_DESTROYED = "altar_destroyed"
    OBJECTIVES_COMPLETED = "objectives_completed"
    ALL_INVADERS_ELIMINATED = "all_invaders_eliminated"
    TURN_LIMIT_REACHED = "turn_limit_reached"


@unique
class InvaderClass(StrEnum):
    """Adventurer classes that make up an invading party."""

    WARRIOR = "warrior"
    ROGUE = "rogue"
    MAGE = "mage"
    CLERIC = "cleric"
    PALADIN = "paladin"
    RANGER = "ranger"


@unique
class PrisonerAction(StrEnum):
    """What the dungeon can do with a captured invader."""

    EXECUTE = "execute"
    RANSOM = "ransom"
    CONVERT = "convert"
    SACRIFICE = "sacrifice"
    EXPERIMENT = "experiment"


@unique
class ResourceType(StrEnum):
    """Resources tracked by the dungeon economy."""

    CRYSTALS = "crystals"
    FOOD = "food"
    GOLD = "gold"
    FLUX = "flux"
    RESEARCH = "research"
    ESSENCE = "essence"
    CORRUPTION = "corruption"


@unique
class SpecialInvasionType(StrEnum):
    """Invasions that bypass the regular schedule."""

    CRUSADE = "crusade"
    RAID = "raid"
    BOUNTY_HUNTER = "bounty_hunter"


@unique
class RoomRole(StrEnum):
    """Functional roles of dungeon rooms the invasion engine cares about."""

    ALTAR = "altar"
    TREASURE_VAULT = "treasure_vault"
    SHADOW_LIBRARY = "shadow_library"
    LEY_LINE_NEXUS = "ley_line_nexus"
    TORTURE_CHAMBER = "torture_chamber"
    BARRACKS = "barracks"
    OTHER = "other"


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    COMBAT = 0
    LOOT = 1
    AI_DECISION = 2
    OBJECTIVES = 3
    COMPOSITION = 4
    PRISONERS = 5
    SCHEDULE = 6
