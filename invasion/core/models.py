"""Core data models: Position, Combatant, TurnQueue, action results, invaders."""

from __future__ import annotations

from dataclasses import dataclass

from invasion.core.enums import CombatantSide, TurnAction


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable 2D integer tile coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def manhattan(self, other: Position) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# Cardinal offsets in north, south, west, east order
CARDINAL_OFFSETS: tuple[Position, ...] = (
    Position(0, -1),
    Position(0, 1),
    Position(-1, 0),
    Position(1, 0),
)


@dataclass(frozen=True, slots=True)
class CombatantStats:
    """Stat block a combatant is built from."""

    hp: int
    max_hp: int
    attack: int
    defense: int
    speed: int


@dataclass(frozen=True, slots=True)
class Combatant:
    """A participant in the turn queue.

    Never mutated: every change goes through ``dataclasses.replace``.
    """

    id: str
    side: CombatantSide
    name: str
    speed: int
    hp: int
    max_hp: int
    attack: int
    defense: int
    has_acted: bool = False
    position: Position | None = None


@dataclass(frozen=True, slots=True)
class TurnQueue:
    """Initiative order for one encounter."""

    combatants: tuple[Combatant, ...] = ()
    current_index: int = 0
    round: int = 1

    def find(self, combatant_id: str) -> Combatant | None:
        for c in self.combatants:
            if c.id == combatant_id:
                return c
        return None


@dataclass(frozen=True, slots=True)
class CombatResult:
    """Outcome of a single attack roll. The caller applies it."""

    hit: bool
    roll: int
    damage: int
    defender_hp: int
    defender_dead: bool
    critical: bool = False


@dataclass(frozen=True, slots=True)
class ActionResult:
    """What happened on a turn, independent of whose turn comes next."""

    action: TurnAction
    actor_id: str | None
    target_id: str | None = None
    target_position: Position | None = None
    combat_result: CombatResult | None = None


@dataclass(frozen=True, slots=True)
class InvaderStats:
    """Base stats of an invader definition."""

    hp: int
    attack: int
    defense: int
    speed: int

    def average(self) -> float:
        return (self.hp + self.attack + self.defense + self.speed) / 4


@dataclass(frozen=True, slots=True)
class InvaderInstance:
    """One invader taking part in an invasion."""

    id: str
    definition_id: str
    current_hp: int
    max_hp: int

    @property
    def alive(self) -> bool:
        return self.current_hp > 0
