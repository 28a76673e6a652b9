"""Read-only view of the dungeon as seen by the invasion engine.

The wider game owns floors, rooms and inhabitants; the invasion engine only
needs to ask a few questions about them ("is there a vault", "who is the
strongest inhabitant"), so this module models exactly that slice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

from invasion.core.enums import ResourceType, RoomRole

if TYPE_CHECKING:
    from invasion.core.content import ContentCatalog


@dataclass(frozen=True, slots=True)
class PlacedRoom:
    """A room instance placed on a dungeon floor."""

    id: str
    room_type_id: str
    floor: int = 0


@dataclass(frozen=True, slots=True)
class PlacedInhabitant:
    """A creature living in the dungeon."""

    instance_id: str
    definition_id: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class ResourceLevel:
    current: int = 0
    max: int = 0


@dataclass(frozen=True, slots=True)
class DungeonLayout:
    """Snapshot of the dungeon state the invasion engine reads from."""

    rooms: tuple[PlacedRoom, ...] = ()
    inhabitants: tuple[PlacedInhabitant, ...] = ()
    resources: Mapping[str, ResourceLevel] = field(default_factory=lambda: MappingProxyType({}))
    completed_research: int = 0
    day: int = 1

    # -- room queries --

    def find_room(self, room_type_ids: Iterable[str]) -> PlacedRoom | None:
        """First placed room whose type is in *room_type_ids* (floor order)."""
        wanted = set(room_type_ids)
        if not wanted:
            return None
        for room in self.rooms:
            if room.room_type_id in wanted:
                return room
        return None

    def find_room_by_role(self, catalog: ContentCatalog, role: RoomRole) -> PlacedRoom | None:
        return self.find_room(catalog.room_type_ids_for_role(role))

    def has_room_with_role(self, catalog: ContentCatalog, role: RoomRole) -> bool:
        return self.find_room_by_role(catalog, role) is not None

    # -- inhabitant queries --

    def strongest_inhabitant(self, catalog: ContentCatalog, min_tier: int = 1) -> PlacedInhabitant | None:
        """Highest-tier inhabitant at or above *min_tier*; ties keep roster order."""
        best: PlacedInhabitant | None = None
        best_tier = min_tier - 1
        for inhabitant in self.inhabitants:
            tier = catalog.inhabitant_tier(inhabitant.definition_id)
            if tier >= min_tier and tier > best_tier:
                best = inhabitant
                best_tier = tier
        return best

    # -- resources --

    def resource(self, resource: ResourceType) -> ResourceLevel:
        return self.resources.get(resource.value, ResourceLevel())


def sample_layout(day: int = 12) -> DungeonLayout:
    """A small but complete dungeon used by the CLI and API demos."""
    rooms = (
        PlacedRoom(id="r-altar", room_type_id="room-altar"),
        PlacedRoom(id="r-barracks", room_type_id="room-barracks"),
        PlacedRoom(id="r-vault", room_type_id="room-treasure-vault"),
        PlacedRoom(id="r-library", room_type_id="room-shadow-library", floor=1),
        PlacedRoom(id="r-nexus", room_type_id="room-ley-line-nexus", floor=1),
        PlacedRoom(id="r-mine", room_type_id="room-crystal-mine", floor=1),
    )
    inhabitants = (
        PlacedInhabitant(instance_id="inh-goblin-1", definition_id="inhabitant-goblin", name="Snik"),
        PlacedInhabitant(instance_id="inh-goblin-2", definition_id="inhabitant-goblin", name="Grub"),
        PlacedInhabitant(instance_id="inh-skeleton-1", definition_id="inhabitant-skeleton", name="Rattle"),
        PlacedInhabitant(instance_id="inh-orc-1", definition_id="inhabitant-orc-brute", name="Mokk"),
        PlacedInhabitant(instance_id="inh-wizard-1", definition_id="inhabitant-dark-wizard", name="Vessa"),
    )
    resources = MappingProxyType({
        ResourceType.GOLD.value: ResourceLevel(current=400, max=1000),
        ResourceType.CORRUPTION.value: ResourceLevel(current=20, max=100),
        ResourceType.CRYSTALS.value: ResourceLevel(current=120, max=500),
    })
    return DungeonLayout(
        rooms=rooms,
        inhabitants=inhabitants,
        resources=resources,
        completed_research=2,
        day=day,
    )
