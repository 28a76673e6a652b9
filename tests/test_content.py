"""Tests for the content catalog and the dungeon view."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from invasion.core.content import DEFAULT_CATALOG, ContentCatalog
from invasion.core.dungeon import DungeonLayout, PlacedInhabitant, sample_layout
from invasion.core.enums import InvaderClass, ResourceType, RoomRole
from invasion.errors import InvalidLayoutError, InvasionError, UnknownContentError


class TestCatalog:

    def test_every_class_has_an_invader(self):
        classes = {d.invader_class for d in DEFAULT_CATALOG.invaders()}
        assert classes == set(InvaderClass)

    def test_lookup_unknown_returns_none(self):
        assert DEFAULT_CATALOG.get_invader("nope") is None
        assert DEFAULT_CATALOG.get_room("nope") is None
        assert DEFAULT_CATALOG.get_inhabitant("nope") is None

    def test_require_raises(self):
        with pytest.raises(UnknownContentError) as info:
            DEFAULT_CATALOG.require_inhabitant("inhabitant-nope")
        assert info.value.kind == "inhabitant"
        assert info.value.content_id == "inhabitant-nope"
        with pytest.raises(LookupError):
            DEFAULT_CATALOG.require_invader("invader-nope")

    def test_require_known(self):
        assert DEFAULT_CATALOG.require_inhabitant("inhabitant-orc-brute").tier == 2

    def test_unknown_inhabitant_counts_as_tier_one(self):
        assert DEFAULT_CATALOG.inhabitant_tier("inhabitant-nope") == 1

    def test_rooms_by_role(self):
        assert DEFAULT_CATALOG.room_type_ids_for_role(RoomRole.ALTAR) == ["room-altar"]
        assert DEFAULT_CATALOG.room_type_ids_for_role(RoomRole.OTHER) == ["room-crystal-mine"]

    def test_inhabitant_listing(self):
        ids = [d.id for d in DEFAULT_CATALOG.inhabitants()]
        assert "inhabitant-goblin" in ids
        assert len(ids) == len(set(ids))

    def test_empty_catalog(self):
        catalog = ContentCatalog()
        assert catalog.invaders() == []
        assert catalog.composition is None

    def test_error_hierarchy(self):
        assert issubclass(UnknownContentError, InvasionError)
        assert issubclass(InvalidLayoutError, ValueError)


class TestDungeonLayout:

    def test_find_room_by_role(self):
        layout = sample_layout()
        assert layout.find_room_by_role(DEFAULT_CATALOG, RoomRole.TREASURE_VAULT).id == "r-vault"
        assert layout.find_room_by_role(DEFAULT_CATALOG, RoomRole.TORTURE_CHAMBER) is None
        assert layout.has_room_with_role(DEFAULT_CATALOG, RoomRole.ALTAR)

    def test_find_room_with_no_types(self):
        assert sample_layout().find_room([]) is None

    def test_strongest_inhabitant_keeps_roster_order_on_ties(self):
        strongest = sample_layout().strongest_inhabitant(DEFAULT_CATALOG, min_tier=2)
        assert strongest.instance_id == "inh-orc-1"

    def test_strongest_inhabitant_below_tier(self):
        layout = DungeonLayout(inhabitants=(
            PlacedInhabitant(instance_id="g", definition_id="inhabitant-goblin"),
        ))
        assert layout.strongest_inhabitant(DEFAULT_CATALOG, min_tier=2) is None
        assert layout.strongest_inhabitant(DEFAULT_CATALOG).instance_id == "g"

    def test_missing_resource_is_empty(self):
        layout = sample_layout()
        assert layout.resource(ResourceType.GOLD).current == 400
        assert layout.resource(ResourceType.FLUX).max == 0
