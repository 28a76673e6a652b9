"""Tests for the initiative scheduler."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dataclasses import replace

from invasion.combat.turn_queue import (
    advance_turn,
    build_turn_queue,
    create_combatant,
    get_alive_combatants,
    get_current_actor,
    is_round_complete,
    start_new_round,
)
from invasion.core.enums import CombatantSide
from invasion.core.models import CombatantStats, Position


def _make_combatant(cid: str, speed: int, side: CombatantSide = CombatantSide.DEFENDER, hp: int = 10):
    return create_combatant(
        cid, side, cid,
        CombatantStats(hp=hp, max_hp=10, attack=5, defense=2, speed=speed),
        Position(0, 0),
    )


class TestBuildTurnQueue:

    def test_sorted_by_speed_descending(self):
        queue = build_turn_queue([
            _make_combatant("slow", 2),
            _make_combatant("fast", 9),
            _make_combatant("mid", 5),
        ])
        assert [c.id for c in queue.combatants] == ["fast", "mid", "slow"]
        assert queue.round == 1
        assert queue.current_index == 0

    def test_defender_wins_speed_tie(self):
        queue = build_turn_queue([
            _make_combatant("inv", 5, CombatantSide.INVADER),
            _make_combatant("def", 5, CombatantSide.DEFENDER),
        ])
        assert [c.id for c in queue.combatants] == ["def", "inv"]

    def test_equal_keys_keep_input_order(self):
        queue = build_turn_queue([
            _make_combatant("a", 5),
            _make_combatant("b", 5),
            _make_combatant("c", 5),
        ])
        assert [c.id for c in queue.combatants] == ["a", "b", "c"]

    def test_input_not_mutated(self):
        combatants = [_make_combatant("a", 1), _make_combatant("b", 9)]
        build_turn_queue(combatants)
        assert [c.id for c in combatants] == ["a", "b"]

    def test_new_combatant_has_not_acted(self):
        c = _make_combatant("a", 3)
        assert c.has_acted is False
        assert c.hp == 10


class TestAdvanceTurn:

    def test_current_actor_is_first(self):
        queue = build_turn_queue([_make_combatant("a", 9), _make_combatant("b", 1)])
        assert get_current_actor(queue).id == "a"

    def test_advance_marks_acted_and_moves_on(self):
        queue = build_turn_queue([_make_combatant("a", 9), _make_combatant("b", 1)])
        queue = advance_turn(queue)
        assert queue.combatants[0].has_acted is True
        assert get_current_actor(queue).id == "b"

    def test_dead_combatants_are_skipped(self):
        queue = build_turn_queue([
            _make_combatant("a", 9),
            _make_combatant("dead", 5, hp=0),
            _make_combatant("c", 1),
        ])
        queue = advance_turn(queue)
        assert get_current_actor(queue).id == "c"

    def test_advance_never_mutates_input(self):
        queue = build_turn_queue([_make_combatant("a", 9), _make_combatant("b", 1)])
        advance_turn(queue)
        assert queue.combatants[0].has_acted is False
        assert queue.current_index == 0

    def test_round_complete_after_everyone_acted(self):
        queue = build_turn_queue([_make_combatant("a", 9), _make_combatant("b", 1)])
        assert not is_round_complete(queue)
        queue = advance_turn(advance_turn(queue))
        assert is_round_complete(queue)
        assert get_current_actor(queue) is None

    def test_advance_past_end_is_stable(self):
        queue = build_turn_queue([_make_combatant("a", 9)])
        queue = advance_turn(queue)
        again = advance_turn(queue)
        assert again.current_index == len(again.combatants)
        assert is_round_complete(again)

    def test_empty_queue_is_complete(self):
        queue = build_turn_queue([])
        assert is_round_complete(queue)
        assert get_current_actor(queue) is None


class TestNewRound:

    def test_new_round_resets_and_drops_dead(self):
        queue = build_turn_queue([_make_combatant("a", 9), _make_combatant("b", 1)])
        queue = advance_turn(advance_turn(queue))
        killed = replace(queue, combatants=(queue.combatants[0], replace(queue.combatants[1], hp=0)))

        fresh = start_new_round(killed)
        assert fresh.round == 2
        assert fresh.current_index == 0
        assert [c.id for c in fresh.combatants] == ["a"]
        assert all(not c.has_acted for c in fresh.combatants)

    def test_new_round_resorts_by_speed(self):
        queue = build_turn_queue([_make_combatant("a", 9), _make_combatant("b", 1)])
        slowed = replace(queue, combatants=(replace(queue.combatants[0], speed=0), queue.combatants[1]))
        fresh = start_new_round(slowed)
        assert [c.id for c in fresh.combatants] == ["b", "a"]

    def test_alive_combatants(self):
        queue = build_turn_queue([_make_combatant("a", 9), _make_combatant("dead", 1, hp=0)])
        assert [c.id for c in get_alive_combatants(queue)] == ["a"]
