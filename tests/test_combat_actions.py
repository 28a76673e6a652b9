"""Tests for attack resolution and action executors."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from invasion.combat.actions import execute_attack, execute_move, execute_wait
from invasion.combat.resolver import (
    calculate_damage,
    does_attack_hit,
    resolve_combat,
    roll_d20,
)
from invasion.combat.turn_queue import (
    build_turn_queue,
    create_combatant,
    get_current_actor,
    is_round_complete,
)
from invasion.core.enums import CombatantSide, TurnAction
from invasion.core.models import CombatantStats, Position

from tests.helpers.invasion_arena import InvasionArena


def _make(cid: str, side: CombatantSide, attack: int = 8, defense: int = 3, hp: int = 20):
    return create_combatant(
        cid, side, cid,
        CombatantStats(hp=hp, max_hp=hp, attack=attack, defense=defense, speed=5),
        Position(0, 0),
    )


class TestRollD20:

    def test_bounds(self):
        assert roll_d20(lambda: 0.0) == 1
        assert roll_d20(lambda: 0.95) == 20
        assert roll_d20(lambda: 0.9999) == 20

    def test_midpoint(self):
        assert roll_d20(lambda: 0.5) == 11


class TestHitAndDamage:

    def test_natural_one_always_misses(self):
        attacker = _make("a", CombatantSide.DEFENDER, attack=100)
        defender = _make("d", CombatantSide.INVADER, defense=0)
        assert does_attack_hit(1, attacker, defender) is False

    def test_natural_twenty_always_hits(self):
        attacker = _make("a", CombatantSide.DEFENDER, attack=0)
        defender = _make("d", CombatantSide.INVADER, defense=100)
        assert does_attack_hit(20, attacker, defender) is True

    def test_threshold(self):
        attacker = _make("a", CombatantSide.DEFENDER, attack=5)
        defender = _make("d", CombatantSide.INVADER, defense=5)
        assert does_attack_hit(10, attacker, defender) is True
        assert does_attack_hit(9, attacker, defender) is False

    def test_damage_floor_is_one(self):
        attacker = _make("a", CombatantSide.DEFENDER, attack=2)
        defender = _make("d", CombatantSide.INVADER, defense=10)
        assert calculate_damage(attacker, defender, 12) == 1

    def test_critical_doubles_damage(self):
        attacker = _make("a", CombatantSide.DEFENDER, attack=8)
        defender = _make("d", CombatantSide.INVADER, defense=3)
        assert calculate_damage(attacker, defender, 12) == 5
        assert calculate_damage(attacker, defender, 20) == 10


class TestResolveCombat:

    def test_zero_rng_misses(self):
        result = resolve_combat(
            _make("a", CombatantSide.DEFENDER), _make("d", CombatantSide.INVADER), lambda: 0.0,
        )
        assert result.hit is False
        assert result.roll == 1
        assert result.damage == 0
        assert result.defender_hp == 20
        assert result.defender_dead is False

    def test_high_rng_rolls_twenty_and_crits(self):
        result = resolve_combat(
            _make("a", CombatantSide.DEFENDER), _make("d", CombatantSide.INVADER), lambda: 0.95,
        )
        assert result.hit is True
        assert result.roll == 20
        assert result.critical is True
        assert result.damage == 10
        assert result.defender_hp == 10

    def test_hp_clamped_at_zero(self):
        result = resolve_combat(
            _make("a", CombatantSide.DEFENDER, attack=50),
            _make("d", CombatantSide.INVADER, hp=5),
            lambda: 0.95,
        )
        assert result.defender_hp == 0
        assert result.defender_dead is True


class TestExecutors:

    def test_move_updates_position_only(self):
        queue = build_turn_queue([_make("a", CombatantSide.DEFENDER)])
        new_queue, result = execute_move(queue, "a", Position(1, 0))
        assert new_queue.find("a").position == Position(1, 0)
        assert new_queue.find("a").has_acted is False
        assert queue.find("a").position == Position(0, 0)
        assert result.action == TurnAction.MOVE
        assert result.target_position == Position(1, 0)

    def test_attack_applies_damage(self):
        queue = build_turn_queue([_make("a", CombatantSide.DEFENDER), _make("d", CombatantSide.INVADER)])
        new_queue, result = execute_attack(queue, "a", "d", lambda: 0.95)
        assert new_queue.find("d").hp == 10
        assert queue.find("d").hp == 20
        assert result.combat_result.critical is True
        assert new_queue.current_index == queue.current_index

    def test_attack_on_unknown_target_is_noop(self):
        queue = build_turn_queue([_make("a", CombatantSide.DEFENDER)])
        new_queue, result = execute_attack(queue, "a", "ghost", lambda: 0.95)
        assert new_queue is queue
        assert result.combat_result is None

    def test_wait(self):
        result = execute_wait("a")
        assert result.action == TurnAction.WAIT
        assert result.actor_id == "a"
        assert result.combat_result is None


class TestArenaCombat:

    def test_faster_defender_strikes_first(self):
        arena = InvasionArena(rng_values=[0.95])
        arena.add_defender("d1", pos=(0, 0), speed=7)
        arena.add_invader("i1", pos=(0, 1), speed=5)

        first = arena.step()
        assert first.actor_id == "d1"
        assert first.action == TurnAction.ATTACK
        assert arena.combatant("i1").hp == 10
        assert not is_round_complete(arena.queue)
        assert get_current_actor(arena.queue).id == "i1"

        second = arena.step()
        assert second.actor_id == "i1"
        assert arena.combatant("d1").hp == 10
        assert arena.queue.round == 2
        assert get_current_actor(arena.queue).id == "d1"

    def test_all_misses_leave_everyone_standing(self):
        arena = InvasionArena(rng_values=[0.0])
        arena.add_defender("d1", pos=(0, 0))
        arena.add_invader("i1", pos=(0, 1))
        arena.run_turns(10)
        assert arena.combatant("d1").hp == 20
        assert arena.combatant("i1").hp == 20

    def test_fight_to_elimination(self):
        arena = InvasionArena(rng_values=[0.95])
        arena.add_defender("d1", pos=(0, 0), speed=9, attack=30)
        arena.add_invader("i1", pos=(0, 1))
        arena.add_invader("i2", pos=(1, 0))

        reason = arena.run_until_end()
        assert reason == "all_invaders_eliminated"
        assert arena.state.invaders_killed == 2
