"""Tests for the AI decision policy."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from invasion.ai.policy import (
    choose_step,
    execute_ai_turn,
    find_nearest_enemy,
    resolve_ai_action,
    step_toward,
)
from invasion.combat.turn_queue import build_turn_queue, create_combatant
from invasion.core.enums import CombatantSide, TurnAction
from invasion.core.models import CombatantStats, Position


def _make(cid: str, side: CombatantSide, pos: tuple | None, hp: int = 20, speed: int = 5):
    return create_combatant(
        cid, side, cid,
        CombatantStats(hp=hp, max_hp=20, attack=8, defense=3, speed=speed),
        Position(*pos) if pos is not None else None,
    )


class TestStepToward:

    def test_dominant_axis_x(self):
        assert step_toward(Position(0, 0), Position(5, 1)) == Position(1, 0)

    def test_dominant_axis_y(self):
        assert step_toward(Position(0, 0), Position(1, 5)) == Position(0, 1)

    def test_tie_prefers_y(self):
        assert step_toward(Position(2, 2), Position(0, 0)) == Position(2, 1)

    def test_same_tile(self):
        assert step_toward(Position(2, 2), Position(2, 2)) is None


class TestChooseStep:

    def test_falls_back_to_other_axis(self):
        actor = _make("a", CombatantSide.INVADER, (0, 0))
        blocker = _make("b", CombatantSide.INVADER, (0, 1))
        assert choose_step(actor, Position(2, 2), [actor, blocker]) == Position(1, 0)

    def test_both_axes_blocked(self):
        actor = _make("a", CombatantSide.INVADER, (0, 0))
        blockers = [_make("b", CombatantSide.INVADER, (0, 1)), _make("c", CombatantSide.INVADER, (1, 0))]
        assert choose_step(actor, Position(2, 2), [actor, *blockers]) is None

    def test_no_fallback_when_aligned(self):
        actor = _make("a", CombatantSide.INVADER, (0, 0))
        blocker = _make("b", CombatantSide.INVADER, (0, 1))
        assert choose_step(actor, Position(0, 4), [actor, blocker]) is None


class TestDecisions:

    def test_attacks_weakest_adjacent(self):
        actor = _make("a", CombatantSide.DEFENDER, (1, 1))
        strong = _make("s", CombatantSide.INVADER, (1, 0), hp=20)
        weak = _make("w", CombatantSide.INVADER, (1, 2), hp=5)
        decision = resolve_ai_action(actor, [actor, strong, weak])
        assert decision.action == TurnAction.ATTACK
        assert decision.target_id == "w"

    def test_hp_tie_keeps_first(self):
        actor = _make("a", CombatantSide.DEFENDER, (1, 1))
        first = _make("f", CombatantSide.INVADER, (1, 0))
        second = _make("s", CombatantSide.INVADER, (1, 2))
        assert resolve_ai_action(actor, [actor, first, second]).target_id == "f"

    def test_moves_toward_nearest(self):
        actor = _make("a", CombatantSide.DEFENDER, (0, 0))
        near = _make("n", CombatantSide.INVADER, (0, 3))
        far = _make("f", CombatantSide.INVADER, (6, 6))
        assert find_nearest_enemy(actor, [actor, far, near]).id == "n"
        decision = resolve_ai_action(actor, [actor, far, near])
        assert decision.action == TurnAction.MOVE
        assert decision.target_position == Position(0, 1)

    def test_waits_without_enemies(self):
        actor = _make("a", CombatantSide.DEFENDER, (0, 0))
        ally = _make("b", CombatantSide.DEFENDER, (3, 3))
        assert resolve_ai_action(actor, [actor, ally]).action == TurnAction.WAIT

    def test_waits_without_position(self):
        actor = _make("a", CombatantSide.DEFENDER, None)
        enemy = _make("e", CombatantSide.INVADER, (0, 1))
        assert resolve_ai_action(actor, [actor, enemy]).action == TurnAction.WAIT

    def test_ignores_dead_enemies(self):
        actor = _make("a", CombatantSide.DEFENDER, (0, 0))
        corpse = _make("e", CombatantSide.INVADER, (0, 1), hp=0)
        assert find_nearest_enemy(actor, [actor, corpse]) is None


class TestExecuteAiTurn:

    def test_current_actor_moves(self):
        queue = build_turn_queue([
            _make("a", CombatantSide.DEFENDER, (0, 0), speed=9),
            _make("e", CombatantSide.INVADER, (0, 4)),
        ])
        new_queue, result = execute_ai_turn(queue, lambda: 0.5)
        assert result.actor_id == "a"
        assert result.action == TurnAction.MOVE
        assert new_queue.find("a").position == Position(0, 1)
        assert new_queue.current_index == 0

    def test_empty_queue_waits(self):
        queue = build_turn_queue([])
        new_queue, result = execute_ai_turn(queue, lambda: 0.5)
        assert new_queue is queue
        assert result.action == TurnAction.WAIT
        assert result.actor_id is None
