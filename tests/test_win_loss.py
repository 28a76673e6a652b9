"""Tests for the invasion state machine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dataclasses import replace

from invasion.core.enums import InvasionEndReason, InvasionOutcome, ObjectiveType
from invasion.core.models import InvaderInstance
from invasion.systems.objectives import InvasionObjective
from invasion.systems.win_loss import (
    advance_invasion_turn,
    check_invasion_end,
    create_history_entry,
    create_invasion_state,
    damage_altar,
    end_invasion,
    mark_invader_killed,
    record_defender_loss,
    resolve_detailed_result,
    update_objective,
)


def _make_invader(iid: str, hp: int = 20) -> InvaderInstance:
    return InvaderInstance(id=iid, definition_id="invader-sellsword", current_hp=hp, max_hp=20)


def _make_objectives() -> list[InvasionObjective]:
    return [
        InvasionObjective(
            id="primary", type=ObjectiveType.DESTROY_ALTAR, name="Destroy Altar",
            description="", is_primary=True,
        ),
        InvasionObjective(id="s1", type=ObjectiveType.SCOUT_DUNGEON, name="Scout", description=""),
        InvasionObjective(id="s2", type=ObjectiveType.SEAL_PORTAL, name="Seal", description=""),
    ]


def _make_state(**kwargs):
    return create_invasion_state(
        [_make_invader("i1"), _make_invader("i2")],
        _make_objectives(),
        defender_count=3,
        invasion_id="inv-1",
        **kwargs,
    )


def _complete(state, oid):
    obj = next(o for o in state.objectives if o.id == oid)
    return update_objective(state, replace(obj, is_completed=True, progress=100))


class TestCreate:

    def test_initial_values(self):
        state = _make_state()
        assert state.invasion_id == "inv-1"
        assert state.current_turn == 0
        assert state.max_turns == 30
        assert state.altar_hp == 100
        assert state.altar_max_hp == 100
        assert state.defender_count == 3
        assert state.is_active

    def test_generated_id_when_missing(self):
        a = create_invasion_state([], [], 0)
        b = create_invasion_state([], [], 0)
        assert a.invasion_id and b.invasion_id
        assert a.invasion_id != b.invasion_id

    def test_fresh_state_has_no_end(self):
        assert check_invasion_end(_make_state()) is None


class TestAltar:

    def test_damage_and_progress(self):
        state = damage_altar(_make_state(), 25)
        assert state.altar_hp == 75
        primary = state.objectives[0]
        assert primary.progress == 25
        assert not primary.is_completed

    def test_secondaries_untouched(self):
        state = damage_altar(_make_state(), 25)
        assert all(o.progress == 0 for o in state.objectives[1:])

    def test_hp_floor_zero(self):
        state = damage_altar(_make_state(), 500)
        assert state.altar_hp == 0
        assert state.objectives[0].progress == 100
        assert state.objectives[0].is_completed

    def test_ten_hits_destroy_altar(self):
        state = _make_state()
        for _ in range(10):
            state = damage_altar(state, 10)
        assert state.altar_hp == 0
        assert check_invasion_end(state) == InvasionEndReason.ALTAR_DESTROYED

        result = resolve_detailed_result(state, day=12, end_reason=InvasionEndReason.ALTAR_DESTROYED)
        assert result.outcome == InvasionOutcome.DEFEAT
        assert result.reward_multiplier == 0.0

    def test_input_state_unchanged(self):
        state = _make_state()
        damage_altar(state, 10)
        assert state.altar_hp == 100


class TestKills:

    def test_kill_counts_once(self):
        state = mark_invader_killed(_make_state(), "i1")
        assert state.invaders_killed == 1
        assert state.invaders[0].current_hp == 0

        again = mark_invader_killed(state, "i1")
        assert again is state
        assert again.invaders_killed == 1

    def test_unknown_id_is_noop(self):
        state = _make_state()
        assert mark_invader_killed(state, "nobody") is state

    def test_all_eliminated(self):
        state = mark_invader_killed(mark_invader_killed(_make_state(), "i1"), "i2")
        assert check_invasion_end(state) == InvasionEndReason.ALL_INVADERS_ELIMINATED

    def test_empty_party_is_eliminated(self):
        state = create_invasion_state([], _make_objectives(), defender_count=1)
        assert check_invasion_end(state) == InvasionEndReason.ALL_INVADERS_ELIMINATED

    def test_defender_loss(self):
        state = record_defender_loss(record_defender_loss(_make_state()))
        assert state.defenders_lost == 2


class TestEndPriority:

    def test_two_secondaries_end_invasion(self):
        state = _complete(_complete(_make_state(), "s1"), "s2")
        assert check_invasion_end(state) == InvasionEndReason.OBJECTIVES_COMPLETED

    def test_one_secondary_is_not_enough(self):
        state = _complete(_make_state(), "s1")
        assert check_invasion_end(state) is None

    def test_altar_beats_objectives_and_elimination(self):
        state = _complete(_complete(_make_state(), "s1"), "s2")
        state = mark_invader_killed(mark_invader_killed(state, "i1"), "i2")
        state = damage_altar(state, 100)
        assert check_invasion_end(state) == InvasionEndReason.ALTAR_DESTROYED

    def test_objectives_beat_elimination(self):
        state = _complete(_complete(_make_state(), "s1"), "s2")
        state = mark_invader_killed(mark_invader_killed(state, "i1"), "i2")
        assert check_invasion_end(state) == InvasionEndReason.OBJECTIVES_COMPLETED

    def test_elimination_beats_turn_limit(self):
        state = _make_state(max_turns=1)
        state = advance_invasion_turn(state)
        state = mark_invader_killed(mark_invader_killed(state, "i1"), "i2")
        assert check_invasion_end(state) == InvasionEndReason.ALL_INVADERS_ELIMINATED

    def test_turn_limit(self):
        state = _make_state(max_turns=3)
        for _ in range(3):
            assert check_invasion_end(state) is None
            state = advance_invasion_turn(state)
        assert check_invasion_end(state) == InvasionEndReason.TURN_LIMIT_REACHED

    def test_ended_state_reports_nothing(self):
        state = end_invasion(damage_altar(_make_state(), 100))
        assert not state.is_active
        assert check_invasion_end(state) is None


class TestResults:

    def test_victory_result_and_history(self):
        state = _complete(_make_state(), "s1")
        state = mark_invader_killed(state, "i1")
        state = record_defender_loss(advance_invasion_turn(state))

        result = resolve_detailed_result(state, day=7, end_reason=InvasionEndReason.TURN_LIMIT_REACHED)
        assert result.outcome == InvasionOutcome.VICTORY
        assert result.invasion_id == "inv-1"
        assert result.turns_taken == 1
        assert result.invader_count == 2
        assert result.invaders_killed == 1
        assert result.defender_count == 3
        assert result.defenders_lost == 1
        assert result.objectives_completed == 1
        assert result.objectives_total == 2
        assert result.reward_multiplier == 1.0

        entry = create_history_entry(result)
        assert entry.day == 7
        assert entry.type == "scheduled"
        assert entry.outcome == InvasionOutcome.VICTORY
        assert entry.end_reason == InvasionEndReason.TURN_LIMIT_REACHED
        assert entry.turns_taken == 1

    def test_update_objective_matches_by_id(self):
        state = _make_state()
        replacement = replace(state.objectives[2], progress=40)
        state = update_objective(state, replacement)
        assert state.objectives[2].progress == 40
        assert state.objectives[1].progress == 0
