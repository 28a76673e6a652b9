"""Tests for the invasion schedule."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dataclasses import replace

from invasion.core.enums import SpecialInvasionType
from invasion.systems.rng import fixed_source
from invasion.systems.schedule import (
    InvasionSchedule,
    add_special_invasion,
    calculate_next_day,
    get_interval,
    get_last_invasion_day,
    is_in_grace_period,
    process_schedule,
    should_show_warning,
    should_trigger,
)
from invasion.systems.win_loss import InvasionHistoryEntry

# int_range(-2, 3, 0.5) == 0, so every roll below has zero variance
NO_VARIANCE = fixed_source(0.5)


def _scheduled(next_day: int = 45) -> InvasionSchedule:
    return InvasionSchedule(next_invasion_day=next_day, grace_period_end=30)


class TestHelpers:

    def test_interval_shrinks(self):
        assert get_interval(1) == 15
        assert get_interval(59) == 15
        assert get_interval(60) == 10
        assert get_interval(100) == 7

    def test_grace_period(self):
        assert is_in_grace_period(29, 30)
        assert not is_in_grace_period(30, 30)

    def test_last_invasion_day(self):
        assert get_last_invasion_day(InvasionSchedule()) is None
        schedule = InvasionSchedule(invasion_history=(InvasionHistoryEntry(day=4), InvasionHistoryEntry(day=9)))
        assert get_last_invasion_day(schedule) == 9

    def test_should_trigger(self):
        assert not should_trigger(InvasionSchedule(), 100)
        assert not should_trigger(_scheduled(45), 44)
        assert should_trigger(_scheduled(45), 45)
        assert should_trigger(_scheduled(45), 46)


class TestNextDay:

    def test_interval_plus_variance(self):
        assert calculate_next_day(30, None, 30, NO_VARIANCE) == (45, 0)
        assert calculate_next_day(30, None, 30, fixed_source(0.0)) == (43, -2)
        assert calculate_next_day(30, None, 30, fixed_source(0.9999)) == (47, 2)

    def test_never_inside_grace_period(self):
        day, _ = calculate_next_day(1, None, 30, NO_VARIANCE)
        assert day == 30

    def test_minimum_gap_after_last_invasion(self):
        day, _ = calculate_next_day(40, 60, 30, NO_VARIANCE)
        assert day == 63


class TestWarning:

    def test_two_minute_window(self):
        schedule = _scheduled(45)
        assert not should_show_warning(schedule, 44, 23, 57)
        assert should_show_warning(schedule, 44, 23, 58)
        assert should_show_warning(schedule, 44, 23, 59)
        assert not should_show_warning(schedule, 45, 0, 0)

    def test_no_warning_without_date(self):
        assert not should_show_warning(InvasionSchedule(), 44, 23, 59)

    def test_tick_raises_warning_once(self):
        tick = process_schedule(_scheduled(45), 44, 23, 58, NO_VARIANCE)
        assert tick.warning_raised
        assert tick.schedule.warning_active

        again = process_schedule(tick.schedule, 44, 23, 59, NO_VARIANCE)
        assert not again.warning_raised
        assert again.schedule.warning_active

    def test_dismissed_warning_stays_quiet(self):
        schedule = replace(_scheduled(45), warning_dismissed=True)
        tick = process_schedule(schedule, 44, 23, 58, NO_VARIANCE)
        assert not tick.warning_raised
        assert not tick.schedule.warning_active

    def test_warning_cleared_outside_window(self):
        schedule = replace(_scheduled(45), warning_active=True, warning_dismissed=True)
        tick = process_schedule(schedule, 40, 12, 0, NO_VARIANCE)
        assert not tick.schedule.warning_active
        assert not tick.schedule.warning_dismissed


class TestProcessSchedule:

    def test_grace_period_is_quiet(self):
        schedule = InvasionSchedule(grace_period_end=30)
        tick = process_schedule(schedule, 10, 0, 0, NO_VARIANCE)
        assert tick.schedule is schedule
        assert tick.triggered == ()
        assert not tick.warning_raised

    def test_first_roll_after_grace(self):
        tick = process_schedule(InvasionSchedule(grace_period_end=30), 30, 0, 0, NO_VARIANCE)
        assert tick.schedule.next_invasion_day == 45
        assert tick.schedule.next_invasion_variance == 0
        assert tick.triggered == ()

    def test_trigger_logs_and_reschedules(self):
        schedule = replace(_scheduled(45), warning_active=True)
        tick = process_schedule(schedule, 45, 0, 0, NO_VARIANCE)
        assert tick.triggered == ("scheduled",)
        assert tick.schedule.invasion_history[-1] == InvasionHistoryEntry(day=45, type="scheduled")
        assert tick.schedule.next_invasion_day == 60
        assert not tick.schedule.warning_active

    def test_input_schedule_unchanged(self):
        schedule = _scheduled(45)
        process_schedule(schedule, 45, 0, 0, NO_VARIANCE)
        assert schedule.invasion_history == ()
        assert schedule.next_invasion_day == 45


class TestSpecialInvasions:

    def test_queue(self):
        schedule = add_special_invasion(InvasionSchedule(), SpecialInvasionType.CRUSADE, 31, delay=2)
        assert len(schedule.pending_special_invasions) == 1
        assert schedule.pending_special_invasions[0].trigger_day == 33

    def test_fires_on_trigger_day(self):
        schedule = add_special_invasion(_scheduled(80), SpecialInvasionType.CRUSADE, 31, delay=2)

        early = process_schedule(schedule, 32, 0, 0, NO_VARIANCE)
        assert early.triggered == ()
        assert len(early.schedule.pending_special_invasions) == 1

        tick = process_schedule(early.schedule, 33, 0, 0, NO_VARIANCE)
        assert tick.triggered == ("crusade",)
        assert tick.schedule.pending_special_invasions == ()
        assert tick.schedule.invasion_history == (InvasionHistoryEntry(day=33, type="crusade"),)

    def test_specials_fire_in_queue_order(self):
        schedule = _scheduled(80)
        schedule = add_special_invasion(schedule, SpecialInvasionType.RAID, 31, delay=1)
        schedule = add_special_invasion(schedule, SpecialInvasionType.BOUNTY_HUNTER, 31, delay=1)
        tick = process_schedule(schedule, 32, 0, 0, NO_VARIANCE)
        assert tick.triggered == ("raid", "bounty_hunter")

    def test_special_and_scheduled_same_day(self):
        schedule = add_special_invasion(_scheduled(45), SpecialInvasionType.RAID, 44, delay=1)
        tick = process_schedule(schedule, 45, 0, 0, NO_VARIANCE)
        assert tick.triggered == ("raid", "scheduled")
        assert [e.type for e in tick.schedule.invasion_history] == ["raid", "scheduled"]

    def test_specials_wait_for_grace_period(self):
        schedule = add_special_invasion(InvasionSchedule(grace_period_end=30), SpecialInvasionType.RAID, 1)
        tick = process_schedule(schedule, 5, 0, 0, NO_VARIANCE)
        assert tick.triggered == ()
