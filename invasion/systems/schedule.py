"""Invasion schedule — when the next invasion arrives.

The schedule is a frozen record advanced once per game tick by
``process_schedule``. Nothing happens during the grace period; afterwards an
invasion day is rolled (interval + variance), a warning is raised shortly
before that day starts, and on the day itself the invasion triggers and the
next one is rolled. Special invasions (crusades, raids, bounty hunters) are
queued separately and fire on their own trigger day.

Side effects of a trigger (reputation, victory counters, the encounter
itself) belong to the caller; this module only reports what fired.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from invasion.core.enums import SpecialInvasionType
from invasion.systems.rng import RandomSource, int_range
from invasion.systems.win_loss import InvasionHistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 30
MIN_INTERVAL = 5
MAX_VARIANCE = 2
MIN_DAYS_BETWEEN = 3
WARNING_MINUTES = 2

MINUTES_PER_DAY = 24 * 60
SCHEDULED = "scheduled"


@dataclass(frozen=True, slots=True)
class PendingSpecialInvasion:
    type: SpecialInvasionType
    trigger_day: int


@dataclass(frozen=True, slots=True)
class InvasionSchedule:
    next_invasion_day: int | None = None
    next_invasion_variance: int = 0
    grace_period_end: int = DEFAULT_GRACE_PERIOD
    invasion_history: tuple[InvasionHistoryEntry, ...] = ()
    pending_special_invasions: tuple[PendingSpecialInvasion, ...] = ()
    warning_active: bool = False
    warning_dismissed: bool = False


@dataclass(frozen=True, slots=True)
class ScheduleTick:
    """Result of one ``process_schedule`` call."""

    schedule: InvasionSchedule
    triggered: tuple[str, ...] = ()
    warning_raised: bool = False


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def get_interval(current_day: int) -> int:
    """Base days between invasions; shortens as the game goes on."""
    if current_day >= 100:
        return max(7, MIN_INTERVAL)
    if current_day >= 60:
        return 10
    return 15


def is_in_grace_period(current_day: int, grace_period_end: int) -> bool:
    return current_day < grace_period_end


def get_last_invasion_day(schedule: InvasionSchedule) -> int | None:
    if not schedule.invasion_history:
        return None
    return schedule.invasion_history[-1].day


def calculate_next_day(
    current_day: int,
    last_invasion_day: int | None,
    grace_period_end: int,
    rng: RandomSource,
) -> tuple[int, int]:
    """Roll ``(next_day, variance)``. The variance is rolled once and kept."""
    variance = int_range(-MAX_VARIANCE, MAX_VARIANCE + 1, rng)
    next_day = current_day + get_interval(current_day) + variance

    if next_day < grace_period_end:
        next_day = grace_period_end
    if last_invasion_day is not None and next_day - last_invasion_day < MIN_DAYS_BETWEEN:
        next_day = last_invasion_day + MIN_DAYS_BETWEEN

    return next_day, variance


def should_trigger(schedule: InvasionSchedule, current_day: int) -> bool:
    if schedule.next_invasion_day is None:
        return False
    return current_day >= schedule.next_invasion_day


def _to_minutes(day: int, hour: int, minute: int) -> int:
    return (day - 1) * MINUTES_PER_DAY + hour * 60 + minute


def should_show_warning(schedule: InvasionSchedule, day: int, hour: int, minute: int) -> bool:
    """True during the last two game minutes before the invasion day starts."""
    if schedule.next_invasion_day is None:
        return False
    invasion_at = _to_minutes(schedule.next_invasion_day, 0, 0)
    now = _to_minutes(day, hour, minute)
    return invasion_at - WARNING_MINUTES <= now < invasion_at


def add_special_invasion(
    schedule: InvasionSchedule,
    invasion_type: SpecialInvasionType,
    current_day: int,
    delay: int = 1,
) -> InvasionSchedule:
    pending = PendingSpecialInvasion(type=invasion_type, trigger_day=current_day + delay)
    logger.info("Special invasion %s queued for day %d", invasion_type, pending.trigger_day)
    return replace(
        schedule,
        pending_special_invasions=(*schedule.pending_special_invasions, pending),
    )


# ---------------------------------------------------------------------------
# Tick processor
# ---------------------------------------------------------------------------

def process_schedule(
    schedule: InvasionSchedule,
    day: int,
    hour: int,
    minute: int,
    rng: RandomSource,
) -> ScheduleTick:
    """Advance the schedule to the given game time."""
    if is_in_grace_period(day, schedule.grace_period_end):
        return ScheduleTick(schedule=schedule)

    if schedule.next_invasion_day is None:
        next_day, variance = calculate_next_day(
            day, get_last_invasion_day(schedule), schedule.grace_period_end, rng,
        )
        schedule = replace(schedule, next_invasion_day=next_day, next_invasion_variance=variance)
        logger.info("Next invasion scheduled for day %d (variance %+d)", next_day, variance)

    warning_raised = False
    warning_due = should_show_warning(schedule, day, hour, minute)
    if warning_due and not schedule.warning_dismissed:
        if not schedule.warning_active:
            schedule = replace(schedule, warning_active=True)
            warning_raised = True
            logger.info("Invasion approaching! (day %d)", schedule.next_invasion_day)
    elif not warning_due and not should_trigger(schedule, day):
        schedule = replace(schedule, warning_active=False, warning_dismissed=False)

    triggered: list[str] = []
    history = list(schedule.invasion_history)
    remaining: list[PendingSpecialInvasion] = []
    for special in schedule.pending_special_invasions:
        if day >= special.trigger_day:
            history.append(InvasionHistoryEntry(day=day, type=special.type.value))
            triggered.append(special.type.value)
        else:
            remaining.append(special)
    schedule = replace(
        schedule,
        invasion_history=tuple(history),
        pending_special_invasions=tuple(remaining),
    )

    if should_trigger(schedule, day):
        next_day, variance = calculate_next_day(day, day, schedule.grace_period_end, rng)
        schedule = replace(
            schedule,
            invasion_history=(*schedule.invasion_history, InvasionHistoryEntry(day=day, type=SCHEDULED)),
            warning_active=False,
            warning_dismissed=False,
            next_invasion_day=next_day,
            next_invasion_variance=variance,
        )
        triggered.append(SCHEDULED)
        logger.info("Invasion triggered on day %d; next on day %d", day, next_day)

    return ScheduleTick(schedule=schedule, triggered=tuple(triggered), warning_raised=warning_raised)
