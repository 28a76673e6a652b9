"""InvasionManager — singleton owner of the dungeon, schedule and invasion history.

Encounters themselves are pure and run synchronously inside the request. The
only shared mutable state is the calendar (day, schedule) and the history
list; both are swapped under one lock so concurrent requests never observe a
half-applied day.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from invasion.core.content import DEFAULT_CATALOG, ContentCatalog
from invasion.core.dungeon import DungeonLayout, sample_layout
from invasion.core.enums import Domain, SpecialInvasionType
from invasion.engine.encounter import InvasionEncounter, InvasionReport
from invasion.systems.composition import calculate_dungeon_profile, generate_invasion_party
from invasion.systems.rng import DeterministicRNG
from invasion.systems.schedule import (
    SCHEDULED,
    InvasionSchedule,
    ScheduleTick,
    add_special_invasion,
    process_schedule,
)
from invasion.systems.win_loss import InvasionHistoryEntry
from invasion.utils.event_log import EventLog

if TYPE_CHECKING:
    from invasion.config import InvasionConfig

logger = logging.getLogger(__name__)

# Last tick of a day, inside the warning window before the next day starts
_EVE_HOUR = 23
_EVE_MINUTE = 58


class InvasionManager:
    """Thread-safe access to the invasion calendar and results."""

    def __init__(
        self,
        config: InvasionConfig,
        catalog: ContentCatalog = DEFAULT_CATALOG,
        dungeon: DungeonLayout | None = None,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._dungeon = dungeon if dungeon is not None else sample_layout(config.day)
        self._rng = DeterministicRNG(config.seed)

        self._lock = threading.Lock()
        self._day = config.day
        self._schedule = InvasionSchedule(grace_period_end=config.grace_period_end)
        self._history: list[InvasionHistoryEntry] = []
        self._event_log = EventLog(maxlen=2000)

    # -- read access --

    @property
    def config(self) -> InvasionConfig:
        return self._config

    @property
    def catalog(self) -> ContentCatalog:
        return self._catalog

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def day(self) -> int:
        with self._lock:
            return self._day

    @property
    def schedule(self) -> InvasionSchedule:
        with self._lock:
            return self._schedule

    def history(self) -> list[InvasionHistoryEntry]:
        with self._lock:
            return list(self._history)

    # -- invasions --

    def simulate(self, seed: str | None = None, day: int | None = None) -> InvasionReport:
        """Generate a party for the current dungeon and play the invasion out."""
        run_day = day if day is not None else self.day
        run_seed = seed if seed is not None else f"{self._config.seed}-day-{run_day}"
        dungeon = replace(self._dungeon, day=run_day)
        config = replace(self._config, day=run_day)

        profile = calculate_dungeon_profile(dungeon, self._catalog)
        invaders = generate_invasion_party(profile, run_seed, self._catalog)
        encounter = InvasionEncounter(config, self._catalog, dungeon, invaders=invaders)
        report = encounter.run(run_seed)

        with self._lock:
            self._history.append(report.history_entry)
        self._event_log.extend(report.events)
        return report

    # -- schedule --

    def advance_day(self) -> tuple[ScheduleTick, InvasionReport | None]:
        """Move the calendar forward one day and run any scheduled invasion."""
        with self._lock:
            eve = process_schedule(
                self._schedule, self._day, _EVE_HOUR, _EVE_MINUTE,
                self._rng.stream(Domain.SCHEDULE, f"eve-{self._day}"),
            )
            self._day += 1
            tick = process_schedule(
                eve.schedule, self._day, 0, 0,
                self._rng.stream(Domain.SCHEDULE, f"day-{self._day}"),
            )
            tick = replace(
                tick,
                triggered=eve.triggered + tick.triggered,
                warning_raised=eve.warning_raised or tick.warning_raised,
            )
            self._schedule = tick.schedule
            day = self._day
            for special in (t for t in tick.triggered if t != SCHEDULED):
                self._history.append(InvasionHistoryEntry(day=day, type=special))

        logger.info("Advanced to day %d (triggered: %s)", day, ", ".join(tick.triggered) or "none")
        report = self.simulate(day=day) if SCHEDULED in tick.triggered else None
        return tick, report

    def queue_special(self, invasion_type: SpecialInvasionType, delay: int = 1) -> InvasionSchedule:
        with self._lock:
            self._schedule = add_special_invasion(self._schedule, invasion_type, self._day, delay)
            return self._schedule
