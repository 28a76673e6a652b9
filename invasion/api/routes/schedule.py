"""Schedule endpoints — the invasion calendar."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from invasion.api.dependencies import get_invasion_manager
from invasion.api.manager import InvasionManager
from invasion.api.routes.invasions import history_entry_schema, report_response
from invasion.api.schemas import PendingSpecialSchema, ScheduleAdvanceResponse, ScheduleResponse
from invasion.core.enums import SpecialInvasionType
from invasion.systems.schedule import InvasionSchedule, is_in_grace_period

router = APIRouter(prefix="/schedule")


def _schedule_response(schedule: InvasionSchedule, day: int) -> ScheduleResponse:
    return ScheduleResponse(
        current_day=day,
        next_invasion_day=schedule.next_invasion_day,
        next_invasion_variance=schedule.next_invasion_variance,
        grace_period_end=schedule.grace_period_end,
        in_grace_period=is_in_grace_period(day, schedule.grace_period_end),
        warning_active=schedule.warning_active,
        pending_special_invasions=[
            PendingSpecialSchema(type=p.type.value, trigger_day=p.trigger_day)
            for p in schedule.pending_special_invasions
        ],
        invasion_history=[history_entry_schema(e) for e in schedule.invasion_history],
    )


@router.get("", response_model=ScheduleResponse)
def get_schedule(manager: InvasionManager = Depends(get_invasion_manager)) -> ScheduleResponse:
    return _schedule_response(manager.schedule, manager.day)


@router.post("/advance", response_model=ScheduleAdvanceResponse)
def advance(manager: InvasionManager = Depends(get_invasion_manager)) -> ScheduleAdvanceResponse:
    tick, report = manager.advance_day()
    return ScheduleAdvanceResponse(
        schedule=_schedule_response(tick.schedule, manager.day),
        triggered=list(tick.triggered),
        warning_raised=tick.warning_raised,
        report=report_response(report) if report is not None else None,
    )


@router.post("/special/{invasion_type}", response_model=ScheduleResponse)
def queue_special(
    invasion_type: SpecialInvasionType,
    delay: int = Query(1, ge=0, le=30, description="Days until the special invasion arrives"),
    manager: InvasionManager = Depends(get_invasion_manager),
) -> ScheduleResponse:
    schedule = manager.queue_special(invasion_type, delay)
    return _schedule_response(schedule, manager.day)
