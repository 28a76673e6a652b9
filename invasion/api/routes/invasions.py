"""Invasion endpoints — run a seeded invasion and read the history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from invasion.api.dependencies import get_invasion_manager
from invasion.api.manager import InvasionManager
from invasion.api.schemas import (
    BattleEventSchema,
    EventsResponse,
    HistoryEntrySchema,
    HistoryResponse,
    InvasionReportResponse,
    InvasionResultSchema,
    ObjectiveSchema,
    PenaltiesSchema,
    PrisonerSchema,
    RewardsSchema,
    SimulateRequest,
)
from invasion.engine.encounter import InvasionReport
from invasion.errors import InvalidLayoutError
from invasion.systems.win_loss import InvasionHistoryEntry

router = APIRouter(prefix="/invasions")


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def history_entry_schema(entry: InvasionHistoryEntry) -> HistoryEntrySchema:
    return HistoryEntrySchema(
        day=entry.day,
        type=entry.type,
        outcome=entry.outcome.value if entry.outcome is not None else None,
        end_reason=entry.end_reason.value if entry.end_reason is not None else None,
        invader_count=entry.invader_count,
        invaders_killed=entry.invaders_killed,
        defender_count=entry.defender_count,
        defenders_lost=entry.defenders_lost,
        turns_taken=entry.turns_taken,
    )


def report_response(report: InvasionReport) -> InvasionReportResponse:
    r = report.result
    rewards = None
    if report.rewards is not None:
        rewards = RewardsSchema(
            reputation_gain=report.rewards.reputation_gain,
            experience_gain=report.rewards.experience_gain,
            gold_gain=report.rewards.gold_gain,
            resource_gains={k.value: v for k, v in report.rewards.resource_gains.items()},
        )
    penalties = None
    if report.penalties is not None:
        penalties = PenaltiesSchema(
            reputation_loss=report.penalties.reputation_loss,
            gold_lost=report.penalties.gold_lost,
            resource_losses={k.value: v for k, v in report.penalties.resource_losses.items()},
            killed_inhabitant_ids=list(report.penalties.killed_inhabitant_ids),
        )

    return InvasionReportResponse(
        result=InvasionResultSchema(
            invasion_id=r.invasion_id,
            day=r.day,
            outcome=r.outcome.value,
            end_reason=r.end_reason.value,
            turns_taken=r.turns_taken,
            invader_count=r.invader_count,
            invaders_killed=r.invaders_killed,
            defender_count=r.defender_count,
            defenders_lost=r.defenders_lost,
            objectives_completed=r.objectives_completed,
            objectives_total=r.objectives_total,
            reward_multiplier=r.reward_multiplier,
        ),
        objectives=[
            ObjectiveSchema(
                id=o.id, type=o.type.value, name=o.name, description=o.description,
                target_id=o.target_id, is_primary=o.is_primary,
                is_completed=o.is_completed, progress=o.progress,
            )
            for o in report.objectives
        ],
        rewards=rewards,
        penalties=penalties,
        prisoners=[
            PrisonerSchema(
                id=p.id, invader_class=p.invader_class.value, name=p.name,
                hp=p.stats.hp, attack=p.stats.attack, defense=p.stats.defense, speed=p.stats.speed,
                capture_day=p.capture_day,
            )
            for p in report.prisoners
        ],
        events=[
            BattleEventSchema(
                turn=e.turn, category=e.category, message=e.message,
                combatant_ids=list(e.combatant_ids),
            )
            for e in report.events
        ],
        rounds=report.rounds,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("/simulate", response_model=InvasionReportResponse)
def simulate(
    request: SimulateRequest,
    manager: InvasionManager = Depends(get_invasion_manager),
) -> InvasionReportResponse:
    try:
        report = manager.simulate(seed=request.seed, day=request.day)
    except InvalidLayoutError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return report_response(report)


@router.get("/history", response_model=HistoryResponse)
def get_history(
    limit: int = Query(50, ge=1, le=500, description="Most recent entries to return"),
    manager: InvasionManager = Depends(get_invasion_manager),
) -> HistoryResponse:
    entries = manager.history()
    return HistoryResponse(
        total=len(entries),
        entries=[history_entry_schema(e) for e in entries[-limit:]],
    )


@router.get("/events", response_model=EventsResponse)
def get_events(
    since_turn: int = Query(0, ge=0, description="Only return events from this turn on"),
    limit: int = Query(200, ge=1, le=2000),
    manager: InvasionManager = Depends(get_invasion_manager),
) -> EventsResponse:
    """Battle events from every invasion run so far, oldest first."""
    events = manager.event_log.since_turn(since_turn)
    return EventsResponse(
        total=len(events),
        events=[
            BattleEventSchema(
                turn=e.turn, category=e.category, message=e.message,
                combatant_ids=list(e.combatant_ids),
            )
            for e in events[-limit:]
        ],
    )
