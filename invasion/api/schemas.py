"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Config ---

class InvasionConfigResponse(BaseModel):
    seed: str
    day: int
    max_turns: int
    altar_max_hp: int
    grid_width: int
    grid_height: int
    seal_portal_turns: int
    scout_turns: int
    defile_turns: int
    rescue_turns: int
    steal_gold_target: int
    gold_looted_per_invader: int
    grace_period_end: int
    current_gold: int


# --- Metadata ---

class ObjectiveTemplateSchema(BaseModel):
    type: str
    name: str
    description: str
    is_primary: bool = False


class ObjectiveTemplatesResponse(BaseModel):
    objectives: list[ObjectiveTemplateSchema]


# --- Invasion ---

class SimulateRequest(BaseModel):
    seed: str | None = Field(None, description="Seed for party, objectives and rolls. Defaults to the config seed.")
    day: int | None = Field(None, ge=1, description="Game day to simulate. Defaults to the current day.")


class ObjectiveSchema(BaseModel):
    id: str
    type: str
    name: str
    description: str
    target_id: str | None = None
    is_primary: bool = False
    is_completed: bool = False
    progress: int = 0


class BattleEventSchema(BaseModel):
    turn: int
    category: str
    message: str
    combatant_ids: list[str] = []


class PrisonerSchema(BaseModel):
    id: str
    invader_class: str
    name: str
    hp: int
    attack: int
    defense: int
    speed: int
    capture_day: int


class RewardsSchema(BaseModel):
    reputation_gain: int
    experience_gain: int
    gold_gain: int
    resource_gains: dict[str, int] = {}


class PenaltiesSchema(BaseModel):
    reputation_loss: int
    gold_lost: int
    resource_losses: dict[str, int] = {}
    killed_inhabitant_ids: list[str] = []


class InvasionResultSchema(BaseModel):
    invasion_id: str
    day: int
    outcome: str
    end_reason: str
    turns_taken: int
    invader_count: int
    invaders_killed: int
    defender_count: int
    defenders_lost: int
    objectives_completed: int
    objectives_total: int
    reward_multiplier: float


class InvasionReportResponse(BaseModel):
    result: InvasionResultSchema
    objectives: list[ObjectiveSchema]
    rewards: RewardsSchema | None = None
    penalties: PenaltiesSchema | None = None
    prisoners: list[PrisonerSchema] = []
    events: list[BattleEventSchema] = []
    rounds: int = 0


class HistoryEntrySchema(BaseModel):
    day: int
    type: str = "scheduled"
    outcome: str | None = None
    end_reason: str | None = None
    invader_count: int | None = None
    invaders_killed: int | None = None
    defender_count: int | None = None
    defenders_lost: int | None = None
    turns_taken: int | None = None


class HistoryResponse(BaseModel):
    total: int
    entries: list[HistoryEntrySchema]


class EventsResponse(BaseModel):
    total: int
    events: list[BattleEventSchema]


# --- Schedule ---

class PendingSpecialSchema(BaseModel):
    type: str
    trigger_day: int


class ScheduleResponse(BaseModel):
    current_day: int
    next_invasion_day: int | None = None
    next_invasion_variance: int = 0
    grace_period_end: int
    in_grace_period: bool
    warning_active: bool = False
    pending_special_invasions: list[PendingSpecialSchema] = []
    invasion_history: list[HistoryEntrySchema] = []


class ScheduleAdvanceResponse(BaseModel):
    schedule: ScheduleResponse
    triggered: list[str] = []
    warning_raised: bool = False
    report: InvasionReportResponse | None = None
