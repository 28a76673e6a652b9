"""GET /api/v1/config — expose invasion configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from invasion.api.dependencies import get_invasion_manager
from invasion.api.manager import InvasionManager
from invasion.api.schemas import InvasionConfigResponse

router = APIRouter()


@router.get("/config", response_model=InvasionConfigResponse)
def get_config(
    manager: InvasionManager = Depends(get_invasion_manager),
) -> InvasionConfigResponse:
    cfg = manager.config
    return InvasionConfigResponse(
        seed=cfg.seed,
        day=manager.day,
        max_turns=cfg.max_turns,
        altar_max_hp=cfg.altar_max_hp,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        seal_portal_turns=cfg.seal_portal_turns,
        scout_turns=cfg.scout_turns,
        defile_turns=cfg.defile_turns,
        rescue_turns=cfg.rescue_turns,
        steal_gold_target=cfg.steal_gold_target,
        gold_looted_per_invader=cfg.gold_looted_per_invader,
        grace_period_end=cfg.grace_period_end,
        current_gold=cfg.current_gold,
    )
