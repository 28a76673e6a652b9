"""Metadata endpoints — content definitions the engine runs on.

Invader, room and inhabitant definitions are pydantic dataclasses from
invasion/core/content.py and are returned as-is. Objective templates are
plain dataclasses and get a thin response schema.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from invasion.api.dependencies import get_invasion_manager
from invasion.api.manager import InvasionManager
from invasion.api.schemas import ObjectiveTemplateSchema, ObjectiveTemplatesResponse
from invasion.core.content import InvaderDefinition
from invasion.systems.objectives import PRIMARY_TEMPLATE, SECONDARY_TEMPLATES
from invasion.systems.rewards import CONVERT_SUCCESS_RATES, RANSOM_GOLD

router = APIRouter(prefix="/metadata", tags=["Metadata"])


@router.get("/invaders")
def get_invaders(manager: InvasionManager = Depends(get_invasion_manager)) -> dict:
    """All invader definitions with their prisoner values."""
    return {
        "invaders": manager.catalog.invaders(),
        "convert_success_rates": {cls.value: rate for cls, rate in CONVERT_SUCCESS_RATES.items()},
        "ransom_gold": {cls.value: gold for cls, gold in RANSOM_GOLD.items()},
    }


@router.get("/invaders/{definition_id}", response_model=InvaderDefinition)
def get_invader(
    definition_id: str,
    manager: InvasionManager = Depends(get_invasion_manager),
) -> InvaderDefinition:
    definition = manager.catalog.get_invader(definition_id)
    if definition is None:
        raise HTTPException(status_code=404, detail=f"Unknown invader definition: {definition_id!r}")
    return definition


@router.get("/objectives", response_model=ObjectiveTemplatesResponse)
def get_objectives() -> ObjectiveTemplatesResponse:
    templates = [
        ObjectiveTemplateSchema(
            type=t.type.value, name=t.name, description=t.description,
            is_primary=t is PRIMARY_TEMPLATE,
        )
        for t in (PRIMARY_TEMPLATE, *SECONDARY_TEMPLATES)
    ]
    return ObjectiveTemplatesResponse(objectives=templates)
