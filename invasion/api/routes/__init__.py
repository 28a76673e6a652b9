"""Versioned API route modules."""

from fastapi import APIRouter

from invasion.api.routes.config import router as config_router
from invasion.api.routes.invasions import router as invasions_router
from invasion.api.routes.metadata import router as metadata_router
from invasion.api.routes.schedule import router as schedule_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(invasions_router, tags=["Invasions"])
api_router.include_router(schedule_router, tags=["Schedule"])
api_router.include_router(config_router, tags=["Config"])
api_router.include_router(metadata_router)

__all__ = ["api_router"]
