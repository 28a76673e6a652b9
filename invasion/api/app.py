"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invasion.api.dependencies import set_invasion_manager
from invasion.api.manager import InvasionManager
from invasion.api.routes import api_router
from invasion.config import InvasionConfig
from invasion.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: InvasionConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = InvasionConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        set_invasion_manager(InvasionManager(_config))
        logger.info("API server started — day %d, seed %r.", _config.day, _config.seed)
        yield
        set_invasion_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Dungeon Invasion Engine",
        description=(
            "Deterministic turn-based invasion resolver.\n\n"
            "## API Groups\n\n"
            "- **Invasions** — Run seeded invasions and read the history\n"
            "- **Schedule** — Invasion calendar: next invasion, warnings, special invasions\n"
            "- **Config** — Read-only invasion configuration\n"
            "- **Metadata** — Content definitions (invaders, objectives)\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Invasions", "description": "Run an automatic, seeded invasion against the dungeon and list past results."},
            {"name": "Schedule", "description": "Invasion calendar: grace period, next invasion day, warnings and special invasions."},
            {"name": "Config", "description": "Read-only invasion configuration parameters."},
            {"name": "Metadata", "description": "Content definitions served straight from the pydantic dataclasses in invasion/core/."},
        ],
    )

    # CORS — allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
