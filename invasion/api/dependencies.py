"""FastAPI dependency injection — provides the InvasionManager singleton."""

from __future__ import annotations

from invasion.api.manager import InvasionManager

_invasion_manager: InvasionManager | None = None


def set_invasion_manager(manager: InvasionManager | None) -> None:
    global _invasion_manager
    _invasion_manager = manager


def get_invasion_manager() -> InvasionManager:
    if _invasion_manager is None:
        raise RuntimeError("InvasionManager not initialized — server not started correctly.")
    return _invasion_manager
