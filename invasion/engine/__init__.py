"""Engine layer: the automatic invasion encounter runner."""

from invasion.engine.encounter import InvasionEncounter, InvasionReport

__all__ = ["InvasionEncounter", "InvasionReport"]
