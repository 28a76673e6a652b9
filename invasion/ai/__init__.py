"""AI layer: turn decisions for computer-controlled combatants."""

from invasion.ai.policy import AiDecision, execute_ai_turn, resolve_ai_action, step_toward

__all__ = ["AiDecision", "execute_ai_turn", "resolve_ai_action", "step_toward"]
