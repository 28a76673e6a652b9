"""Replay serialization — round-by-round snapshots of an invasion."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from invasion.core.models import ActionResult, TurnQueue
    from invasion.systems.win_loss import InvasionState

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates round snapshots and flushes them to a JSON replay file."""

    __slots__ = ("_path", "_rounds", "_seed", "_summary")

    def __init__(self, path: str | Path, seed: str) -> None:
        self._path = Path(path)
        self._seed = seed
        self._rounds: list[dict[str, Any]] = []
        self._summary: dict[str, Any] = {}

    @property
    def rounds(self) -> list[dict[str, Any]]:
        return list(self._rounds)

    def record_round(
        self,
        round_number: int,
        actions: list[ActionResult],
        queue: TurnQueue,
        state: InvasionState,
    ) -> None:
        combatants = [
            {
                "id": c.id,
                "side": c.side.value,
                "pos": [c.position.x, c.position.y] if c.position is not None else None,
                "hp": c.hp,
                "max_hp": c.max_hp,
            }
            for c in queue.combatants
            if c.hp > 0
        ]
        actions_log = [
            {
                "actor": a.actor_id,
                "action": a.action.value,
                "target": a.target_id,
                "to": [a.target_position.x, a.target_position.y] if a.target_position is not None else None,
                "hit": a.combat_result.hit if a.combat_result is not None else None,
                "damage": a.combat_result.damage if a.combat_result is not None else None,
            }
            for a in actions
        ]
        objectives = [
            {"type": o.type.value, "progress": o.progress, "completed": o.is_completed}
            for o in state.objectives
        ]

        self._rounds.append(
            {
                "round": round_number,
                "altar_hp": state.altar_hp,
                "actions": actions_log,
                "combatants": combatants,
                "objectives": objectives,
            }
        )

    def record_summary(self, summary: dict[str, Any]) -> None:
        self._summary = dict(summary)

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "seed": self._seed,
            "total_rounds": len(self._rounds),
            "summary": self._summary,
            "rounds": self._rounds,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d rounds)", self._path, len(self._rounds))
