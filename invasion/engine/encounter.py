"""InvasionEncounter — runs one automatic invasion from first turn to report.

Round cycle:
  1. Turns — each living combatant acts in initiative order. Defenders use
     the AI policy. Invaders strike the altar when they stand next to it with
     no defender in reach, march on it once no defender is left, and fight
     through the AI policy otherwise.
  2. Bookkeeping — kills and losses are recorded on the invasion state the
     moment they happen, and the end check runs after every such step.
  3. Round close — the invasion turn advances, secondary objectives gain
     progress from the invaders who are not engaged, and the end check runs.

When the invasion ends the terminal result is priced: rewards (plus
prisoners from surviving invaders) on victory, penalties on defeat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Sequence

from invasion.ai.policy import choose_step, execute_ai_turn
from invasion.combat.actions import execute_move, execute_wait
from invasion.combat.targeting import get_valid_attack_targets
from invasion.combat.turn_queue import (
    advance_turn,
    build_turn_queue,
    create_combatant,
    get_current_actor,
    is_round_complete,
    start_new_round,
)
from invasion.core.content import DEFAULT_CATALOG, ContentCatalog
from invasion.core.dungeon import DungeonLayout, PlacedInhabitant
from invasion.core.enums import (
    CombatantSide,
    Domain,
    InvaderClass,
    InvasionEndReason,
    InvasionOutcome,
    ObjectiveType,
    RoomRole,
    TurnAction,
)
from invasion.core.models import (
    ActionResult,
    Combatant,
    CombatantStats,
    InvaderInstance,
    Position,
    TurnQueue,
)
from invasion.errors import InvalidLayoutError
from invasion.systems.objectives import (
    InvasionObjective,
    ObjectiveAssigner,
    seal_portal_progress,
    slay_monster_progress,
    steal_treasure_progress,
    update_progress,
)
from invasion.systems.rewards import (
    CapturedPrisoner,
    DefensePenalties,
    DefenseRewards,
    calculate_defense_penalties,
    calculate_defense_rewards,
    roll_prisoner_captures,
)
from invasion.systems.rng import DeterministicRNG, RandomSource
from invasion.systems.win_loss import (
    DetailedInvasionResult,
    InvasionHistoryEntry,
    InvasionState,
    advance_invasion_turn,
    check_invasion_end,
    create_history_entry,
    create_invasion_state,
    damage_altar,
    end_invasion,
    mark_invader_killed,
    record_defender_loss,
    resolve_detailed_result,
    update_objective,
)
from invasion.utils.event_log import BattleEvent, EventLog

if TYPE_CHECKING:
    from invasion.config import InvasionConfig
    from invasion.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InvasionReport:
    """Everything the caller needs to apply an invasion to the wider game."""

    result: DetailedInvasionResult
    history_entry: InvasionHistoryEntry
    objectives: tuple[InvasionObjective, ...]
    rewards: DefenseRewards | None = None
    penalties: DefensePenalties | None = None
    prisoners: tuple[CapturedPrisoner, ...] = ()
    events: tuple[BattleEvent, ...] = ()
    rounds: int = 0


class InvasionEncounter:
    """Automatic invasion between a dungeon's defenders and an invading party."""

    __slots__ = (
        "_config",
        "_catalog",
        "_dungeon",
        "_defenders",
        "_invaders",
        "_recorder",
        "_log",
        "_altar",
        "_invader_classes",
        "_defender_max_hp",
        "_killed_classes",
        "_killed_inhabitants",
        "_gold_looted",
        "_turns_spent",
    )

    def __init__(
        self,
        config: InvasionConfig,
        catalog: ContentCatalog = DEFAULT_CATALOG,
        dungeon: DungeonLayout | None = None,
        defenders: Sequence[PlacedInhabitant] | None = None,
        invaders: Sequence[InvaderInstance] = (),
        recorder: ReplayRecorder | None = None,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._dungeon = dungeon if dungeon is not None else DungeonLayout(day=config.day)
        self._defenders = tuple(defenders if defenders is not None else self._dungeon.inhabitants)
        self._invaders = tuple(invaders)
        self._recorder = recorder
        self._log = EventLog()
        self._altar = Position(config.altar_x, config.altar_y)
        self._invader_classes: dict[str, InvaderClass] = {}
        self._defender_max_hp: dict[str, int] = {}
        self._killed_classes: list[InvaderClass] = []
        self._killed_inhabitants: list[str] = []
        self._gold_looted = 0
        self._turns_spent = 0

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _entrance_positions(self, count: int) -> list[Position]:
        """Centred along the entrance row, wrapping onto the next rows."""
        width = max(1, self._config.grid_width)
        start = (width - count) // 2 if count <= width else 0
        return [
            Position(start + i % width, self._config.entrance_row + i // width)
            for i in range(count)
        ]

    def _positions_around_altar(self, count: int) -> list[Position]:
        """Closest tiles to the altar, nearest first, row-major on ties."""
        candidates = [
            Position(x, y)
            for y in range(self._config.grid_height)
            for x in range(self._config.grid_width)
            if (x, y) != (self._altar.x, self._altar.y) and y != self._config.entrance_row
        ]
        candidates.sort(key=lambda p: (p.manhattan(self._altar), p.y, p.x))
        return candidates[:count]

    def _build_combatants(self) -> list[Combatant]:
        combatants: list[Combatant] = []

        invaders = []
        for invader in self._invaders:
            definition = self._catalog.get_invader(invader.definition_id)
            if definition is None:
                logger.warning("Invader %s has no definition %r, it stays out of combat",
                               invader.id, invader.definition_id)
                continue
            self._invader_classes[invader.id] = definition.invader_class
            invaders.append((invader, definition))

        for (invader, definition), pos in zip(invaders, self._entrance_positions(len(invaders))):
            combatants.append(create_combatant(
                invader.id, CombatantSide.INVADER, definition.name,
                CombatantStats(
                    hp=invader.current_hp,
                    max_hp=invader.max_hp,
                    attack=definition.base_stats.attack,
                    defense=definition.base_stats.defense,
                    speed=definition.base_stats.speed,
                ),
                pos,
            ))

        defenders = [
            (placed, self._catalog.get_inhabitant(placed.definition_id))
            for placed in self._defenders
        ]
        deployable = [(p, d) for p, d in defenders if d is not None]
        if len(deployable) < len(defenders):
            logger.warning("%d defenders have unknown definitions and stay out of combat",
                           len(defenders) - len(deployable))

        for (placed, definition), pos in zip(deployable, self._positions_around_altar(len(deployable))):
            self._defender_max_hp[placed.instance_id] = definition.hp
            combatants.append(create_combatant(
                placed.instance_id, CombatantSide.DEFENDER, placed.name or definition.name,
                CombatantStats(
                    hp=definition.hp,
                    max_hp=definition.hp,
                    attack=definition.attack,
                    defense=definition.defense,
                    speed=definition.speed,
                ),
                pos,
            ))
        return combatants

    def _reset(self) -> None:
        self._log = EventLog()
        self._invader_classes = {}
        self._defender_max_hp = {}
        self._killed_classes = []
        self._killed_inhabitants = []
        self._gold_looted = 0
        self._turns_spent = 0

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _emit(self, state: InvasionState, category: str, message: str, ids: tuple[str, ...] = ()) -> None:
        self._log.append(BattleEvent(turn=state.current_turn, category=category, message=message, combatant_ids=ids))

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    def _invader_turn(
        self,
        queue: TurnQueue,
        actor: Combatant,
        state: InvasionState,
        rng: RandomSource,
    ) -> tuple[TurnQueue, ActionResult, InvasionState]:
        engaged = bool(get_valid_attack_targets(actor, queue.combatants))
        defenders_left = any(c.hp > 0 and c.side == CombatantSide.DEFENDER for c in queue.combatants)

        if not engaged and actor.position is not None and actor.position.manhattan(self._altar) <= 1:
            damage = max(1, actor.attack)
            state = damage_altar(state, damage)
            self._emit(state, "altar", f"{actor.name} strikes the altar for {damage} "
                       f"[{state.altar_hp}/{state.altar_max_hp}]", (actor.id,))
            logger.info("Turn %d: %s strikes the altar for %d [HP: %d/%d]",
                        state.current_turn, actor.name, damage, state.altar_hp, state.altar_max_hp)
            return queue, ActionResult(action=TurnAction.ATTACK, actor_id=actor.id), state

        if not defenders_left:
            step = choose_step(actor, self._altar, queue.combatants)
            if step is None:
                return queue, execute_wait(actor.id), state
            queue, result = execute_move(queue, actor.id, step)
            return queue, result, state

        queue, result = execute_ai_turn(queue, rng)
        return queue, result, state

    def _record_casualty(self, result: ActionResult, queue: TurnQueue, state: InvasionState) -> InvasionState:
        combat = result.combat_result
        if combat is None or not combat.defender_dead or result.target_id is None:
            return state

        target = queue.find(result.target_id)
        if target is None:
            return state
        if target.side == CombatantSide.INVADER:
            before = state.invaders_killed
            state = mark_invader_killed(state, target.id)
            if state.invaders_killed > before:
                self._killed_classes.append(self._invader_classes[target.id])
            self._emit(state, "kill", f"{target.name} has fallen", (result.actor_id or "", target.id))
        else:
            state = record_defender_loss(state)
            self._killed_inhabitants.append(target.id)
            self._emit(state, "kill", f"Defender {target.name} has been slain", (result.actor_id or "", target.id))
        return state

    # ------------------------------------------------------------------
    # Objectives
    # ------------------------------------------------------------------

    def _free_invaders(self, queue: TurnQueue) -> int:
        """Living invaders with no defender in reach."""
        return sum(
            1 for c in queue.combatants
            if c.hp > 0 and c.side == CombatantSide.INVADER
            and not get_valid_attack_targets(c, queue.combatants)
        )

    def _objective_progress(self, objective: InvasionObjective, queue: TurnQueue) -> int:
        cfg = self._config
        match objective.type:
            case ObjectiveType.SLAY_MONSTER:
                max_hp = self._defender_max_hp.get(objective.target_id or "", 0)
                target = queue.find(objective.target_id or "")
                return slay_monster_progress(target.hp if target is not None else 0, max_hp)
            case ObjectiveType.STEAL_TREASURE | ObjectiveType.PLUNDER_VAULT:
                return steal_treasure_progress(self._gold_looted, cfg.steal_gold_target)
            case ObjectiveType.SEAL_PORTAL:
                return seal_portal_progress(self._turns_spent, cfg.seal_portal_turns)
            case ObjectiveType.DEFILE_LIBRARY:
                return seal_portal_progress(self._turns_spent, cfg.defile_turns)
            case ObjectiveType.RESCUE_PRISONER:
                return seal_portal_progress(self._turns_spent, cfg.rescue_turns)
            case ObjectiveType.SCOUT_DUNGEON:
                return seal_portal_progress(self._turns_spent, cfg.scout_turns)
            case _:
                return objective.progress

    def _update_secondaries(self, queue: TurnQueue, state: InvasionState) -> InvasionState:
        free = self._free_invaders(queue)
        self._gold_looted += free * self._config.gold_looted_per_invader
        if free:
            self._turns_spent += 1

        for objective in state.objectives:
            if objective.is_primary or objective.is_completed:
                continue
            progress = self._objective_progress(objective, queue)
            if progress == objective.progress:
                continue
            updated = update_progress(objective, progress)
            state = update_objective(state, updated)
            if updated.is_completed:
                self._emit(state, "objective", f"Invaders completed {updated.name}")
                logger.info("Turn %d: invaders completed %s", state.current_turn, updated.name)
        return state

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, seed: str, invasion_id: str | None = None) -> InvasionReport:
        """Play the invasion to its end and price the outcome."""
        cfg = self._config
        if not self._dungeon.has_room_with_role(self._catalog, RoomRole.ALTAR):
            raise InvalidLayoutError("The dungeon has no altar room to defend.")

        self._reset()
        rng = DeterministicRNG(seed)
        combat_rng = rng.stream(Domain.COMBAT)
        objectives = ObjectiveAssigner(self._catalog).assign(self._dungeon, seed)
        queue = build_turn_queue(self._build_combatants())
        state = create_invasion_state(
            self._invaders,
            objectives,
            defender_count=sum(1 for c in queue.combatants if c.side == CombatantSide.DEFENDER),
            invasion_id=invasion_id,
            max_turns=cfg.max_turns,
            altar_max_hp=cfg.altar_max_hp,
        )

        logger.info("=== Invasion %s started (seed=%r, day %d): %d invaders vs %d defenders ===",
                    state.invasion_id, seed, cfg.day, len(state.invaders), state.defender_count)

        actions: list[ActionResult] = []
        end_reason = check_invasion_end(state)
        while end_reason is None:
            actor = get_current_actor(queue)
            if actor is not None:
                if actor.side == CombatantSide.INVADER:
                    queue, result, state = self._invader_turn(queue, actor, state, combat_rng)
                else:
                    queue, result = execute_ai_turn(queue, combat_rng)
                actions.append(result)
                state = self._record_casualty(result, queue, state)
                end_reason = check_invasion_end(state)
                if end_reason is not None:
                    break
                queue = advance_turn(queue)

            if is_round_complete(queue):
                state = advance_invasion_turn(state)
                state = self._update_secondaries(queue, state)
                if self._recorder is not None:
                    self._recorder.record_round(queue.round, actions, queue, state)
                actions = []
                end_reason = check_invasion_end(state)
                queue = start_new_round(queue)

        if actions and self._recorder is not None:
            self._recorder.record_round(queue.round, actions, queue, state)

        state = end_invasion(state)
        return self._finish(state, end_reason, rng)

    def _finish(self, state: InvasionState, end_reason: InvasionEndReason, rng: DeterministicRNG) -> InvasionReport:
        cfg = self._config
        result = resolve_detailed_result(state, cfg.day, end_reason)
        entry = create_history_entry(result)

        rewards: DefenseRewards | None = None
        penalties: DefensePenalties | None = None
        prisoners: tuple[CapturedPrisoner, ...] = ()
        if result.outcome == InvasionOutcome.VICTORY:
            rewards = calculate_defense_rewards(result, self._killed_classes, rng.stream(Domain.LOOT))
            survivors = [i for i in state.invaders if i.alive]
            prisoners = tuple(roll_prisoner_captures(
                survivors, cfg.day, rng.stream(Domain.PRISONERS), self._catalog,
            ))
            rewards = replace(rewards, captured_prisoners=prisoners)
        else:
            penalties = calculate_defense_penalties(result, cfg.current_gold)
            penalties = replace(penalties, killed_inhabitant_ids=tuple(self._killed_inhabitants))

        self._emit(state, "end", f"Invasion ended: {result.outcome} ({end_reason})")
        logger.info("=== Invasion %s ended after %d turns: %s (%s), multiplier %.2f ===",
                    state.invasion_id, state.current_turn, result.outcome, end_reason, result.reward_multiplier)
        if self._recorder is not None:
            self._recorder.record_summary({
                "invasion_id": result.invasion_id,
                "outcome": result.outcome.value,
                "end_reason": end_reason.value,
                "turns": result.turns_taken,
                "invaders_killed": result.invaders_killed,
                "defenders_lost": result.defenders_lost,
            })

        return InvasionReport(
            result=result,
            history_entry=entry,
            objectives=state.objectives,
            rewards=rewards,
            penalties=penalties,
            prisoners=prisoners,
            events=self._log.snapshot(),
            rounds=state.current_turn,
        )
