"""Combat orchestrator: turn order, action resolution and the event log."""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Mapping

from arena.core.rng import RNG
from arena.core.types import ACTION_KINDS, CombatOutcome, LogCategory, MoveKind
from arena.domain.ai import choose_action
from arena.domain.combat_models import (
    ActionResult,
    AvailableAction,
    CombatLogEntry,
    CombatState,
    CombatStatus,
    TurnStartReport,
)
from arena.domain.combatant import Combatant, Enemy, PlayerCharacter
from arena.domain.errors import CombatStateError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 20

ACTION_MOVES: Dict[str, MoveKind] = {
    "attack": "light",
    "heavy_attack": "heavy",
    "defend": "defend",
    "heal": "heal",
    "elite": "elite",
}

ACTION_DESCRIPTIONS: Dict[str, str] = {
    "attack": "A quick strike costing one move.",
    "heavy_attack": "Double damage, then a turn of recovery.",
    "defend": "Brace until your next turn.",
    "heal": "Drink a potion to restore 40% of max HP.",
    "elite": "Signature skill costing both moves.",
}


class CombatService:
    """Deterministic one-on-one combat orchestrator.

    The service is the only mutator of both combatants while a combat runs.
    Every call returns once the engine is waiting on the player again or the
    combat has ended; enemy turns resolve synchronously.
    """

    def __init__(
        self,
        rng: RNG,
        *,
        max_turns: int = DEFAULT_MAX_TURNS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1.")
        self._rng = rng
        self._max_turns = max_turns
        self._clock = clock

    @property
    def rng(self) -> RNG:
        return self._rng

    @property
    def max_turns(self) -> int:
        return self._max_turns

    # -----------------------
    # Combat Lifecycle
    # -----------------------
    def start_combat(self, player: PlayerCharacter, enemy: Enemy) -> CombatState:
        """Reset both combatants, roll initiative and run until the player must act."""
        if not player.is_alive or not enemy.is_alive:
            raise CombatStateError("Both combatants must be alive to start a combat.")
        player.reset_for_combat()
        enemy.reset_for_combat()

        state = CombatState(player=player, enemy=enemy, phase="active")
        self._log(
            state,
            "combat_start",
            f"{player.name} (Level {player.level} {player.archetype.title()}) "
            f"faces {enemy.display_name}!",
        )
        flavor = enemy.flavor_text(self._rng)
        if flavor:
            self._log(state, "flavor", flavor)
        self._check_dialogue(state)

        if player.initiative > enemy.initiative:
            player_first = True
        elif enemy.initiative > player.initiative:
            player_first = False
        else:
            player_first = self._rng.random() < 0.5
        state.turn_order = ("player", "enemy") if player_first else ("enemy", "player")
        first = state.combatant(state.turn_order[0])
        self._log(
            state,
            "turn_order",
            f"{first.name} moves first (initiative {player.initiative} vs {enemy.initiative}).",
        )
        logger.info("Combat started: %s vs %s, order %s", player.name, enemy.name, state.turn_order)

        state.active_index = 0
        self._run_until_player_input(state)
        return state

    def execute_player_action(
        self,
        state: CombatState,
        kind: str,
        params: Mapping[str, object] | None = None,
    ) -> ActionResult:
        """Resolve one player action, then hand the turn over.

        Each successful command ends the player's turn. Illegal actions leave the
        turn unchanged.
        """
        if state.phase != "player_turn":
            return ActionResult.failure(kind, "It is not the player's turn.")

        player = state.player
        enemy = state.enemy
        move = ACTION_MOVES.get(kind)
        if move is None:
            result = ActionResult.failure(kind, f"Unknown action '{kind}'.")
            self._log(state, "failed_action", result.message)
            return result
        reason = player.gate_failure(move)
        if reason:
            result = ActionResult.failure(kind, reason)
            self._log(state, "failed_action", reason)
            return result

        result = self._perform(player, kind, enemy, params)
        self._log(state, "player_action", result.message)
        if result.offensive:
            self._resolve_against(state, player, enemy, result)
        else:
            self._apply_effects(state, enemy, result)

        if enemy.is_alive:
            reaction = enemy.react_to(kind, self._rng)
            if reaction:
                self._log(state, "enemy_reaction", reaction)
            self._check_dialogue(state)

        if self._check_death(state):
            return result
        self._advance(state)
        self._run_until_player_input(state)
        return result

    def get_available_actions(self, state: CombatState) -> List[AvailableAction]:
        """Actions the player may submit now; empty outside the player's turn."""
        if state.phase != "player_turn":
            return []
        player = state.player
        actions: List[AvailableAction] = []
        for kind in ACTION_KINDS:
            if not player.can_perform_action(ACTION_MOVES[kind]):
                continue
            description = ACTION_DESCRIPTIONS[kind]
            if kind == "heal":
                description = f"{description} ({player.potions} left)"
            actions.append(
                AvailableAction(
                    kind=kind,
                    label=player.behavior.action_label(player, kind),
                    description=description,
                )
            )
        return actions

    def get_status(self, state: CombatState) -> CombatStatus:
        return CombatStatus(
            phase=state.phase,
            turn_count=state.turn_count,
            active_role=state.active_role,
            turn_order=state.turn_order,
            player=state.player.to_view(),
            enemy=state.enemy.to_view(),
            log=tuple(state.log),
            outcome=state.outcome,
            rewards=state.rewards,
        )

    # -----------------------
    # Turn Loop
    # -----------------------
    def _run_until_player_input(self, state: CombatState) -> None:
        while not state.is_over:
            if state.active_index == 0:
                state.turn_count += 1
                if state.turn_count > self._max_turns:
                    self._end_combat(state, "draw")
                    return
            role = state.turn_order[state.active_index]
            actor = state.combatant(role)
            state.phase = "player_turn" if role == "player" else "enemy_turn"
            self._log(state, "turn_start", f"Turn {state.turn_count}: {actor.name}'s move.")

            report = actor.start_turn()
            self._log_turn_report(state, actor, report)
            if self._check_death(state):
                return
            if role == "enemy":
                self._check_dialogue(state)
            if report.stunned:
                self._log(state, "special", f"{actor.name} is stunned and loses the turn!")
                self._advance(state)
                continue
            if role == "player":
                return
            self._run_enemy_turn(state)
            if self._check_death(state):
                return
            self._advance(state)

    def _run_enemy_turn(self, state: CombatState) -> None:
        enemy = state.enemy
        player = state.player
        decision = choose_action(enemy, player, self._rng)
        result = enemy.perform(decision.action, player, self._rng)
        if not result.success:
            self._log(state, "failed_action", result.message)
            return
        self._log(state, "enemy_action", result.message)
        if result.offensive:
            self._resolve_against(state, enemy, player, result)
        else:
            self._apply_effects(state, player, result)

    def _advance(self, state: CombatState) -> None:
        state.active_index = 1 - state.active_index

    # -----------------------
    # Resolution
    # -----------------------
    def _perform(
        self,
        actor: Combatant,
        kind: str,
        target: Combatant,
        params: Mapping[str, object] | None,
    ) -> ActionResult:
        if kind == "attack":
            return actor.light_attack(self._rng)
        if kind == "heavy_attack":
            return actor.heavy_attack(self._rng)
        if kind == "defend":
            return actor.defend()
        if kind == "heal":
            return actor.heal()
        return actor.elite_skill(self._rng, target=target, context=params)

    def _resolve_against(
        self,
        state: CombatState,
        attacker: Combatant,
        defender: Combatant,
        result: ActionResult,
    ) -> None:
        if not defender.is_targetable:
            self._log(state, "evaded", f"{defender.name} cannot be found. The attack hits nothing.")
            return
        penalty = attacker.accuracy_penalty
        if penalty and self._rng.random() < penalty:
            self._log(state, "evaded", f"{attacker.name}'s attack goes wide!")
            return

        if result.damage > 0:
            outcome = defender.take_damage(result.damage, self._rng)
            for note in outcome.notes:
                self._log(state, "damage", note)
            if outcome.evaded:
                self._log(state, "evaded", f"{defender.name} evades the attack.")
            else:
                self._log(
                    state,
                    "damage",
                    f"{defender.name} takes {outcome.damage_taken} damage "
                    f"({defender.hp}/{defender.max_hp} HP).",
                )
            if outcome.reflected_damage and attacker.is_alive and defender.is_alive:
                lost = attacker.lose_hp(outcome.reflected_damage)
                self._log(
                    state,
                    "reflection",
                    f"{lost} damage rebounds onto {attacker.name} ({attacker.hp}/{attacker.max_hp} HP).",
                )
            if outcome.evaded:
                return
        self._apply_effects(state, defender, result)

    def _apply_effects(self, state: CombatState, target: Combatant, result: ActionResult) -> None:
        if not target.is_alive:
            return
        for effect in result.target_effects:
            if target.receive_status(effect):
                self._log(
                    state,
                    "status_applied",
                    f"{target.name} is afflicted with {effect.kind.replace('_', ' ')} "
                    f"for {effect.remaining} turn(s).",
                )

    def _check_dialogue(self, state: CombatState) -> None:
        enemy = state.enemy
        if not enemy.is_alive:
            return
        line = enemy.behavior.phase_dialogue(enemy, self._rng)
        if line:
            self._log(state, "dialogue", f'{enemy.name}: "{line}"')

    def _check_death(self, state: CombatState) -> bool:
        if not state.enemy.is_alive:
            self._end_combat(state, "victory")
        elif not state.player.is_alive:
            self._end_combat(state, "defeat")
        return state.is_over

    def _end_combat(self, state: CombatState, outcome: CombatOutcome) -> None:
        if state.is_over:
            return
        state.phase = "ended"
        state.outcome = outcome
        player = state.player
        enemy = state.enemy
        if outcome == "victory":
            self._log(state, "combat_end", f"{enemy.display_name} is defeated! Victory!")
        elif outcome == "defeat":
            self._log(state, "combat_end", f"{player.name} has fallen. Defeat.")
        else:
            self._log(
                state,
                "combat_end",
                f"Neither side yields after {self._max_turns} turns. The combat is a draw.",
            )
        logger.info("Combat ended in %s on turn %s", outcome, state.turn_count)
        if outcome != "victory":
            return

        line = enemy.behavior.defeat_dialogue(enemy, self._rng)
        if line:
            self._log(state, "dialogue", f'{enemy.name}: "{line}"')
        rewards = enemy.get_rewards()
        state.rewards = rewards
        self._log(state, "rewards", f"You earn {rewards.gold} gold and {rewards.xp} XP.")
        if rewards.bonus_xp or rewards.prestige_points:
            self._log(
                state,
                "bonus_rewards",
                f"Bonus: {rewards.bonus_xp} XP and {rewards.prestige_points} prestige point(s).",
            )
        if rewards.unique_loot:
            self._log(state, "unique_loot", f"You claim {rewards.unique_loot}!")
        for level in player.credit_rewards(rewards):
            self._log(state, "level_up", f"{player.name} reached level {level}!")

    # -----------------------
    # Logging
    # -----------------------
    def _log_turn_report(self, state: CombatState, actor: Combatant, report: TurnStartReport) -> None:
        for tick in report.status_ticks:
            name = tick.kind.replace("_", " ")
            if tick.damage:
                self._log(
                    state,
                    "status_tick",
                    f"{actor.name} suffers {tick.damage} {name} damage ({actor.hp}/{actor.max_hp} HP).",
                )
            if tick.expired:
                self._log(state, "status_tick", f"{name.capitalize()} wears off {actor.name}.")
        for trigger in report.special_triggers:
            self._log(state, "special", trigger)
        for note in report.notes:
            self._log(state, "turn_start", note)
        if report.locked_out and actor.is_alive:
            self._log(state, "turn_start", f"{actor.name} is still recovering from a heavy attack.")

    def _log(self, state: CombatState, category: LogCategory, message: str) -> None:
        state.log.append(
            CombatLogEntry(turn=state.turn_count, category=category, message=message, timestamp=self._clock())
        )
