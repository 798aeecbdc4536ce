"""UI-agnostic combat controller that separates state progression from rendering."""
from __future__ import annotations

from typing import Callable, List, Mapping, Sequence, Tuple, Union

from arena.domain.combat_models import ActionResult, AvailableAction, CombatState, CombatStatus
from arena.domain.combatant import Enemy, PlayerCharacter
from arena.services.combat_service import CombatService

# A strategy returns an action kind, or a (kind, params) pair for elite skills.
StrategyChoice = Union[str, Tuple[str, Mapping[str, object]]]
PlayerStrategy = Callable[[CombatStatus, Sequence[AvailableAction]], StrategyChoice]


class CombatController:
    """
    UI-agnostic controller for one combat at a time.

    This controller wraps CombatService and owns the current CombatState.
    It does NOT handle rendering, formatting, pacing or input prompts.
    """

    def __init__(self, combat_service: CombatService, state: CombatState | None = None) -> None:
        self._service = combat_service
        self._state = state

    @property
    def state(self) -> CombatState | None:
        return self._state

    def start_combat(self, player: PlayerCharacter, enemy: Enemy) -> CombatStatus:
        self._state = self._service.start_combat(player, enemy)
        return self._service.get_status(self._state)

    def execute_player_action(self, kind: str, params: Mapping[str, object] | None = None) -> ActionResult:
        """Apply a player action; a rejected action leaves the turn unchanged."""
        if self._state is None:
            return ActionResult.failure(kind, "No combat in progress.")
        return self._service.execute_player_action(self._state, kind, params)

    def get_combat_status(self) -> CombatStatus:
        """Return a read-only snapshot of the current combat."""
        if self._state is None:
            return CombatStatus(
                phase="inactive",
                turn_count=0,
                active_role=None,
                turn_order=(),
                player=None,
                enemy=None,
                log=(),
                outcome=None,
                rewards=None,
            )
        return self._service.get_status(self._state)

    def get_player_available_actions(self) -> List[AvailableAction]:
        if self._state is None:
            return []
        return self._service.get_available_actions(self._state)

    def simulate(self, strategy: PlayerStrategy) -> CombatStatus:
        """
        Drive the current combat to its end with a scripted player policy.

        When the strategy picks an action the engine rejects, the first
        available action is submitted instead so the simulation always
        progresses. The turn ceiling guarantees termination.
        """
        if self._state is None:
            raise ValueError("Start a combat before simulating it.")
        while not self._state.is_over:
            actions = self.get_player_available_actions()
            choice = strategy(self.get_combat_status(), actions)
            if isinstance(choice, tuple):
                kind, params = choice
            else:
                kind, params = choice, None
            result = self.execute_player_action(kind, params)
            if not result.success and actions:
                self.execute_player_action(actions[0].kind)
        return self.get_combat_status()
