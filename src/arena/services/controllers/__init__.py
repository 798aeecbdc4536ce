"""UI-agnostic controllers."""

from .combat_controller import CombatController, PlayerStrategy

__all__ = [
    "CombatController",
    "PlayerStrategy",
]
