"""Factory helpers for runtime combatants."""

from .enemy_factory import create_enemy
from .player_factory import create_player

__all__ = [
    "create_enemy",
    "create_player",
]
