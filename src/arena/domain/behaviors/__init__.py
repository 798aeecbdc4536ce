"""Archetype behaviors and the registries factories build them from."""
from __future__ import annotations

from typing import Callable, Dict

from .base import ArchetypeBehavior, level_tier
from .enemy_base import AbilityInfo, EnemyBehavior
from .giant_lizard import GiantLizardBehavior
from .gladiator import GladiatorBehavior
from .goblin import GoblinBehavior
from .knoll import KnollBehavior
from .mage import MageBehavior
from .rogue import RogueBehavior
from .warrior import WarriorBehavior

PLAYER_BEHAVIORS: Dict[str, Callable[[], ArchetypeBehavior]] = {
    "warrior": WarriorBehavior,
    "rogue": RogueBehavior,
    "mage": MageBehavior,
}

# Keyed by enemy definition id.
ENEMY_BEHAVIORS: Dict[str, Callable[[], EnemyBehavior]] = {
    "goblin": GoblinBehavior,
    "knoll": KnollBehavior,
    "giant_lizard": GiantLizardBehavior,
    "gladiator_warrior": GladiatorBehavior,
}

__all__ = [
    "AbilityInfo",
    "ArchetypeBehavior",
    "EnemyBehavior",
    "GiantLizardBehavior",
    "GladiatorBehavior",
    "GoblinBehavior",
    "KnollBehavior",
    "MageBehavior",
    "RogueBehavior",
    "WarriorBehavior",
    "ENEMY_BEHAVIORS",
    "PLAYER_BEHAVIORS",
    "level_tier",
]
