"""Enemy definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class BossDef:
    """Extra data carried by boss enemies."""

    title: str
    names: tuple[str, ...]
    dialogue: Dict[str, tuple[str, ...]]
    unique_loot: tuple[str, ...]
    attack_bonus: float
    defense_bonus: float
    hp_bonus: float
    bonus_xp_fraction: float
    prestige_points: int


@dataclass(slots=True)
class EnemyDef:
    """Enemy kind definition: archetype, ability cooldowns and flavor text."""

    id: str
    name: str
    archetype: str
    description: str
    abilities: Dict[str, int]
    flavor: tuple[str, ...] = ()
    reactions: Dict[str, tuple[str, ...]] = field(default_factory=dict)
    boss: BossDef | None = None
