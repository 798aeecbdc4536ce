"""Enemy archetype and difficulty profile definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(slots=True)
class ArchetypeDef:
    """Proportional stat multipliers and reward tables for an enemy archetype."""

    id: str
    hp_multiplier: float
    attack_multiplier: float
    defense_multiplier: float
    initiative_multiplier: float
    gold_by_stage: Dict[int, int | None]
    xp_base: int

    def gold_for_stage(self, stage: int) -> int:
        """Return the gold award for a stage, 0 when the table has no award."""
        return self.gold_by_stage.get(stage) or 0

    def xp_for_stage(self, stage: int) -> int:
        return self.xp_base * stage


@dataclass(slots=True)
class ProfileDef:
    """Difficulty profile applied on top of the proportional baseline."""

    id: str
    attack_multiplier: float
    initiative_multiplier: float
