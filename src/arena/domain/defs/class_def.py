"""Player class definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ClassDef:
    """Defines level-1 stats and per-level growth for a player class."""

    id: str
    name: str
    base_hp: int
    base_attack: int
    defense: int
    initiative_base: int
    initiative_per_level: int
    potions: int
    hp_per_level: int
    attack_per_level: int
    defense_per_level: int

    def initiative_at(self, level: int) -> int:
        """Return the class initiative for the given level."""
        return self.initiative_base + self.initiative_per_level * level
