"""Equipment runtime models."""
from __future__ import annotations

from dataclasses import dataclass

from arena.domain.defs import ArmourDef, WeaponDef


@dataclass(slots=True)
class Equipment:
    """Optional weapon and armour slots, additive to base stats."""

    weapon: WeaponDef | None = None
    armour: ArmourDef | None = None

    @property
    def attack_bonus(self) -> int:
        return self.weapon.attack if self.weapon is not None else 0

    @property
    def defense_bonus(self) -> int:
        return self.armour.defense if self.armour is not None else 0
