"""Weapons repository."""
from __future__ import annotations

from typing import Dict

from arena.data.errors import DataValidationError
from arena.data.repositories.base import RepositoryBase
from arena.domain.defs import WeaponDef


class WeaponsRepository(RepositoryBase[WeaponDef]):
    """Loads and validates weapon definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("weapons.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, WeaponDef]:
        weapons: Dict[str, WeaponDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Weapon IDs must be strings.")
            weapon_data = self._require_mapping(payload, f"weapon '{raw_id}'")
            self._assert_exact_fields(weapon_data, {"name", "attack", "value"}, f"weapon '{raw_id}'")

            weapons[raw_id] = WeaponDef(
                id=raw_id,
                name=self._require_str(weapon_data["name"], f"weapon '{raw_id}' name"),
                attack=self._require_int(weapon_data["attack"], f"weapon '{raw_id}' attack", minimum=0),
                value=self._require_int(weapon_data["value"], f"weapon '{raw_id}' value", minimum=0),
            )
        return weapons
