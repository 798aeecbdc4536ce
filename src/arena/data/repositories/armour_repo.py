"""Armour repository."""
from __future__ import annotations

from typing import Dict

from arena.data.errors import DataValidationError
from arena.data.repositories.base import RepositoryBase
from arena.domain.defs import ArmourDef


class ArmourRepository(RepositoryBase[ArmourDef]):
    """Loads and validates armour definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("armour.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ArmourDef]:
        armour: Dict[str, ArmourDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Armour IDs must be strings.")
            armour_data = self._require_mapping(payload, f"armour '{raw_id}'")
            self._assert_exact_fields(armour_data, {"name", "defense", "value"}, f"armour '{raw_id}'")

            armour[raw_id] = ArmourDef(
                id=raw_id,
                name=self._require_str(armour_data["name"], f"armour '{raw_id}' name"),
                defense=self._require_int(armour_data["defense"], f"armour '{raw_id}' defense", minimum=0),
                value=self._require_int(armour_data["value"], f"armour '{raw_id}' value", minimum=0),
            )
        return armour
