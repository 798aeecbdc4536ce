"""Player classes repository."""
from __future__ import annotations

from typing import Dict

from arena.core.types import PLAYER_ARCHETYPES
from arena.data.errors import DataReferenceError, DataValidationError
from arena.data.repositories.base import RepositoryBase
from arena.domain.defs import ClassDef


class ClassesRepository(RepositoryBase[ClassDef]):
    """Loads player classes; every id must name a known player archetype."""

    def __init__(self, base_path=None) -> None:
        super().__init__("classes.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ClassDef]:
        classes: Dict[str, ClassDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Class IDs must be strings.")
            if raw_id not in PLAYER_ARCHETYPES:
                raise DataReferenceError(
                    f"class '{raw_id}' is not a known archetype {list(PLAYER_ARCHETYPES)}."
                )
            context = f"class '{raw_id}'"
            class_data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                class_data,
                {
                    "name",
                    "base_hp",
                    "base_attack",
                    "defense",
                    "initiative_base",
                    "initiative_per_level",
                    "potions",
                    "growth",
                },
                context,
            )
            growth = self._require_mapping(class_data["growth"], f"{context} growth")
            self._assert_exact_fields(growth, {"hp", "attack", "defense"}, f"{context} growth")

            classes[raw_id] = ClassDef(
                id=raw_id,
                name=self._require_str(class_data["name"], f"{context} name"),
                base_hp=self._require_int(class_data["base_hp"], f"{context} base_hp", minimum=1),
                base_attack=self._require_int(class_data["base_attack"], f"{context} base_attack", minimum=0),
                defense=self._require_int(class_data["defense"], f"{context} defense", minimum=0),
                initiative_base=self._require_int(
                    class_data["initiative_base"], f"{context} initiative_base", minimum=0
                ),
                initiative_per_level=self._require_int(
                    class_data["initiative_per_level"], f"{context} initiative_per_level", minimum=0
                ),
                potions=self._require_int(class_data["potions"], f"{context} potions", minimum=0),
                hp_per_level=self._require_int(growth["hp"], f"{context} growth.hp", minimum=0),
                attack_per_level=self._require_int(growth["attack"], f"{context} growth.attack", minimum=0),
                defense_per_level=self._require_int(growth["defense"], f"{context} growth.defense", minimum=0),
            )
        return classes
