"""Enemy archetype and difficulty profile repositories."""
from __future__ import annotations

from typing import Dict

from arena.core.types import ENEMY_ARCHETYPES
from arena.data.errors import DataReferenceError, DataValidationError
from arena.data.repositories.base import RepositoryBase
from arena.domain.defs import ArchetypeDef, ProfileDef

_STAGES = ("1", "2", "3")


class ArchetypesRepository(RepositoryBase[ArchetypeDef]):
    """Loads proportional multipliers and reward tables per enemy archetype."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemy_archetypes.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ArchetypeDef]:
        archetypes: Dict[str, ArchetypeDef] = {}
        for raw_id, payload in raw.items():
            if raw_id not in ENEMY_ARCHETYPES:
                raise DataReferenceError(
                    f"archetype '{raw_id}' is not one of {list(ENEMY_ARCHETYPES)}."
                )
            context = f"archetype '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_exact_fields(data, {"multipliers", "gold", "xp_base"}, context)

            multipliers = self._require_mapping(data["multipliers"], f"{context} multipliers")
            self._assert_exact_fields(
                multipliers, {"hp", "attack", "defense", "initiative"}, f"{context} multipliers"
            )
            gold = self._require_mapping(data["gold"], f"{context} gold")
            self._assert_exact_fields(gold, set(_STAGES), f"{context} gold")
            gold_by_stage: Dict[int, int | None] = {}
            for stage_key in _STAGES:
                amount = gold[stage_key]
                if amount is not None:
                    amount = self._require_int(amount, f"{context} gold[{stage_key}]", minimum=0)
                gold_by_stage[int(stage_key)] = amount

            archetypes[raw_id] = ArchetypeDef(
                id=raw_id,
                hp_multiplier=self._require_number(multipliers["hp"], f"{context} multipliers.hp"),
                attack_multiplier=self._require_number(
                    multipliers["attack"], f"{context} multipliers.attack"
                ),
                defense_multiplier=self._require_number(
                    multipliers["defense"], f"{context} multipliers.defense"
                ),
                initiative_multiplier=self._require_number(
                    multipliers["initiative"], f"{context} multipliers.initiative"
                ),
                gold_by_stage=gold_by_stage,
                xp_base=self._require_int(data["xp_base"], f"{context} xp_base", minimum=0),
            )
        return archetypes


class ProfilesRepository(RepositoryBase[ProfileDef]):
    """Loads difficulty profiles (normal, aggressive...)."""

    def __init__(self, base_path=None) -> None:
        super().__init__("profiles.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ProfileDef]:
        profiles: Dict[str, ProfileDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Profile IDs must be strings.")
            data = self._require_mapping(payload, f"profile '{raw_id}'")
            self._assert_exact_fields(data, {"attack", "initiative"}, f"profile '{raw_id}'")
            profiles[raw_id] = ProfileDef(
                id=raw_id,
                attack_multiplier=self._require_number(data["attack"], f"profile '{raw_id}' attack"),
                initiative_multiplier=self._require_number(
                    data["initiative"], f"profile '{raw_id}' initiative"
                ),
            )
        return profiles
