"""Enemies repository."""
from __future__ import annotations

from typing import Dict

from arena.core.types import ACTION_KINDS, ENEMY_ARCHETYPES
from arena.data.errors import DataReferenceError, DataValidationError
from arena.data.repositories.base import RepositoryBase
from arena.domain.defs import BossDef, EnemyDef

_DIALOGUE_PHASES = {"intro", "mid_battle", "low_health", "defeat"}


class EnemiesRepository(RepositoryBase[EnemyDef]):
    """Loads and validates enemy kinds, their ability cooldowns and text."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemies.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyDef]:
        enemies: Dict[str, EnemyDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Enemy IDs must be strings.")
            context = f"enemy '{raw_id}'"
            enemy_data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                enemy_data,
                {"name", "archetype", "description", "abilities"},
                context,
                optional_fields={"flavor", "reactions", "boss"},
            )

            archetype = self._require_str(enemy_data["archetype"], f"{context} archetype")
            if archetype not in ENEMY_ARCHETYPES:
                raise DataReferenceError(f"{context} references unknown archetype '{archetype}'.")

            abilities_raw = self._require_mapping(enemy_data["abilities"], f"{context} abilities")
            abilities = {
                ability_id: self._require_int(cooldown, f"{context} ability '{ability_id}'", minimum=0)
                for ability_id, cooldown in abilities_raw.items()
            }

            reactions_raw = self._require_mapping(enemy_data.get("reactions", {}), f"{context} reactions")
            reactions: Dict[str, tuple[str, ...]] = {}
            for action_kind, lines in reactions_raw.items():
                if action_kind not in ACTION_KINDS:
                    raise DataValidationError(f"{context} reacts to unknown action '{action_kind}'.")
                reactions[action_kind] = tuple(
                    self._require_str_list(lines, f"{context} reactions.{action_kind}")
                )

            boss = None
            if "boss" in enemy_data:
                boss = self._build_boss(enemy_data["boss"], context)

            enemies[raw_id] = EnemyDef(
                id=raw_id,
                name=self._require_str(enemy_data["name"], f"{context} name"),
                archetype=archetype,
                description=self._require_str(enemy_data["description"], f"{context} description"),
                abilities=abilities,
                flavor=tuple(self._require_str_list(enemy_data.get("flavor", []), f"{context} flavor")),
                reactions=reactions,
                boss=boss,
            )
        return enemies

    def _build_boss(self, payload: object, context: str) -> BossDef:
        boss_context = f"{context} boss"
        data = self._require_mapping(payload, boss_context)
        self._assert_exact_fields(
            data,
            {"title", "names", "dialogue", "unique_loot", "stat_bonus", "bonus_xp_fraction", "prestige_points"},
            boss_context,
        )
        names = tuple(self._require_str_list(data["names"], f"{boss_context} names"))
        if not names:
            raise DataValidationError(f"{boss_context} names must not be empty.")
        dialogue_raw = self._require_mapping(data["dialogue"], f"{boss_context} dialogue")
        self._assert_exact_fields(dialogue_raw, _DIALOGUE_PHASES, f"{boss_context} dialogue")
        dialogue = {
            phase: tuple(self._require_str_list(lines, f"{boss_context} dialogue.{phase}"))
            for phase, lines in dialogue_raw.items()
        }
        bonus = self._require_mapping(data["stat_bonus"], f"{boss_context} stat_bonus")
        self._assert_exact_fields(bonus, {"attack", "defense", "hp"}, f"{boss_context} stat_bonus")
        return BossDef(
            title=self._require_str(data["title"], f"{boss_context} title"),
            names=names,
            dialogue=dialogue,
            unique_loot=tuple(self._require_str_list(data["unique_loot"], f"{boss_context} unique_loot")),
            attack_bonus=self._require_number(bonus["attack"], f"{boss_context} stat_bonus.attack"),
            defense_bonus=self._require_number(bonus["defense"], f"{boss_context} stat_bonus.defense"),
            hp_bonus=self._require_number(bonus["hp"], f"{boss_context} stat_bonus.hp"),
            bonus_xp_fraction=self._require_number(
                data["bonus_xp_fraction"], f"{boss_context} bonus_xp_fraction"
            ),
            prestige_points=self._require_int(data["prestige_points"], f"{boss_context} prestige_points", minimum=0),
        )
