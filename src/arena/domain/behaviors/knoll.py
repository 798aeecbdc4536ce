"""Knoll (medium_beast): savage bite, howl, pack tactics and a one-time frenzy."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping

from arena.core.rng import RNG
from arena.domain.behaviors.enemy_base import AbilityInfo, EnemyBehavior
from arena.domain.combat_models import ActionResult, TurnStartReport
from arena.domain.status_effects import StatusEffect, make_status

if TYPE_CHECKING:
    from arena.domain.ai import PlayerContext
    from arena.domain.combatant import Combatant, Enemy

NATURAL_ARMOR_FACTOR = 0.2
SAVAGE_BITE_FACTOR = 1.2
BLEED_DURATION = 4
BLEED_FACTOR = 0.3
HOWL_DURATION = 3
HOWL_ACCURACY_PENALTY = 0.15
PACK_TACTICS_HEALTHY = 1.5
PACK_TACTICS_WOUNDED = 2.0
PACK_TACTICS_THRESHOLD = 0.5
FRENZY_THRESHOLD = 0.3
FRENZY_ATTACK = 1.3
FRENZY_INITIATIVE = 1.2


class KnollBehavior(EnemyBehavior):
    archetype: ClassVar[str] = "medium_beast"
    abilities: ClassVar[Dict[str, AbilityInfo]] = {
        "savage_bite": AbilityInfo(damaging=True, targeted=True, applies_status=True),
        "howl": AbilityInfo(damaging=False, targeted=True, applies_status=True),
        "pack_tactics": AbilityInfo(damaging=True, targeted=True),
    }
    counter_refinements: ClassVar[Dict[str, tuple[str, ...]]] = {
        "warrior": ("match_strength", "use_bleed", "prolonged_fight"),
        "rogue": ("overwhelm_with_power", "ignore_evasion", "direct_assault"),
        "mage": ("rush_down", "resist_spells", "close_distance"),
    }
    tag_bonuses: ClassVar[Dict[str, Dict[str, int]]] = {
        "use_bleed": {"savage_bite": 10},
        "overwhelm_with_power": {"heavy_attack": 10},
        "direct_assault": {"attack": 5, "pack_tactics": 5},
        "rush_down": {"attack": 10},
    }

    def __init__(self) -> None:
        self.frenzied = False

    def natural_armor(self, owner: "Combatant") -> int:
        return math.floor(owner.total_defense * NATURAL_ARMOR_FACTOR)

    def _use_savage_bite(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        damage = self.roll_damage(owner.attack_power * SAVAGE_BITE_FACTOR, rng)
        result = self._ability_result(
            owner, "savage_bite", f"{owner.name} sinks its teeth in for {damage} damage!", damage=damage
        )
        result.target_effects.append(
            make_status(
                "bleed",
                duration=BLEED_DURATION,
                source=self.archetype,
                magnitude=max(1, math.floor(owner.attack_power * BLEED_FACTOR)),
            )
        )
        return result

    def _use_howl(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        result = self._ability_result(owner, "howl", f"{owner.name} lets out a bone-chilling howl!")
        result.target_effects.append(self._intimidation())
        return result

    def _use_pack_tactics(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        multiplier = pack_tactics_multiplier(target.hp_ratio)
        damage = self.roll_damage(owner.attack_power * multiplier, rng)
        return self._ability_result(
            owner,
            "pack_tactics",
            f"{owner.name} circles and strikes at your weak side for {damage} damage!",
            damage=damage,
        )

    def _intimidation(self) -> StatusEffect:
        return make_status(
            "intimidated",
            duration=HOWL_DURATION,
            source=self.archetype,
            accuracy_penalty=HOWL_ACCURACY_PENALTY,
        )

    def on_turn_start(self, owner: "Combatant", report: TurnStartReport, *, was_defending: bool) -> None:
        if self.frenzied or owner.hp_ratio > FRENZY_THRESHOLD:
            return
        self.frenzied = True
        owner.base_attack = math.floor(owner.base_attack * FRENZY_ATTACK)
        owner.initiative = math.floor(owner.initiative * FRENZY_INITIATIVE)
        owner.receive_status(make_status("frenzy", duration=1, source=self.archetype))
        report.special_triggers.append(f"{owner.name} enters a FRENZY! Its attacks grow wild and vicious.")

    def score_bonus(self, owner: "Enemy", action: str, context: "PlayerContext") -> float:
        if action == "savage_bite" and context.player_low_health:
            return 25
        if action == "howl" and context.enemy_healthy:
            return 20
        if action == "pack_tactics" and context.player_hp_ratio < 0.6:
            return 30
        return 0

    def reset(self) -> None:
        self.frenzied = False

    def describe(self, owner: "Combatant") -> Dict[str, object]:
        return {"frenzied": self.frenzied, "natural_armor": self.natural_armor(owner)}

    def export_state(self) -> Dict[str, Any]:
        return {"frenzied": self.frenzied}

    def restore_state(self, payload: Mapping[str, Any]) -> None:
        self.frenzied = bool(payload["frenzied"])


def pack_tactics_multiplier(target_hp_ratio: float) -> float:
    """1.5x against a healthy target, 2.0x at or below half HP."""
    if target_hp_ratio > PACK_TACTICS_THRESHOLD:
        return PACK_TACTICS_HEALTHY
    return PACK_TACTICS_WOUNDED
