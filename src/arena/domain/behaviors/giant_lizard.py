"""Giant Lizard (large_beast): scales, venom, stuns and a berserker rage."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping

from arena.core.rng import RNG
from arena.domain.behaviors.enemy_base import AbilityInfo, EnemyBehavior
from arena.domain.combat_models import ActionResult, TurnStartReport
from arena.domain.status_effects import make_status

if TYPE_CHECKING:
    from arena.domain.ai import PlayerContext
    from arena.domain.combatant import Combatant, Enemy

SCALE_ARMOR_FACTOR = 0.4
TAIL_WHIP_FACTOR = 0.8
TAIL_WHIP_DOUBLE_CHANCE = 0.3
VENOM_SPIT_FACTOR = 0.6
VENOM_DURATION = 5
VENOM_FACTOR = 0.25
VENOM_HEALING_REDUCTION = 0.5
HARDENING_DURATION = 4
CRUSHING_BITE_FACTOR = 1.8
STUN_DURATION = 1
BERSERKER_THRESHOLD = 0.2
BERSERKER_ATTACK = 1.5


class GiantLizardBehavior(EnemyBehavior):
    archetype: ClassVar[str] = "large_beast"
    abilities: ClassVar[Dict[str, AbilityInfo]] = {
        "tail_whip": AbilityInfo(damaging=True, targeted=True),
        "venom_spit": AbilityInfo(damaging=True, targeted=True, applies_status=True),
        "scale_hardening": AbilityInfo(damaging=False, targeted=False),
        "crushing_bite": AbilityInfo(damaging=True, targeted=True, applies_status=True),
    }
    counter_refinements: ClassVar[Dict[str, tuple[str, ...]]] = {
        "warrior": ("tank_fight", "use_venom", "outlast"),
        "rogue": ("ignore_speed", "use_area_attacks", "sustained_damage"),
        "mage": ("resist_magic", "use_stuns", "close_combat"),
    }
    tag_bonuses: ClassVar[Dict[str, Dict[str, int]]] = {
        "use_venom": {"venom_spit": 10},
        "outlast": {"scale_hardening": 10, "defend": 5},
        "use_area_attacks": {"tail_whip": 10},
        "use_stuns": {"crushing_bite": 10},
    }

    def __init__(self) -> None:
        self.berserk = False

    def natural_armor(self, owner: "Combatant") -> int:
        armor = math.floor(owner.total_defense * SCALE_ARMOR_FACTOR)
        if owner.has_status("hardened_scales"):
            armor *= 2
        if self.berserk:
            armor //= 2
        return armor

    def ability_ready(self, owner: "Enemy", ability: str) -> bool:
        if ability == "scale_hardening":
            return not owner.has_status("hardened_scales")
        return True

    def _use_tail_whip(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        hit_count = 2 if rng.random() < TAIL_WHIP_DOUBLE_CHANCE else 1
        hits = tuple(self.roll_damage(owner.attack_power * TAIL_WHIP_FACTOR, rng) for _ in range(hit_count))
        damage = sum(hits)
        message = f"{owner.name} whips its massive tail for {damage} damage!"
        if hit_count > 1:
            message += " It strikes twice!"
        return self._ability_result(owner, "tail_whip", message, damage=damage, hits=hits)

    def _use_venom_spit(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        damage = self.roll_damage(owner.attack_power * VENOM_SPIT_FACTOR, rng)
        result = self._ability_result(
            owner, "venom_spit", f"{owner.name} spits burning venom for {damage} damage!", damage=damage
        )
        result.target_effects.append(
            make_status(
                "toxic_venom",
                duration=VENOM_DURATION,
                source=self.archetype,
                magnitude=max(1, math.floor(owner.attack_power * VENOM_FACTOR)),
                healing_reduction=VENOM_HEALING_REDUCTION,
            )
        )
        return result

    def _use_scale_hardening(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        owner.receive_status(make_status("hardened_scales", duration=HARDENING_DURATION, source=self.archetype))
        return self._ability_result(
            owner, "scale_hardening", f"{owner.name}'s scales harden like stone!"
        )

    def _use_crushing_bite(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        damage = self.roll_damage(owner.attack_power * CRUSHING_BITE_FACTOR, rng)
        result = self._ability_result(
            owner, "crushing_bite", f"{owner.name}'s jaws clamp down for {damage} damage!", damage=damage
        )
        result.target_effects.append(make_status("stunned", duration=STUN_DURATION, source=self.archetype))
        return result

    def on_turn_start(self, owner: "Combatant", report: TurnStartReport, *, was_defending: bool) -> None:
        if self.berserk or owner.hp_ratio > BERSERKER_THRESHOLD:
            return
        self.berserk = True
        owner.base_attack = math.floor(owner.base_attack * BERSERKER_ATTACK)
        owner.receive_status(make_status("berserker", duration=1, source=self.archetype))
        report.special_triggers.append(
            f"{owner.name} goes BERSERK! It hits harder but its scales crack open."
        )

    def score_bonus(self, owner: "Enemy", action: str, context: "PlayerContext") -> float:
        if action == "tail_whip" and context.player_healthy:
            return 20
        if action == "venom_spit" and not context.player_has_status_effects:
            return 25
        if action == "scale_hardening" and context.enemy_low_health:
            return 30
        if action == "crushing_bite" and context.player_low_health:
            return 35
        return 0

    def reset(self) -> None:
        self.berserk = False

    def describe(self, owner: "Combatant") -> Dict[str, object]:
        return {
            "berserk": self.berserk,
            "hardened": owner.has_status("hardened_scales"),
            "natural_armor": self.natural_armor(owner),
        }

    def export_state(self) -> Dict[str, Any]:
        return {"berserk": self.berserk}

    def restore_state(self, payload: Mapping[str, Any]) -> None:
        self.berserk = bool(payload["berserk"])
