"""Gladiator Warrior (gladiator boss): guard, endurance, execution and shouts."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping

from arena.core.rng import RNG
from arena.domain.behaviors.enemy_base import DEFEND_MITIGATION, AbilityInfo, EnemyBehavior
from arena.domain.combat_models import ActionResult, Mitigation, TurnStartReport
from arena.domain.status_effects import make_status

if TYPE_CHECKING:
    from arena.domain.ai import PlayerContext
    from arena.domain.combatant import Combatant, Enemy

IRON_GUARD_DURATION = 2
IRON_GUARD_MITIGATION = 0.8
IRON_GUARD_REFLECT = 0.3
ENDURANCE_MAX_STACKS = 5
ENDURANCE_ATTACK_PER_STACK = 0.1
ENDURANCE_RESIST_PER_STACK = 0.05
EXECUTION_BASE_FACTOR = 2
EXECUTION_LOW_HP_SCALING = 2
SHOUT_DURATION = 3
SHOUT_ATTACK_BONUS = 0.2
SHOUT_INITIATIVE_BONUS = 5
SHOUT_INTIMIDATE_DURATION = 2
SHOUT_ACCURACY_PENALTY = 0.15

INTRO_THRESHOLD = 0.75
LOW_HEALTH_THRESHOLD = 0.25


def execution_multiplier(target_hp_ratio: float) -> float:
    """Grows from 1x at full HP to 3x as the target nears death."""
    return 1 + (1 - target_hp_ratio) * EXECUTION_LOW_HP_SCALING


def dialogue_phase(hp_ratio: float) -> str:
    if hp_ratio > INTRO_THRESHOLD:
        return "intro"
    if hp_ratio >= LOW_HEALTH_THRESHOLD:
        return "mid_battle"
    return "low_health"


class GladiatorBehavior(EnemyBehavior):
    archetype: ClassVar[str] = "gladiator"
    abilities: ClassVar[Dict[str, AbilityInfo]] = {
        "iron_guard": AbilityInfo(damaging=False, targeted=False),
        "battle_endurance": AbilityInfo(damaging=False, targeted=False),
        "execution_strike": AbilityInfo(damaging=True, targeted=True),
        "warrior_shout": AbilityInfo(damaging=False, targeted=True, applies_status=True),
    }
    counter_refinements: ClassVar[Dict[str, tuple[str, ...]]] = {
        "warrior": ("mirror_match", "use_experience", "out_endure", "technical_superiority"),
        "rogue": ("counter_speed", "use_reflection", "overwhelm_with_power", "deny_evasion"),
        "mage": ("rush_down", "reflect_spells", "intimidate", "close_combat"),
    }
    tag_bonuses: ClassVar[Dict[str, Dict[str, int]]] = {
        "mirror_match": {"battle_endurance": 10},
        "out_endure": {"battle_endurance": 5, "iron_guard": 5},
        "use_reflection": {"iron_guard": 10},
        "reflect_spells": {"iron_guard": 10},
        "intimidate": {"warrior_shout": 10},
        "overwhelm_with_power": {"heavy_attack": 10},
        "rush_down": {"attack": 10},
    }

    def __init__(self) -> None:
        self.endurance_stacks = 0
        self.shout_initiative = 0
        self.dialogue_phase: str | None = None

    def attack_bonus(self, owner: "Combatant") -> int:
        bonus = self.endurance_stacks * math.floor(owner.base_attack * ENDURANCE_ATTACK_PER_STACK)
        if owner.has_status("battle_fury"):
            bonus += math.floor(owner.base_attack * SHOUT_ATTACK_BONUS)
        return bonus

    def ability_ready(self, owner: "Enemy", ability: str) -> bool:
        if ability == "battle_endurance":
            return self.endurance_stacks < ENDURANCE_MAX_STACKS
        return True

    def mitigate(self, owner: "Combatant", amount: int, *, rng: RNG) -> Mitigation:
        damage = amount
        reflected = 0
        notes = []
        if owner.has_status("iron_guard"):
            reflected = math.floor(amount * IRON_GUARD_REFLECT)
            damage = max(1, damage - math.floor(owner.total_defense * IRON_GUARD_MITIGATION))
            notes.append(f"{owner.name}'s iron guard holds firm!")
        elif owner.is_defending:
            damage = max(1, damage - math.floor(owner.total_defense * DEFEND_MITIGATION))
            notes.append(f"{owner.name} deflects part of the blow.")
        if self.endurance_stacks:
            resist = self.endurance_stacks * math.floor(owner.total_defense * ENDURANCE_RESIST_PER_STACK)
            damage = max(1, damage - resist)
        return Mitigation(damage=damage, reflected=reflected, notes=notes)

    def _use_iron_guard(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        owner.receive_status(make_status("iron_guard", duration=IRON_GUARD_DURATION, source=self.archetype))
        return self._ability_result(
            owner, "iron_guard", f"{owner.name} raises an iron guard! Attacks will rebound."
        )

    def _use_battle_endurance(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        self.endurance_stacks = min(ENDURANCE_MAX_STACKS, self.endurance_stacks + 1)
        result = self._ability_result(
            owner,
            "battle_endurance",
            f"{owner.name} steels for a long fight (endurance {self.endurance_stacks}/{ENDURANCE_MAX_STACKS}).",
        )
        result.details["endurance_stacks"] = self.endurance_stacks
        return result

    def _use_execution_strike(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        multiplier = execution_multiplier(target.hp_ratio)
        damage = self.roll_damage(owner.attack_power * EXECUTION_BASE_FACTOR * multiplier, rng)
        return self._ability_result(
            owner,
            "execution_strike",
            f"{owner.name} delivers an EXECUTION STRIKE for {damage} damage!",
            damage=damage,
        )

    def _use_warrior_shout(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        owner.receive_status(make_status("battle_fury", duration=SHOUT_DURATION, source=self.archetype))
        if not self.shout_initiative:
            self.shout_initiative = SHOUT_INITIATIVE_BONUS
            owner.initiative += SHOUT_INITIATIVE_BONUS
        result = self._ability_result(
            owner, "warrior_shout", f"{owner.name} lets loose a thunderous war cry!"
        )
        result.target_effects.append(
            make_status(
                "intimidated",
                duration=SHOUT_INTIMIDATE_DURATION,
                source=self.archetype,
                accuracy_penalty=SHOUT_ACCURACY_PENALTY,
            )
        )
        return result

    def on_turn_start(self, owner: "Combatant", report: TurnStartReport, *, was_defending: bool) -> None:
        if self.shout_initiative and not owner.has_status("battle_fury"):
            owner.initiative -= self.shout_initiative
            self.shout_initiative = 0
            report.notes.append(f"{owner.name}'s battle fury subsides.")

    def score_bonus(self, owner: "Enemy", action: str, context: "PlayerContext") -> float:
        bonus = 0.0
        if action == "iron_guard" and context.player_has_high_damage_attacks:
            bonus += 30
        elif action == "battle_endurance" and self.endurance_stacks < ENDURANCE_MAX_STACKS:
            bonus += 25
        elif action == "execution_strike" and context.player_low_health:
            bonus += 40
        elif action == "warrior_shout" and context.enemy_healthy:
            bonus += 20
        if owner.profile == "aggressive":
            if action == "execution_strike":
                bonus += 15
            elif action == "heavy_attack":
                bonus += 10
        return bonus

    def phase_dialogue(self, owner: "Enemy", rng: RNG) -> str | None:
        boss = owner.enemy_def.boss
        if boss is None:
            return None
        phase = dialogue_phase(owner.hp_ratio)
        if phase == self.dialogue_phase:
            return None
        self.dialogue_phase = phase
        lines = boss.dialogue.get(phase)
        return rng.choice(lines) if lines else None

    def defeat_dialogue(self, owner: "Enemy", rng: RNG) -> str | None:
        boss = owner.enemy_def.boss
        if boss is None or not boss.dialogue.get("defeat"):
            return None
        return rng.choice(boss.dialogue["defeat"])

    def reset(self) -> None:
        self.endurance_stacks = 0
        self.shout_initiative = 0
        self.dialogue_phase = None

    def describe(self, owner: "Combatant") -> Dict[str, object]:
        return {
            "endurance_stacks": self.endurance_stacks,
            "iron_guard": owner.has_status("iron_guard"),
            "battle_fury": owner.has_status("battle_fury"),
        }

    def export_state(self) -> Dict[str, Any]:
        return {
            "endurance_stacks": self.endurance_stacks,
            "shout_initiative": self.shout_initiative,
            "dialogue_phase": self.dialogue_phase,
        }

    def restore_state(self, payload: Mapping[str, Any]) -> None:
        self.endurance_stacks = int(payload["endurance_stacks"])
        self.shout_initiative = int(payload["shout_initiative"])
        phase = payload.get("dialogue_phase")
        self.dialogue_phase = str(phase) if phase is not None else None
