"""Mage: lightning whip procs, ice spikes, mist step evasion and Firestorm."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping

from arena.core.rng import RNG
from arena.domain.behaviors.base import ArchetypeBehavior, level_tier
from arena.domain.combat_models import ActionResult, Mitigation, TurnStartReport
from arena.domain.status_effects import StatusEffect, make_status

if TYPE_CHECKING:
    from arena.domain.combatant import Combatant

CHILL_PROC_CHANCE = 0.2
CHILL_DURATION = 1
SHOCK_EVERY = 3
SHOCK_DAMAGE = (6, 12, 24)
ICE_SPIKES_MAGIC_BONUS = 0.2
EVASION_BASE = 0.25
EVASION_POWER_DIVISOR = 120
EVASION_PER_CHARGE = 0.05
EVASION_CAP = 0.7
REDUCTION_POWER_DIVISOR = 60
REDUCTION_CAP = 0.4
MAX_MIST_CHARGES = 3
COUNTER_FACTOR = 0.6
FIRESTORM_DAMAGE = (72, 144, 288)
FIRESTORM_BURN = (12, 24, 48)
FIRESTORM_COOLDOWN = (6, 5, 4)
FIRESTORM_ACTIVE_TURNS = (2, 3, 4)
BURN_DURATION = 2


class MageBehavior(ArchetypeBehavior):
    archetype: ClassVar[str] = "mage"
    action_labels: ClassVar[Dict[str, str]] = {
        "attack": "Lightning Whip",
        "heavy_attack": "Ice Spikes",
        "defend": "Mist Step",
        "elite": "Firestorm",
    }

    def __init__(self) -> None:
        self.mist_charges = 0
        self.firestorm_turns = 0

    @staticmethod
    def magic_power(owner: "Combatant") -> int:
        return owner.attack_power

    def evasion_chance(self, owner: "Combatant") -> float:
        chance = (
            EVASION_BASE
            + self.magic_power(owner) / EVASION_POWER_DIVISOR
            + EVASION_PER_CHARGE * self.mist_charges
        )
        return min(EVASION_CAP, chance)

    def light_attack(self, owner: "Combatant", *, critical: bool, rng: RNG) -> ActionResult:
        damage = owner.attack_power
        if critical:
            damage = owner.apply_critical(damage)
        chilled = rng.random() < CHILL_PROC_CHANCE
        shocked = owner.light_attack_count % SHOCK_EVERY == 0
        if shocked:
            damage += SHOCK_DAMAGE[level_tier(owner.level)]
        result = self._strike(owner, "attack", damage, critical=critical)
        if shocked:
            result.message += " The target is SHOCKED!"
        if chilled:
            result.message += " Frost crackles along the whip."
            result.target_effects.append(self._chill())
        result.details.update({"chill_proc": chilled, "shocked": shocked})
        self._attach_burn(owner, result)
        return result

    def heavy_attack(self, owner: "Combatant", *, rng: RNG) -> ActionResult:
        damage = owner.attack_power * 2
        damage += math.floor(damage * ICE_SPIKES_MAGIC_BONUS)
        result = self._strike(owner, "heavy_attack", damage)
        result.target_effects.append(self._chill())
        self._attach_burn(owner, result)
        return result

    def defend(self, owner: "Combatant") -> ActionResult:
        self.mist_charges = min(MAX_MIST_CHARGES, self.mist_charges + 1)
        chance = int(round(self.evasion_chance(owner) * 100))
        return ActionResult(
            success=True,
            action="defend",
            message=(
                f"{owner.name} dissolves into mist ({chance}% evasion, "
                f"{self.mist_charges} charge(s))."
            ),
            details={"mist_charges": self.mist_charges},
        )

    def elite_skill(
        self,
        owner: "Combatant",
        *,
        target: "Combatant | None",
        rng: RNG,
        context: Mapping[str, object],
    ) -> ActionResult:
        tier = level_tier(owner.level)
        damage = FIRESTORM_DAMAGE[tier]
        owner.set_cooldown("elite", FIRESTORM_COOLDOWN[tier])
        self.firestorm_turns = FIRESTORM_ACTIVE_TURNS[tier]
        result = self._strike(owner, "elite", damage, verb="FIRESTORM")
        result.target_effects.append(self._burn(owner))
        return result

    def mitigate(self, owner: "Combatant", amount: int, *, rng: RNG) -> Mitigation:
        if not owner.is_defending:
            return Mitigation(damage=amount)
        power = self.magic_power(owner)
        if rng.random() < self.evasion_chance(owner):
            notes = [f"{owner.name} steps through the mist, evading completely!"]
            reflected = 0
            if self.mist_charges > 0:
                self.mist_charges -= 1
                reflected = math.floor(power * COUNTER_FACTOR)
                notes.append(f"{owner.name} counters from the mist!")
            self.mist_charges = min(MAX_MIST_CHARGES, self.mist_charges + 1)
            return Mitigation(damage=0, evaded=True, reflected=reflected, notes=notes)
        reduction = min(REDUCTION_CAP, power / REDUCTION_POWER_DIVISOR)
        damage = max(1, math.floor(amount * (1 - reduction)))
        return Mitigation(damage=damage, notes=["The mist softens the blow."])

    def on_turn_start(self, owner: "Combatant", report: TurnStartReport, *, was_defending: bool) -> None:
        if not was_defending and self.mist_charges > 0:
            self.mist_charges -= 1
        if self.firestorm_turns > 0:
            self.firestorm_turns -= 1
            if self.firestorm_turns == 0:
                report.notes.append("The firestorm burns out.")

    def _chill(self) -> StatusEffect:
        return make_status("chill", duration=CHILL_DURATION, source=self.archetype)

    def _burn(self, owner: "Combatant") -> StatusEffect:
        return make_status(
            "burn",
            duration=BURN_DURATION,
            source=self.archetype,
            magnitude=FIRESTORM_BURN[level_tier(owner.level)],
        )

    def _attach_burn(self, owner: "Combatant", result: ActionResult) -> None:
        if self.firestorm_turns > 0:
            result.target_effects.append(self._burn(owner))

    def reset(self) -> None:
        self.mist_charges = 0
        self.firestorm_turns = 0

    def describe(self, owner: "Combatant") -> Dict[str, object]:
        return {
            "mist_charges": self.mist_charges,
            "firestorm_turns": self.firestorm_turns,
            "evasion_chance": self.evasion_chance(owner),
        }

    def export_state(self) -> Dict[str, Any]:
        return {"mist_charges": self.mist_charges, "firestorm_turns": self.firestorm_turns}

    def restore_state(self, payload: Mapping[str, Any]) -> None:
        self.mist_charges = int(payload["mist_charges"])
        self.firestorm_turns = int(payload["firestorm_turns"])
