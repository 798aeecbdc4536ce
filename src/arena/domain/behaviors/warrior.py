"""Warrior: flat block mitigation and the Endure elite."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping

from arena.core.rng import RNG
from arena.domain.behaviors.base import ArchetypeBehavior, level_tier
from arena.domain.combat_models import ActionResult, Mitigation, TurnStartReport
from arena.domain.status_effects import make_status

if TYPE_CHECKING:
    from arena.domain.combatant import Combatant

BLOCK_PER_ENDURE_STACK = 5
ENDURE_DURATION = 2
ENDURE_MAX_STACKS = 3
ENDURE_MITIGATION = (0.33, 0.66, 1.0)
ENDURE_DAMAGE_BOOST = (0.15, 0.25, 0.35)
ENDURE_COOLDOWN = (5, 4, 3)
BLEED_DURATION = 3
BLEED_SCALING = (1, 3, 9)


class WarriorBehavior(ArchetypeBehavior):
    archetype: ClassVar[str] = "warrior"
    action_labels: ClassVar[Dict[str, str]] = {
        "attack": "Sword Strike",
        "heavy_attack": "Two-Handed Strike",
        "defend": "Block",
        "elite": "Endure",
    }

    def __init__(self) -> None:
        self.endure_turns = 0
        self.endure_stacks = 0

    @property
    def endure_active(self) -> bool:
        return self.endure_turns > 0

    def light_attack(self, owner: "Combatant", *, critical: bool, rng: RNG) -> ActionResult:
        result = super().light_attack(owner, critical=critical, rng=rng)
        self._attach_bleed(owner, result)
        return result

    def heavy_attack(self, owner: "Combatant", *, rng: RNG) -> ActionResult:
        damage = owner.attack_power * 2
        if self.endure_active:
            damage += math.floor(damage * ENDURE_DAMAGE_BOOST[level_tier(owner.level)])
        result = self._strike(owner, "heavy_attack", damage)
        self._attach_bleed(owner, result)
        return result

    def defend(self, owner: "Combatant") -> ActionResult:
        return ActionResult(
            success=True,
            action="defend",
            message=f"{owner.name} raises a shield and braces for impact.",
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
        self.endure_turns = ENDURE_DURATION
        self.endure_stacks = min(ENDURE_MAX_STACKS, self.endure_stacks + 1)
        owner.set_cooldown("elite", ENDURE_COOLDOWN[tier])
        mitigation = int(ENDURE_MITIGATION[tier] * 100)
        return ActionResult(
            success=True,
            action="elite",
            message=(
                f"{owner.name} roars and ENDURES! ({self.endure_stacks} stack(s), "
                f"{mitigation}% damage mitigation for {ENDURE_DURATION} turns)"
            ),
            details={"endure_stacks": self.endure_stacks},
        )

    def mitigate(self, owner: "Combatant", amount: int, *, rng: RNG) -> Mitigation:
        damage = amount
        notes = []
        if owner.is_defending:
            block = owner.total_defense + BLOCK_PER_ENDURE_STACK * self.endure_stacks
            damage = max(1, damage - block)
            notes.append(f"{owner.name} blocks {amount - damage} damage.")
        if self.endure_active:
            absorbed = math.floor(damage * ENDURE_MITIGATION[level_tier(owner.level)])
            damage -= absorbed
            if absorbed:
                notes.append(f"Endure absorbs {absorbed} damage.")
        return Mitigation(damage=damage, notes=notes)

    def on_turn_start(self, owner: "Combatant", report: TurnStartReport, *, was_defending: bool) -> None:
        if self.endure_turns > 0:
            self.endure_turns -= 1
            if self.endure_turns == 0:
                self.endure_stacks = 0
                report.notes.append(f"{owner.name}'s Endure fades.")

    def bleed_magnitude(self, owner: "Combatant") -> int:
        return max(1, owner.base_attack // 6) * BLEED_SCALING[level_tier(owner.level)]

    def _attach_bleed(self, owner: "Combatant", result: ActionResult) -> None:
        if self.endure_active and result.damage > 0:
            result.target_effects.append(
                make_status(
                    "bleed",
                    duration=BLEED_DURATION,
                    source=self.archetype,
                    magnitude=self.bleed_magnitude(owner),
                )
            )

    def reset(self) -> None:
        self.endure_turns = 0
        self.endure_stacks = 0

    def describe(self, owner: "Combatant") -> Dict[str, object]:
        return {"endure_turns": self.endure_turns, "endure_stacks": self.endure_stacks}

    def export_state(self) -> Dict[str, Any]:
        return {"endure_turns": self.endure_turns, "endure_stacks": self.endure_stacks}

    def restore_state(self, payload: Mapping[str, Any]) -> None:
        self.endure_turns = int(payload["endure_turns"])
        self.endure_stacks = int(payload["endure_stacks"])
