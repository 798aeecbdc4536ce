"""Rogue: multi-hit attacks, probabilistic dodge and Stealth/Backstab."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping

from arena.core.rng import RNG
from arena.domain.behaviors.base import ArchetypeBehavior, level_tier
from arena.domain.combat_models import ActionResult, Mitigation, TurnStartReport
from arena.domain.status_effects import make_status

if TYPE_CHECKING:
    from arena.domain.combatant import Combatant

DODGE_BASE = 0.15
DODGE_PER_LEVEL = 0.05
DODGE_CAP = 0.6
PARTIAL_MITIGATION_DIVISOR = 30
PARTIAL_MITIGATION_CAP = 0.5
FLURRY_HITS = 4
STEALTH_DURATION = (2, 2, 3)
STEALTH_COOLDOWN = (6, 5, 4)
BACKSTAB_COOLDOWN = (4, 3, 3)
BACKSTAB_BONUS = (0.5, 0.75, 1.0)


class RogueBehavior(ArchetypeBehavior):
    archetype: ClassVar[str] = "rogue"
    extra_cooldowns: ClassVar[tuple[str, ...]] = ("backstab",)
    action_labels: ClassVar[Dict[str, str]] = {
        "attack": "Double Dagger",
        "heavy_attack": "Flurry",
        "defend": "Dodge",
        "elite": "Stealth",
    }

    def __init__(self) -> None:
        self.stealth_turns = 0
        self.backstab_ready = False

    @property
    def stealthed(self) -> bool:
        return self.stealth_turns > 0

    def elite_cooldown_key(self, owner: "Combatant") -> str | None:
        # A second elite use while hidden arms the backstab on its own cooldown.
        return "backstab" if self.stealthed else "elite"

    def is_targetable(self, owner: "Combatant") -> bool:
        return not self.stealthed

    def action_label(self, owner: "Combatant", kind: str) -> str:
        if kind == "elite" and self.stealthed:
            return "Backstab"
        return super().action_label(owner, kind)

    def dodge_chance(self, owner: "Combatant") -> float:
        chance = DODGE_BASE + owner.total_defense / 100 + DODGE_PER_LEVEL * (owner.level - 1)
        return min(DODGE_CAP, chance)

    def light_attack(self, owner: "Combatant", *, critical: bool, rng: RNG) -> ActionResult:
        per_hit = owner.attack_power // 2
        hits = [owner.apply_critical(per_hit) if critical else per_hit for _ in range(2)]
        bonus = 0
        if self.backstab_ready:
            bonus = math.floor(owner.attack_power * BACKSTAB_BONUS[level_tier(owner.level)])
            self._exit_stealth()
        damage = sum(hits) + bonus
        result = self._strike(owner, "attack", damage, hits=tuple(hits), critical=critical)
        if bonus:
            result.message = f"{owner.name} strikes from the shadows! BACKSTAB for {damage} damage."
            result.details["backstab_bonus"] = bonus
        return result

    def heavy_attack(self, owner: "Combatant", *, rng: RNG) -> ActionResult:
        per_hit = (owner.attack_power * 2) // FLURRY_HITS
        hits = tuple(per_hit for _ in range(FLURRY_HITS))
        revealed = self.stealthed
        self._exit_stealth()
        result = self._strike(owner, "heavy_attack", sum(hits), hits=hits)
        if revealed:
            result.message += f" {owner.name} leaves the shadows."
        return result

    def defend(self, owner: "Combatant") -> ActionResult:
        chance = int(round(self.dodge_chance(owner) * 100))
        return ActionResult(
            success=True,
            action="defend",
            message=f"{owner.name} gets ready to dodge ({chance}% chance).",
            details={"dodge_chance": self.dodge_chance(owner)},
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
        if not self.stealthed:
            self.stealth_turns = STEALTH_DURATION[tier]
            owner.set_cooldown("elite", STEALTH_COOLDOWN[tier])
            return ActionResult(
                success=True,
                action="elite",
                message=f"{owner.name} vanishes into the shadows for {self.stealth_turns} turn(s).",
                details={"stealth_turns": self.stealth_turns},
            )
        self.backstab_ready = True
        owner.set_cooldown("backstab", BACKSTAB_COOLDOWN[tier])
        return ActionResult(
            success=True,
            action="elite",
            message=f"{owner.name} circles behind the enemy, ready to backstab.",
            details={"backstab_ready": True},
        )

    def mitigate(self, owner: "Combatant", amount: int, *, rng: RNG) -> Mitigation:
        if not owner.is_defending:
            return Mitigation(damage=amount)
        if rng.random() < self.dodge_chance(owner):
            # The miss leaves an opening the rogue's next light attack exploits.
            owner.receive_status(make_status("expose", duration=1, source=self.archetype))
            return Mitigation(
                damage=0,
                evaded=True,
                notes=[f"{owner.name} dodges the attack completely and spots an opening!"],
            )
        reduction = min(PARTIAL_MITIGATION_CAP, owner.total_defense / PARTIAL_MITIGATION_DIVISOR)
        damage = max(1, math.floor(amount * (1 - reduction)))
        return Mitigation(damage=damage, notes=[f"{owner.name} partially dodges."])

    def on_turn_start(self, owner: "Combatant", report: TurnStartReport, *, was_defending: bool) -> None:
        if self.stealth_turns > 0:
            self.stealth_turns -= 1
            if self.stealth_turns == 0:
                self._exit_stealth()
                report.notes.append(f"{owner.name} emerges from the shadows.")

    def _exit_stealth(self) -> None:
        # A prepared backstab only exists inside stealth.
        self.stealth_turns = 0
        self.backstab_ready = False

    def reset(self) -> None:
        self._exit_stealth()

    def describe(self, owner: "Combatant") -> Dict[str, object]:
        return {
            "stealth_turns": self.stealth_turns,
            "backstab_ready": self.backstab_ready,
            "dodge_chance": self.dodge_chance(owner),
        }

    def export_state(self) -> Dict[str, Any]:
        return {"stealth_turns": self.stealth_turns, "backstab_ready": self.backstab_ready}

    def restore_state(self, payload: Mapping[str, Any]) -> None:
        self.stealth_turns = int(payload["stealth_turns"])
        self.backstab_ready = bool(payload["backstab_ready"])
