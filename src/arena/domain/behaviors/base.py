"""Archetype behavior interface shared by player classes and enemies."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping

from arena.core.rng import RNG
from arena.domain.combat_models import ActionResult, Mitigation, TurnStartReport

if TYPE_CHECKING:
    from arena.domain.combatant import Combatant

ACTION_LABELS: Dict[str, str] = {
    "attack": "Light Attack",
    "heavy_attack": "Heavy Attack",
    "defend": "Defend",
    "heal": "Drink Potion",
    "elite": "Elite Skill",
}


def level_tier(level: int) -> int:
    """Map a level onto the three elite tiers (3 or below, 4, 5 and above)."""
    if level >= 5:
        return 2
    if level >= 4:
        return 1
    return 0


class ArchetypeBehavior:
    """Damage, mitigation and elite formulas for one archetype.

    Each combatant owns its own behavior instance, so archetype state
    (stealth, endure stacks, mist charges...) lives here and is reset by
    ``reset()`` at combat start.
    """

    archetype: ClassVar[str] = ""
    extra_cooldowns: ClassVar[tuple[str, ...]] = ()
    action_labels: ClassVar[Dict[str, str]] = {}

    def cooldown_keys(self) -> tuple[str, ...]:
        return ("heavy_attack", "heal", "elite", *self.extra_cooldowns)

    def elite_cooldown_key(self, owner: "Combatant") -> str | None:
        return "elite"

    def attack_bonus(self, owner: "Combatant") -> int:
        return 0

    def is_targetable(self, owner: "Combatant") -> bool:
        return True

    def action_label(self, owner: "Combatant", kind: str) -> str:
        return self.action_labels.get(kind, ACTION_LABELS[kind])

    # -----------------------
    # Actions
    # -----------------------
    def light_attack(self, owner: "Combatant", *, critical: bool, rng: RNG) -> ActionResult:
        damage = owner.attack_power
        if critical:
            damage = owner.apply_critical(damage)
        return self._strike(owner, "attack", damage, critical=critical)

    def heavy_attack(self, owner: "Combatant", *, rng: RNG) -> ActionResult:
        return self._strike(owner, "heavy_attack", owner.attack_power * 2)

    def defend(self, owner: "Combatant") -> ActionResult:
        return ActionResult(success=True, action="defend", message=f"{owner.name} takes a defensive stance.")

    def elite_skill(
        self,
        owner: "Combatant",
        *,
        target: "Combatant | None",
        rng: RNG,
        context: Mapping[str, object],
    ) -> ActionResult:
        return ActionResult.failure("elite", f"{owner.name} has no elite skill.")

    def mitigate(self, owner: "Combatant", amount: int, *, rng: RNG) -> Mitigation:
        return Mitigation(damage=amount)

    def on_turn_start(self, owner: "Combatant", report: TurnStartReport, *, was_defending: bool) -> None:
        """Advance archetype timers; append notes or special triggers to the report."""

    # -----------------------
    # State
    # -----------------------
    def reset(self) -> None:
        """Return archetype state to its combat-start baseline."""

    def describe(self, owner: "Combatant") -> Dict[str, object]:
        return {}

    def export_state(self) -> Dict[str, Any]:
        return {}

    def restore_state(self, payload: Mapping[str, Any]) -> None:
        """Restore what export_state() produced."""

    # -----------------------
    # Helpers
    # -----------------------
    def _strike(
        self,
        owner: "Combatant",
        action: str,
        damage: int,
        *,
        hits: tuple[int, ...] | None = None,
        critical: bool = False,
        verb: str | None = None,
    ) -> ActionResult:
        label = verb or self.action_label(owner, action)
        message = f"{owner.name} uses {label} for {damage} damage."
        if critical:
            message += " Critical hit!"
        return ActionResult(
            success=True,
            action=action,
            message=message,
            damage=damage,
            hits=hits if hits is not None else (damage,),
            is_critical=critical,
            offensive=True,
        )
