"""Shared enemy behavior: damage variance, defend mitigation and ability dispatch."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Dict

from arena.core.rng import RNG
from arena.domain.behaviors.base import ArchetypeBehavior
from arena.domain.combat_models import ActionResult, Mitigation

if TYPE_CHECKING:
    from arena.domain.ai import PlayerContext
    from arena.domain.combatant import Combatant, Enemy

DAMAGE_VARIANCE = 0.2
DEFEND_MITIGATION = 0.5


@dataclass(slots=True, frozen=True)
class AbilityInfo:
    """How the AI and the orchestrator should treat an action."""

    damaging: bool
    targeted: bool
    applies_status: bool = False


BASE_ACTIONS: Dict[str, AbilityInfo] = {
    "attack": AbilityInfo(damaging=True, targeted=True),
    "defend": AbilityInfo(damaging=False, targeted=False),
    "heavy_attack": AbilityInfo(damaging=True, targeted=True),
}


class EnemyBehavior(ArchetypeBehavior):
    """Base for enemy archetypes.

    Subclasses declare ``abilities`` and implement ``_use_<ability>`` methods.
    ``counter_refinements`` extends the AI counter-strategy tags per player
    class and ``tag_bonuses`` turns those tags into action score bonuses.
    """

    abilities: ClassVar[Dict[str, AbilityInfo]] = {}
    counter_refinements: ClassVar[Dict[str, tuple[str, ...]]] = {}
    tag_bonuses: ClassVar[Dict[str, Dict[str, int]]] = {}

    def cooldown_keys(self) -> tuple[str, ...]:
        return ("heavy_attack", *self.abilities)

    def elite_cooldown_key(self, owner: "Combatant") -> str | None:
        return None

    def action_info(self, action: str) -> AbilityInfo:
        if action in BASE_ACTIONS:
            return BASE_ACTIONS[action]
        return self.abilities[action]

    @staticmethod
    def roll_damage(base: float, rng: RNG) -> int:
        """Apply the enemy damage variance to a base value."""
        low = math.floor(base * (1 - DAMAGE_VARIANCE))
        high = math.floor(base * (1 + DAMAGE_VARIANCE))
        return rng.randint(low, max(low, high))

    # -----------------------
    # Base actions
    # -----------------------
    def light_attack(self, owner: "Combatant", *, critical: bool, rng: RNG) -> ActionResult:
        damage = self.roll_damage(owner.attack_power, rng)
        if critical:
            damage = owner.apply_critical(damage)
        return self._strike(owner, "attack", damage, critical=critical, verb="an attack")

    def heavy_attack(self, owner: "Combatant", *, rng: RNG) -> ActionResult:
        damage = self.roll_damage(owner.attack_power * 2, rng)
        return self._strike(owner, "heavy_attack", damage, verb="a heavy attack")

    def defend(self, owner: "Combatant") -> ActionResult:
        return ActionResult(success=True, action="defend", message=f"{owner.name} braces for your attack.")

    # -----------------------
    # Mitigation
    # -----------------------
    def natural_armor(self, owner: "Combatant") -> int:
        return 0

    def mitigate(self, owner: "Combatant", amount: int, *, rng: RNG) -> Mitigation:
        damage = amount
        notes = []
        armor = self.natural_armor(owner)
        if armor:
            damage = max(1, damage - armor)
        if owner.is_defending:
            guard = math.floor(owner.total_defense * DEFEND_MITIGATION)
            damage = max(1, damage - guard)
            notes.append(f"{owner.name}'s guard softens the blow.")
        return Mitigation(damage=damage, notes=notes)

    # -----------------------
    # Abilities
    # -----------------------
    def ability_ready(self, owner: "Enemy", ability: str) -> bool:
        """Extra, state-based gating beyond the cooldown."""
        return True

    def use_ability(self, owner: "Enemy", ability: str, *, target: "Combatant", rng: RNG) -> ActionResult:
        handler = getattr(self, f"_use_{ability}")
        return handler(owner, target, rng)

    def score_bonus(self, owner: "Enemy", action: str, context: "PlayerContext") -> float:
        """Archetype-specific score bonus for an available action."""
        return 0.0

    def refine_strategy(self, player_archetype: str, tags: tuple[str, ...]) -> tuple[str, ...]:
        return tags + self.counter_refinements.get(player_archetype, ())

    def phase_dialogue(self, owner: "Enemy", rng: RNG) -> str | None:
        """Return a line when the enemy's dialogue phase changes."""
        return None

    def defeat_dialogue(self, owner: "Enemy", rng: RNG) -> str | None:
        return None

    def _ability_result(
        self,
        owner: "Combatant",
        ability: str,
        message: str,
        *,
        damage: int = 0,
        hits: tuple[int, ...] | None = None,
    ) -> ActionResult:
        info = self.abilities[ability]
        return ActionResult(
            success=True,
            action=ability,
            message=message,
            damage=damage,
            hits=hits if hits is not None else ((damage,) if damage else ()),
            offensive=info.targeted,
        )
