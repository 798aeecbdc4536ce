"""Goblin (small_humanoid): poisoned blade and dirty fighting."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, ClassVar, Dict

from arena.core.rng import RNG
from arena.domain.behaviors.enemy_base import AbilityInfo, EnemyBehavior
from arena.domain.combat_models import ActionResult
from arena.domain.status_effects import make_status

if TYPE_CHECKING:
    from arena.domain.ai import PlayerContext
    from arena.domain.combatant import Combatant, Enemy

POISONED_BLADE_FACTOR = 0.8
POISON_DURATION = 3
POISON_FACTOR = 0.3
BLIND_DURATION = 2
BLIND_ACCURACY_PENALTY = 0.2


class GoblinBehavior(EnemyBehavior):
    archetype: ClassVar[str] = "small_humanoid"
    abilities: ClassVar[Dict[str, AbilityInfo]] = {
        "poisoned_blade": AbilityInfo(damaging=True, targeted=True, applies_status=True),
        "dirty_fighting": AbilityInfo(damaging=False, targeted=True, applies_status=True),
    }
    counter_refinements: ClassVar[Dict[str, tuple[str, ...]]] = {
        "warrior": ("hit_and_run", "avoid_direct_confrontation"),
        "rogue": ("use_status_effects", "match_agility"),
        "mage": ("rush_down", "interrupt_spells"),
    }
    tag_bonuses: ClassVar[Dict[str, Dict[str, int]]] = {
        "hit_and_run": {"dirty_fighting": 10},
        "use_status_effects": {"poisoned_blade": 10, "dirty_fighting": 10},
        "rush_down": {"attack": 10},
    }

    def _use_poisoned_blade(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        damage = self.roll_damage(owner.attack_power * POISONED_BLADE_FACTOR, rng)
        result = self._ability_result(
            owner,
            "poisoned_blade",
            f"{owner.name} slashes with a poisoned blade for {damage} damage!",
            damage=damage,
        )
        result.target_effects.append(
            make_status(
                "poison",
                duration=POISON_DURATION,
                source=self.archetype,
                magnitude=max(1, math.floor(owner.attack_power * POISON_FACTOR)),
            )
        )
        return result

    def _use_dirty_fighting(self, owner: "Enemy", target: "Combatant", rng: RNG) -> ActionResult:
        result = self._ability_result(owner, "dirty_fighting", f"{owner.name} throws sand in your eyes!")
        result.target_effects.append(
            make_status(
                "blinded",
                duration=BLIND_DURATION,
                source=self.archetype,
                accuracy_penalty=BLIND_ACCURACY_PENALTY,
            )
        )
        return result

    def score_bonus(self, owner: "Enemy", action: str, context: "PlayerContext") -> float:
        if action == "poisoned_blade" and not context.player_has_status_effects:
            return 20
        if action == "dirty_fighting" and context.player_healthy:
            return 15
        return 0
