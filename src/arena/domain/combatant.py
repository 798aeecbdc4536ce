"""Combatant model: resources, gating and the shared action contract.

Archetype-specific formulas live in ``ArchetypeBehavior`` implementations;
this module owns the bookkeeping every archetype shares (moves, cooldowns,
the heavy-attack lockout, critical consumption, healing and status ticks).
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, ClassVar, Dict, Iterable, List, Mapping

from arena.core.rng import RNG
from arena.core.types import MoveKind, Role
from arena.domain.combat_models import (
    ActionResult,
    CombatantView,
    DamageResult,
    Rewards,
    StatusView,
    TurnStartReport,
)
from arena.domain.entities import Equipment, StatBlock
from arena.domain.errors import CombatStateError
from arena.domain.status_effects import (
    StatusEffect,
    apply_status,
    has_status,
    healing_reduction,
    remove_status,
    tick_statuses,
    total_accuracy_penalty,
)

if TYPE_CHECKING:
    from arena.domain.behaviors.base import ArchetypeBehavior
    from arena.domain.behaviors.enemy_base import EnemyBehavior
    from arena.domain.defs import ClassDef, EnemyDef

logger = logging.getLogger(__name__)

ELITE_MIN_LEVEL = 3
ELITE_MOVE_COST = 2
HEAVY_COOLDOWN = 2
HEAL_COOLDOWN = 2
HEAL_FRACTION = 0.4
CRITICAL_MULTIPLIER = 1.5
XP_PER_LEVEL = 100

MOVE_KINDS: tuple[MoveKind, ...] = ("light", "heavy", "defend", "heal", "elite")


class Combatant:
    """A participant in a one-on-one combat."""

    role: ClassVar[Role] = "player"

    def __init__(
        self,
        *,
        name: str,
        archetype: str,
        behavior: "ArchetypeBehavior",
        max_hp: int,
        base_attack: int,
        defense: int,
        initiative: int,
        level: int = 1,
        moves_per_turn: int = 1,
        potions: int = 0,
        heavy_cooldown: int = HEAVY_COOLDOWN,
        equipment: Equipment | None = None,
        hp: int | None = None,
    ) -> None:
        if max_hp < 1:
            raise ValueError("max_hp must be at least 1.")
        if moves_per_turn < 1:
            raise ValueError("moves_per_turn must be at least 1.")
        self.name = name
        self.archetype = archetype
        self.behavior = behavior
        self.level = level
        self.max_hp = max_hp
        self.hp = max_hp if hp is None else max(0, min(hp, max_hp))
        self.base_attack = base_attack
        self.defense = defense
        self.base_initiative = initiative
        self.initiative = initiative
        self.moves_per_turn = moves_per_turn
        self.remaining_moves = moves_per_turn
        self.potions = potions
        self.heavy_cooldown = heavy_cooldown
        self.equipment = equipment or Equipment()
        self.cooldowns: Dict[str, int] = {key: 0 for key in behavior.cooldown_keys()}
        self.status_effects: List[StatusEffect] = []
        self.is_defending = False
        self.recovering = False
        self.locked_out = False
        self.critical_next = False
        self.turn_count = 0
        self.light_attack_count = 0

    # -----------------------
    # Derived stats
    # -----------------------
    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp

    @property
    def attack_power(self) -> int:
        return self.base_attack + self.equipment.attack_bonus + self.behavior.attack_bonus(self)

    @property
    def total_defense(self) -> int:
        return self.defense + self.equipment.defense_bonus

    @property
    def is_locked_out(self) -> bool:
        """True while a heavy attack's recovery blocks offensive actions."""
        return self.recovering or self.locked_out

    @property
    def accuracy_penalty(self) -> float:
        return total_accuracy_penalty(self.status_effects)

    @property
    def is_targetable(self) -> bool:
        return self.behavior.is_targetable(self)

    def has_status(self, kind: str) -> bool:
        return has_status(self.status_effects, kind)

    # -----------------------
    # Cooldowns
    # -----------------------
    def set_cooldown(self, key: str, turns: int) -> None:
        if key not in self.cooldowns:
            raise CombatStateError(f"{self.name} has no cooldown named '{key}'.")
        self.cooldowns[key] = max(0, turns)

    def restore_cooldowns(self, values: Mapping[str, int]) -> None:
        """Replace cooldown values; keys must match this combatant's closed set."""
        unknown = set(values) - set(self.cooldowns)
        if unknown:
            raise CombatStateError(f"{self.name} has no cooldowns named {sorted(unknown)}.")
        for key, turns in values.items():
            self.set_cooldown(key, turns)

    def _tick_cooldowns(self) -> tuple[str, ...]:
        expired: List[str] = []
        for key, turns in self.cooldowns.items():
            if turns > 0:
                self.cooldowns[key] = turns - 1
                if turns == 1:
                    expired.append(key)
        return tuple(expired)

    # -----------------------
    # Gating
    # -----------------------
    def can_perform_action(self, kind: str) -> bool:
        """Return True when the action kind is currently allowed."""
        return self.gate_failure(kind) is None

    def gate_failure(self, kind: str) -> str | None:
        """Return why an action kind is blocked, or None when it is allowed."""
        if kind not in MOVE_KINDS:
            return f"Unknown action '{kind}'."
        if not self.is_alive:
            return f"{self.name} has been defeated."
        if kind == "elite":
            key = self.behavior.elite_cooldown_key(self)
            if key is None:
                return f"{self.name} has no elite skill."
            if self.level < ELITE_MIN_LEVEL:
                return f"Elite skills unlock at level {ELITE_MIN_LEVEL}."
            if self.remaining_moves < ELITE_MOVE_COST:
                return "Elite skills need both moves of a turn."
            if self.is_locked_out:
                return f"{self.name} is still recovering from a heavy attack."
            if self.cooldowns[key] > 0:
                return f"Elite skill is on cooldown for {self.cooldowns[key]} more turn(s)."
            return None
        if self.remaining_moves < 1:
            return f"{self.name} has no moves left this turn."
        if kind in ("light", "heavy") and self.is_locked_out:
            return f"{self.name} is still recovering from a heavy attack."
        if kind == "heavy" and self.cooldowns["heavy_attack"] > 0:
            return f"Heavy attack is on cooldown for {self.cooldowns['heavy_attack']} more turn(s)."
        if kind == "heal":
            if self.potions < 1:
                return "No potions left."
            if self.cooldowns.get("heal", 0) > 0:
                return f"Healing is on cooldown for {self.cooldowns['heal']} more turn(s)."
        return None

    def _spend_moves(self, count: int) -> None:
        if count > self.remaining_moves:
            raise CombatStateError(f"{self.name} cannot spend {count} move(s).")
        self.remaining_moves -= count

    def _consume_critical(self) -> bool:
        if self.critical_next:
            self.critical_next = False
            return True
        return remove_status(self.status_effects, "expose")

    @staticmethod
    def apply_critical(damage: int) -> int:
        return math.floor(damage * CRITICAL_MULTIPLIER)

    # -----------------------
    # Actions
    # -----------------------
    def light_attack(self, rng: RNG) -> ActionResult:
        reason = self.gate_failure("light")
        if reason:
            return ActionResult.failure("attack", reason)
        self._spend_moves(1)
        self.light_attack_count += 1
        critical = self._consume_critical()
        return self.behavior.light_attack(self, critical=critical, rng=rng)

    def heavy_attack(self, rng: RNG) -> ActionResult:
        reason = self.gate_failure("heavy")
        if reason:
            return ActionResult.failure("heavy_attack", reason)
        self._spend_moves(1)
        result = self.behavior.heavy_attack(self, rng=rng)
        self.set_cooldown("heavy_attack", self.heavy_cooldown)
        self.recovering = True
        return result

    def defend(self) -> ActionResult:
        reason = self.gate_failure("defend")
        if reason:
            return ActionResult.failure("defend", reason)
        self._spend_moves(1)
        self.is_defending = True
        return self.behavior.defend(self)

    def heal(self) -> ActionResult:
        reason = self.gate_failure("heal")
        if reason:
            return ActionResult.failure("heal", reason)
        self._spend_moves(1)
        self.potions -= 1
        self.set_cooldown("heal", HEAL_COOLDOWN)
        amount = math.floor(self.max_hp * HEAL_FRACTION)
        reduction = healing_reduction(self.status_effects)
        if reduction:
            amount = math.floor(amount * (1 - reduction))
        healed = self.restore_hp(amount)
        message = f"{self.name} drinks a potion and recovers {healed} HP ({self.potions} left)."
        if reduction:
            message += " The venom dulls the potion."
        return ActionResult(success=True, action="heal", message=message, healed=healed)

    def elite_skill(
        self,
        rng: RNG,
        target: "Combatant | None" = None,
        context: Mapping[str, object] | None = None,
    ) -> ActionResult:
        reason = self.gate_failure("elite")
        if reason:
            return ActionResult.failure("elite", reason)
        self._spend_moves(ELITE_MOVE_COST)
        return self.behavior.elite_skill(self, target=target, rng=rng, context=context or {})

    # -----------------------
    # Damage and healing
    # -----------------------
    def take_damage(self, amount: int, rng: RNG) -> DamageResult:
        """Run the archetype mitigation policy and lose the remaining HP."""
        if not self.is_alive:
            raise CombatStateError(f"{self.name} is already defeated and cannot take damage.")
        if amount < 0:
            raise ValueError("Damage cannot be negative.")
        mitigation = self.behavior.mitigate(self, amount, rng=rng)
        taken = self.lose_hp(mitigation.damage)
        return DamageResult(
            raw=amount,
            damage_taken=taken,
            current_hp=self.hp,
            is_alive=self.is_alive,
            evaded=mitigation.evaded,
            reflected_damage=mitigation.reflected,
            notes=tuple(mitigation.notes),
        )

    def lose_hp(self, amount: int) -> int:
        """Lose HP directly, bypassing mitigation. Returns the HP actually lost."""
        if amount <= 0:
            return 0
        if not self.is_alive:
            raise CombatStateError(f"{self.name} is already defeated.")
        lost = min(self.hp, amount)
        self.hp -= lost
        if not self.is_alive:
            logger.debug("%s was defeated", self.name)
        return lost

    def restore_hp(self, amount: int) -> int:
        if amount <= 0 or not self.is_alive:
            return 0
        healed = min(self.max_hp - self.hp, amount)
        self.hp += healed
        return healed

    def receive_status(self, effect: StatusEffect) -> bool:
        """Apply a status to this combatant. Chill also delays active cooldowns."""
        applied = apply_status(self.status_effects, effect)
        if applied and effect.kind == "chill":
            for key, turns in self.cooldowns.items():
                if turns > 0:
                    self.cooldowns[key] = turns + 1
        return applied

    # -----------------------
    # Lifecycle
    # -----------------------
    def start_turn(self) -> TurnStartReport:
        """Tick cooldowns and statuses, then refresh moves and clear turn flags."""
        if not self.is_alive:
            raise CombatStateError(f"{self.name} cannot start a turn while defeated.")
        self.turn_count += 1
        was_defending = self.is_defending
        expired = self._tick_cooldowns()
        stunned = self.has_status("stunned")

        report = TurnStartReport(turn=self.turn_count, expired_cooldowns=expired, stunned=stunned)
        for tick in tick_statuses(self.status_effects):
            report.status_ticks.append(tick)
            if tick.damage and self.is_alive:
                report.status_damage += self.lose_hp(tick.damage)

        self.is_defending = False
        self.locked_out = self.recovering
        self.recovering = False
        report.locked_out = self.locked_out
        self.remaining_moves = 0 if stunned else self.moves_per_turn
        if self.is_alive:
            self.behavior.on_turn_start(self, report, was_defending=was_defending)
        return report

    def reset_for_combat(self) -> None:
        """Return every transient combat value to its baseline."""
        self.remaining_moves = self.moves_per_turn
        self.is_defending = False
        self.recovering = False
        self.locked_out = False
        self.critical_next = False
        self.status_effects.clear()
        for key in self.cooldowns:
            self.cooldowns[key] = 0
        self.turn_count = 0
        self.light_attack_count = 0
        self.initiative = self.base_initiative
        self.behavior.reset()

    # -----------------------
    # Views
    # -----------------------
    def to_view(self) -> CombatantView:
        return CombatantView(
            name=self.name,
            archetype=self.archetype,
            level=self.level,
            hp=self.hp,
            max_hp=self.max_hp,
            attack=self.attack_power,
            defense=self.total_defense,
            initiative=self.initiative,
            remaining_moves=self.remaining_moves,
            moves_per_turn=self.moves_per_turn,
            is_alive=self.is_alive,
            is_defending=self.is_defending,
            cooldowns=dict(self.cooldowns),
            status_effects=tuple(
                StatusView(kind=effect.kind, remaining=effect.remaining, stacks=effect.stacks, source=effect.source)
                for effect in self.status_effects
            ),
            details=self.behavior.describe(self),
        )


class PlayerCharacter(Combatant):
    """A player character that persists between combats and levels up."""

    role: ClassVar[Role] = "player"

    def __init__(
        self,
        *,
        class_def: "ClassDef",
        experience: int = 0,
        gold: int = 0,
        prestige_points: int = 0,
        loot: Iterable[str] = (),
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.class_def = class_def
        self.experience = experience
        self.gold = gold
        self.prestige_points = prestige_points
        self.loot: List[str] = list(loot)

    def credit_rewards(self, rewards: Rewards) -> List[int]:
        """Add an enemy's rewards; returns every level reached from the experience."""
        self.gold += rewards.gold
        self.prestige_points += rewards.prestige_points
        if rewards.unique_loot:
            self.loot.append(rewards.unique_loot)
        return self.gain_experience(rewards.xp + rewards.bonus_xp)

    @property
    def experience_to_next(self) -> int:
        return self.level * XP_PER_LEVEL

    def stat_block(self) -> StatBlock:
        """Return the stats enemy creation scales from."""
        return StatBlock(
            max_hp=self.max_hp,
            attack=self.base_attack + self.equipment.attack_bonus,
            defense=self.total_defense,
            initiative=self.base_initiative,
        )

    def gain_experience(self, amount: int) -> List[int]:
        """Add experience and return every level reached."""
        if amount < 0:
            raise ValueError("Experience cannot be negative.")
        self.experience += amount
        reached: List[int] = []
        while self.experience >= self.experience_to_next:
            self.experience -= self.experience_to_next
            self.level_up()
            reached.append(self.level)
        return reached

    def level_up(self) -> None:
        self.level += 1
        self.max_hp += self.class_def.hp_per_level
        self.hp = self.max_hp
        self.base_attack += self.class_def.attack_per_level
        self.defense += self.class_def.defense_per_level
        self.base_initiative = self.class_def.initiative_at(self.level)
        self.initiative = self.base_initiative
        self.moves_per_turn = moves_for_level(self.level)
        self.remaining_moves = min(self.remaining_moves, self.moves_per_turn)


class Enemy(Combatant):
    """An enemy built fresh for each encounter, acting through the AI model."""

    role: ClassVar[Role] = "enemy"
    behavior: "EnemyBehavior"

    def __init__(
        self,
        *,
        enemy_def: "EnemyDef",
        stage: int,
        profile: str,
        rewards: Rewards,
        title: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.enemy_def = enemy_def
        self.enemy_id = enemy_def.id
        self.stage = stage
        self.profile = profile
        self.rewards = rewards
        self.title = title

    @property
    def display_name(self) -> str:
        if self.title:
            return f"{self.name}, {self.title}"
        return self.name

    def get_rewards(self) -> Rewards:
        return self.rewards

    def ability_cooldown(self, ability: str) -> int:
        return self.enemy_def.abilities[ability]

    def can_use(self, action: str) -> bool:
        """Return True when the AI may pick this action right now."""
        if action == "attack":
            return self.can_perform_action("light")
        if action == "defend":
            return self.can_perform_action("defend")
        if action == "heavy_attack":
            return self.can_perform_action("heavy")
        if action not in self.behavior.abilities or not self.is_alive:
            return False
        if self.remaining_moves < 1 or self.cooldowns[action] > 0:
            return False
        if self.behavior.abilities[action].damaging and self.is_locked_out:
            return False
        return self.behavior.ability_ready(self, action)

    def available_actions(self) -> List[str]:
        """Base actions plus every ability whose cooldown is ready, in a stable order."""
        candidates: Iterable[str] = ("attack", "defend", "heavy_attack", *self.behavior.abilities)
        return [action for action in candidates if self.can_use(action)]

    def perform(self, action: str, target: Combatant, rng: RNG) -> ActionResult:
        if action == "attack":
            return self.light_attack(rng)
        if action == "defend":
            return self.defend()
        if action == "heavy_attack":
            return self.heavy_attack(rng)
        if not self.can_use(action):
            return ActionResult.failure(action, f"{self.name} cannot use {action} right now.")
        self._spend_moves(1)
        self.set_cooldown(action, self.ability_cooldown(action))
        return self.behavior.use_ability(self, action, target=target, rng=rng)

    def react_to(self, action_kind: str, rng: RNG) -> str | None:
        lines = self.enemy_def.reactions.get(action_kind)
        if not lines:
            return None
        return rng.choice(lines)

    def flavor_text(self, rng: RNG) -> str | None:
        if not self.enemy_def.flavor:
            return None
        return rng.choice(self.enemy_def.flavor)


def moves_for_level(level: int) -> int:
    return 1 if level <= 1 else 2
