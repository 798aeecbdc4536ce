"""Status effect definitions and the per-turn status processor."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Sequence, get_args

logger = logging.getLogger(__name__)

StatusKind = Literal[
    "bleed",
    "burn",
    "poison",
    "toxic_venom",
    "chill",
    "expose",
    "blinded",
    "intimidated",
    "stunned",
    "hardened_scales",
    "iron_guard",
    "battle_fury",
    "frenzy",
    "berserker",
]
STATUS_KINDS: tuple[str, ...] = get_args(StatusKind)

DEFAULT_MAX_STACKS = 3
MAX_ACCURACY_PENALTY = 0.9


@dataclass(slots=True, frozen=True)
class StatusRule:
    """Application and tick rules for one status kind."""

    allowed_sources: frozenset[str]
    stackable: bool = False
    timed: bool = True
    deals_damage: bool = False


# Sources are archetype tags; anything else is rejected on application.
STATUS_RULES: Dict[str, StatusRule] = {
    "bleed": StatusRule(frozenset({"warrior", "medium_beast"}), stackable=True, deals_damage=True),
    "burn": StatusRule(frozenset({"mage"}), deals_damage=True),
    "poison": StatusRule(frozenset({"small_humanoid"}), stackable=True, deals_damage=True),
    "toxic_venom": StatusRule(frozenset({"large_beast"}), deals_damage=True),
    "chill": StatusRule(frozenset({"mage"})),
    "expose": StatusRule(frozenset({"rogue"}), timed=False),
    "blinded": StatusRule(frozenset({"small_humanoid"})),
    "intimidated": StatusRule(frozenset({"medium_beast", "gladiator"})),
    "stunned": StatusRule(frozenset({"large_beast"})),
    "hardened_scales": StatusRule(frozenset({"large_beast"})),
    "iron_guard": StatusRule(frozenset({"gladiator"})),
    "battle_fury": StatusRule(frozenset({"gladiator"})),
    "frenzy": StatusRule(frozenset({"medium_beast"}), timed=False),
    "berserker": StatusRule(frozenset({"large_beast"}), timed=False),
}


@dataclass(slots=True)
class StatusEffect:
    """A status attached to a combatant."""

    kind: str
    remaining: int
    source: str
    stacks: int = 1
    max_stacks: int = DEFAULT_MAX_STACKS
    magnitude: int = 0
    accuracy_penalty: float = 0.0
    healing_reduction: float = 0.0

    @property
    def tick_damage(self) -> int:
        if not STATUS_RULES[self.kind].deals_damage:
            return 0
        return self.magnitude * self.stacks


@dataclass(slots=True)
class StatusTick:
    """Outcome of ticking one status at its owner's turn start."""

    kind: str
    damage: int
    stacks: int
    expired: bool


def make_status(
    kind: str,
    *,
    duration: int,
    source: str,
    magnitude: int = 0,
    accuracy_penalty: float = 0.0,
    healing_reduction: float = 0.0,
    max_stacks: int = DEFAULT_MAX_STACKS,
) -> StatusEffect:
    """Build a status effect, rejecting kinds outside the closed set."""
    if kind not in STATUS_RULES:
        raise ValueError(f"Unknown status kind '{kind}'.")
    if duration < 1:
        raise ValueError("Status duration must be at least 1 turn.")
    return StatusEffect(
        kind=kind,
        remaining=duration,
        source=source,
        max_stacks=max_stacks,
        magnitude=magnitude,
        accuracy_penalty=accuracy_penalty,
        healing_reduction=healing_reduction,
    )


def get_status(effects: Sequence[StatusEffect], kind: str) -> StatusEffect | None:
    for effect in effects:
        if effect.kind == kind:
            return effect
    return None


def has_status(effects: Sequence[StatusEffect], kind: str) -> bool:
    return get_status(effects, kind) is not None


def remove_status(effects: List[StatusEffect], kind: str) -> bool:
    """Remove a status by kind. Returns True when something was removed."""
    for index, effect in enumerate(effects):
        if effect.kind == kind:
            del effects[index]
            return True
    return False


def apply_status(effects: List[StatusEffect], effect: StatusEffect) -> bool:
    """
    Attach a status, honoring source gating and stacking rules.

    Re-applying an existing status refreshes its duration. Stackable kinds
    also gain a stack up to ``max_stacks``. Returns False when the source
    archetype is not allowed to apply this kind.
    """

    rule = STATUS_RULES[effect.kind]
    if effect.source not in rule.allowed_sources:
        logger.debug("Rejected %s from source %s", effect.kind, effect.source)
        return False

    existing = get_status(effects, effect.kind)
    if existing is None:
        effects.append(
            StatusEffect(
                kind=effect.kind,
                remaining=effect.remaining,
                source=effect.source,
                stacks=1,
                max_stacks=effect.max_stacks,
                magnitude=effect.magnitude,
                accuracy_penalty=effect.accuracy_penalty,
                healing_reduction=effect.healing_reduction,
            )
        )
        return True

    existing.remaining = effect.remaining
    existing.magnitude = max(existing.magnitude, effect.magnitude)
    existing.accuracy_penalty = max(existing.accuracy_penalty, effect.accuracy_penalty)
    existing.healing_reduction = max(existing.healing_reduction, effect.healing_reduction)
    if rule.stackable:
        existing.stacks = min(existing.max_stacks, existing.stacks + 1)
    return True


def tick_statuses(effects: List[StatusEffect]) -> List[StatusTick]:
    """Decay every timed status by one turn and report per-tick damage.

    The caller applies the reported damage to the owner. Untimed statuses
    (expose, frenzy, berserker) are left in place.
    """

    ticks: List[StatusTick] = []
    survivors: List[StatusEffect] = []
    for effect in effects:
        rule = STATUS_RULES[effect.kind]
        damage = effect.tick_damage
        if not rule.timed:
            survivors.append(effect)
            if damage:
                ticks.append(StatusTick(kind=effect.kind, damage=damage, stacks=effect.stacks, expired=False))
            continue
        effect.remaining = max(0, effect.remaining - 1)
        expired = effect.remaining == 0
        if not expired:
            survivors.append(effect)
        if damage or expired:
            ticks.append(StatusTick(kind=effect.kind, damage=damage, stacks=effect.stacks, expired=expired))
    effects[:] = survivors
    return ticks


def total_accuracy_penalty(effects: Sequence[StatusEffect]) -> float:
    penalty = sum(effect.accuracy_penalty for effect in effects)
    return min(MAX_ACCURACY_PENALTY, penalty)


def healing_reduction(effects: Sequence[StatusEffect]) -> float:
    return max((effect.healing_reduction for effect in effects), default=0.0)
