"""Combat domain models: action results, damage reports, log entries and state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Tuple

from arena.core.types import CombatOutcome, CombatPhase, LogCategory, Role
from arena.domain.status_effects import StatusEffect, StatusTick

if TYPE_CHECKING:
    from arena.domain.combatant import Combatant, Enemy, PlayerCharacter


@dataclass(slots=True)
class ActionResult:
    """Outcome of one combatant action.

    ``target_effects`` are statuses the orchestrator applies to the opponent.
    ``offensive`` marks actions aimed at the opponent, which can miss or be
    evaded by an untargetable opponent.
    """

    success: bool
    action: str
    message: str
    damage: int = 0
    hits: Tuple[int, ...] = ()
    is_critical: bool = False
    offensive: bool = False
    target_effects: List[StatusEffect] = field(default_factory=list)
    healed: int = 0
    details: Dict[str, object] = field(default_factory=dict)

    @classmethod
    def failure(cls, action: str, message: str) -> "ActionResult":
        return cls(success=False, action=action, message=message)


@dataclass(slots=True)
class Mitigation:
    """Archetype mitigation outcome for one incoming hit."""

    damage: int
    evaded: bool = False
    reflected: int = 0
    notes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class DamageResult:
    """Finalized damage taken by a combatant."""

    raw: int
    damage_taken: int
    current_hp: int
    is_alive: bool
    evaded: bool = False
    reflected_damage: int = 0
    notes: Tuple[str, ...] = ()


@dataclass(slots=True)
class TurnStartReport:
    """What happened while a combatant's turn started."""

    turn: int
    status_ticks: List[StatusTick] = field(default_factory=list)
    status_damage: int = 0
    stunned: bool = False
    locked_out: bool = False
    expired_cooldowns: Tuple[str, ...] = ()
    special_triggers: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Rewards:
    """Rewards attached to an enemy at creation and read on its defeat."""

    gold: int
    xp: int
    bonus_xp: int = 0
    prestige_points: int = 0
    unique_loot: str | None = None


@dataclass(slots=True)
class CombatLogEntry:
    """One append-only record in the combat event log."""

    turn: int
    category: LogCategory
    message: str
    timestamp: float


@dataclass(slots=True)
class CombatState:
    """Tracks the orchestrator's progress through one combat."""

    player: "PlayerCharacter"
    enemy: "Enemy"
    phase: CombatPhase = "inactive"
    turn_count: int = 0
    turn_order: Tuple[Role, ...] = ()
    active_index: int = 0
    outcome: CombatOutcome | None = None
    rewards: Rewards | None = None
    log: List[CombatLogEntry] = field(default_factory=list)

    @property
    def active_role(self) -> Role | None:
        if self.phase not in ("player_turn", "enemy_turn"):
            return None
        return self.turn_order[self.active_index]

    @property
    def is_over(self) -> bool:
        return self.phase == "ended"

    def combatant(self, role: Role) -> "Combatant":
        return self.player if role == "player" else self.enemy


@dataclass(slots=True, frozen=True)
class StatusView:
    kind: str
    remaining: int
    stacks: int
    source: str


@dataclass(slots=True, frozen=True)
class CombatantView:
    """Read-only public stats for a combatant."""

    name: str
    archetype: str
    level: int
    hp: int
    max_hp: int
    attack: int
    defense: int
    initiative: int
    remaining_moves: int
    moves_per_turn: int
    is_alive: bool
    is_defending: bool
    cooldowns: Dict[str, int]
    status_effects: Tuple[StatusView, ...]
    details: Dict[str, object]


@dataclass(slots=True, frozen=True)
class CombatStatus:
    """Snapshot returned by the controller for presentation layers."""

    phase: CombatPhase
    turn_count: int
    active_role: Role | None
    turn_order: Tuple[Role, ...]
    player: CombatantView | None
    enemy: CombatantView | None
    log: Tuple[CombatLogEntry, ...]
    outcome: CombatOutcome | None
    rewards: Rewards | None


@dataclass(slots=True, frozen=True)
class AvailableAction:
    """An action the player may currently submit."""

    kind: str
    label: str
    description: str
