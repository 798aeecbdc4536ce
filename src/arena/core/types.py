"""Shared type aliases for the core and domain layers."""
from typing import Literal

ActionKind = Literal["attack", "heavy_attack", "defend", "heal", "elite"]
MoveKind = Literal["light", "heavy", "defend", "heal", "elite"]
PlayerArchetype = Literal["warrior", "rogue", "mage"]
EnemyArchetype = Literal["small_humanoid", "medium_beast", "large_beast", "gladiator"]
Role = Literal["player", "enemy"]
CombatPhase = Literal["inactive", "active", "player_turn", "enemy_turn", "ended"]
CombatOutcome = Literal["victory", "defeat", "draw"]
LogCategory = Literal[
    "combat_start",
    "turn_order",
    "flavor",
    "dialogue",
    "turn_start",
    "player_action",
    "enemy_action",
    "damage",
    "evaded",
    "reflection",
    "status_applied",
    "status_tick",
    "special",
    "enemy_reaction",
    "failed_action",
    "combat_end",
    "rewards",
    "bonus_rewards",
    "unique_loot",
    "level_up",
]

ACTION_KINDS: tuple[ActionKind, ...] = ("attack", "heavy_attack", "defend", "heal", "elite")
PLAYER_ARCHETYPES: tuple[PlayerArchetype, ...] = ("warrior", "rogue", "mage")
ENEMY_ARCHETYPES: tuple[EnemyArchetype, ...] = (
    "small_humanoid",
    "medium_beast",
    "large_beast",
    "gladiator",
)

__all__ = [
    "ActionKind",
    "MoveKind",
    "PlayerArchetype",
    "EnemyArchetype",
    "Role",
    "CombatPhase",
    "CombatOutcome",
    "LogCategory",
    "ACTION_KINDS",
    "PLAYER_ARCHETYPES",
    "ENEMY_ARCHETYPES",
]
