"""Enemy decision model: context, counter strategies and action scoring."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Tuple

from arena.core.rng import RNG

if TYPE_CHECKING:
    from arena.domain.combatant import Combatant, Enemy

logger = logging.getLogger(__name__)

PLAYER_LOW_HEALTH = 0.25
PLAYER_HEALTHY = 0.7
ENEMY_LOW_HEALTH = 0.3
ENEMY_HEALTHY = 0.7
JITTER = 10.0
UNTARGETABLE_PENALTY = 50

BASE_COUNTER_STRATEGIES: Dict[str, Tuple[str, ...]] = {
    "warrior": ("prefer_status_effects", "target_status_weakness"),
    "rogue": ("prefer_direct_damage", "prioritize_control"),
    "mage": ("prefer_interruption", "prioritize_aggression"),
}


@dataclass(slots=True, frozen=True)
class PlayerContext:
    """What the enemy knows about the fight when it picks an action."""

    player_archetype: str
    player_hp_ratio: float
    player_low_health: bool
    player_healthy: bool
    player_heavy_on_cooldown: bool
    player_has_status_effects: bool
    player_has_high_damage_attacks: bool
    player_targetable: bool
    enemy_hp_ratio: float
    enemy_low_health: bool
    enemy_healthy: bool


@dataclass(slots=True, frozen=True)
class AIDecision:
    action: str
    scores: Dict[str, float]
    tags: Tuple[str, ...]


def build_context(player: "Combatant", enemy: "Combatant") -> PlayerContext:
    heavy_on_cooldown = player.cooldowns.get("heavy_attack", 0) > 0
    elite_key = player.behavior.elite_cooldown_key(player)
    elite_on_cooldown = elite_key is not None and player.cooldowns.get(elite_key, 0) > 0
    return PlayerContext(
        player_archetype=player.archetype,
        player_hp_ratio=player.hp_ratio,
        player_low_health=player.hp_ratio < PLAYER_LOW_HEALTH,
        player_healthy=player.hp_ratio > PLAYER_HEALTHY,
        player_heavy_on_cooldown=heavy_on_cooldown,
        player_has_status_effects=bool(player.status_effects),
        player_has_high_damage_attacks=not heavy_on_cooldown or (elite_key is not None and not elite_on_cooldown),
        player_targetable=player.is_targetable,
        enemy_hp_ratio=enemy.hp_ratio,
        enemy_low_health=enemy.hp_ratio < ENEMY_LOW_HEALTH,
        enemy_healthy=enemy.hp_ratio > ENEMY_HEALTHY,
    )


def resolve_strategy(enemy: "Enemy", context: PlayerContext) -> Tuple[str, ...]:
    """Counter-strategy tags for the opposing class, refined by the enemy archetype."""
    tags = BASE_COUNTER_STRATEGIES.get(context.player_archetype, ())
    if context.player_archetype == "warrior" and context.enemy_low_health:
        tags = tags + ("avoid_direct_confrontation",)
    return enemy.behavior.refine_strategy(context.player_archetype, tags)


def score_action(
    enemy: "Enemy",
    action: str,
    context: PlayerContext,
    tags: Tuple[str, ...],
    rng: RNG,
) -> float:
    info = enemy.behavior.action_info(action)
    score = 0.0

    if context.player_low_health and action == "attack":
        score += 30
    if context.enemy_low_health and action == "defend":
        score += 25
    if context.player_heavy_on_cooldown and action == "heavy_attack":
        score += 20
    if not context.player_targetable and info.targeted:
        score -= UNTARGETABLE_PENALTY

    if "prefer_status_effects" in tags and info.applies_status:
        score += 25
    if "prefer_direct_damage" in tags and action == "heavy_attack":
        score += 20
    if "prioritize_aggression" in tags and action == "attack":
        score += 15
    for tag in tags:
        score += enemy.behavior.tag_bonuses.get(tag, {}).get(action, 0)

    score += enemy.behavior.score_bonus(enemy, action, context)

    if enemy.profile == "aggressive":
        if info.damaging:
            score += 10
        elif action == "defend":
            score -= 15

    return score + rng.random() * JITTER


def choose_action(enemy: "Enemy", player: "Combatant", rng: RNG) -> AIDecision:
    """Score every available action once and pick the highest."""
    context = build_context(player, enemy)
    tags = resolve_strategy(enemy, context)
    scores: Dict[str, float] = {}
    for action in enemy.available_actions():
        scores[action] = score_action(enemy, action, context, tags, rng)
    if not scores:
        # Only reachable with no moves left; defend is never cooldown-gated.
        return AIDecision(action="defend", scores={}, tags=tags)
    action = max(scores, key=scores.__getitem__)
    logger.debug("%s chose %s from %s", enemy.name, action, scores)
    return AIDecision(action=action, scores=scores, tags=tags)
