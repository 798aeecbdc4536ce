"""Factory for creating enemies scaled to the player they will face."""
from __future__ import annotations

import logging
import math

from arena.core.rng import RNG
from arena.data.repositories import ArchetypesRepository, EnemiesRepository, ProfilesRepository
from arena.domain.behaviors import ENEMY_BEHAVIORS
from arena.domain.combat_models import Rewards
from arena.domain.combatant import Enemy
from arena.domain.defs import ArchetypeDef, EnemyDef
from arena.domain.enemy_scaling import scale_from_player
from arena.domain.entities import StatBlock
from arena.services.errors import FactoryError

logger = logging.getLogger(__name__)

MIN_STAGE = 1
MAX_STAGE = 3


def create_enemy(
    enemy_id: str,
    *,
    stage: int,
    player_stats: StatBlock,
    profile: str = "normal",
    enemies_repo: EnemiesRepository,
    archetypes_repo: ArchetypesRepository,
    profiles_repo: ProfilesRepository,
    rng: RNG,
) -> Enemy:
    """Instantiate an enemy proportionally scaled from the player's stats."""
    if not MIN_STAGE <= stage <= MAX_STAGE:
        raise FactoryError(f"Stage must be between {MIN_STAGE} and {MAX_STAGE}, got {stage}.")
    try:
        profile_def = profiles_repo.get(profile)
    except KeyError as exc:
        raise FactoryError(f"Difficulty profile '{profile}' not found.") from exc
    try:
        enemy_def = enemies_repo.get(enemy_id)
    except KeyError as exc:
        raise FactoryError(f"Enemy '{enemy_id}' not found.") from exc
    try:
        archetype = archetypes_repo.get(enemy_def.archetype)
    except KeyError as exc:
        raise FactoryError(
            f"Archetype '{enemy_def.archetype}' not found for enemy '{enemy_id}'."
        ) from exc
    try:
        behavior = ENEMY_BEHAVIORS[enemy_id]()
    except KeyError as exc:
        raise FactoryError(f"Enemy '{enemy_id}' has no combat behavior.") from exc

    if behavior.archetype != enemy_def.archetype:
        raise FactoryError(
            f"Enemy '{enemy_id}' is defined as '{enemy_def.archetype}' "
            f"but its behavior is '{behavior.archetype}'."
        )
    expected = {"heavy_attack", *behavior.abilities}
    if set(enemy_def.abilities) != expected:
        raise FactoryError(
            f"Enemy '{enemy_id}' ability cooldowns {sorted(enemy_def.abilities)} "
            f"do not match its behavior {sorted(expected)}."
        )

    stats = _apply_boss_bonus(scale_from_player(player_stats, archetype, profile_def), enemy_def)
    name = enemy_def.name
    title = None
    if enemy_def.boss is not None:
        name = rng.choice(enemy_def.boss.names)
        title = enemy_def.boss.title
    rewards = _build_rewards(enemy_def, archetype, stage, rng)

    logger.debug("Created %s (stage %s, %s): %s", enemy_id, stage, profile, stats)
    return Enemy(
        enemy_def=enemy_def,
        stage=stage,
        profile=profile,
        rewards=rewards,
        title=title,
        name=name,
        archetype=enemy_def.archetype,
        behavior=behavior,
        max_hp=stats.max_hp,
        base_attack=stats.attack,
        defense=stats.defense,
        initiative=stats.initiative,
        level=stage,
        heavy_cooldown=enemy_def.abilities["heavy_attack"],
    )


def _apply_boss_bonus(stats: StatBlock, enemy_def: EnemyDef) -> StatBlock:
    boss = enemy_def.boss
    if boss is None:
        return stats
    return StatBlock(
        max_hp=max(1, math.floor(stats.max_hp * (1 + boss.hp_bonus))),
        attack=math.floor(stats.attack * (1 + boss.attack_bonus)),
        defense=math.floor(stats.defense * (1 + boss.defense_bonus)),
        initiative=stats.initiative,
    )


def _build_rewards(enemy_def: EnemyDef, archetype: ArchetypeDef, stage: int, rng: RNG) -> Rewards:
    xp = archetype.xp_for_stage(stage)
    rewards = Rewards(gold=archetype.gold_for_stage(stage), xp=xp)
    boss = enemy_def.boss
    if boss is not None:
        rewards.bonus_xp = math.floor(xp * boss.bonus_xp_fraction)
        rewards.prestige_points = boss.prestige_points
        if boss.unique_loot:
            rewards.unique_loot = rng.choice(boss.unique_loot)
    return rewards
