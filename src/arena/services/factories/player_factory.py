"""Factory for creating player characters from class definitions."""
from __future__ import annotations

from arena.data.repositories import ArmourRepository, ClassesRepository, WeaponsRepository
from arena.domain.behaviors import PLAYER_BEHAVIORS
from arena.domain.combatant import PlayerCharacter, moves_for_level
from arena.domain.entities import Equipment
from arena.services.errors import FactoryError


def create_player(
    class_id: str,
    name: str,
    *,
    level: int = 1,
    weapon_id: str | None = None,
    armour_id: str | None = None,
    classes_repo: ClassesRepository,
    weapons_repo: WeaponsRepository,
    armour_repo: ArmourRepository,
) -> PlayerCharacter:
    """Instantiate a player at level 1 and level it up to the requested level."""
    if level < 1:
        raise FactoryError(f"Level must be at least 1, got {level}.")
    try:
        class_def = classes_repo.get(class_id)
    except KeyError as exc:
        raise FactoryError(f"Class '{class_id}' not found.") from exc

    try:
        behavior_cls = PLAYER_BEHAVIORS[class_id]
    except KeyError as exc:
        raise FactoryError(f"Class '{class_id}' has no combat behavior.") from exc

    weapon = None
    if weapon_id is not None:
        try:
            weapon = weapons_repo.get(weapon_id)
        except KeyError as exc:
            raise FactoryError(f"Weapon '{weapon_id}' not found.") from exc

    armour = None
    if armour_id is not None:
        try:
            armour = armour_repo.get(armour_id)
        except KeyError as exc:
            raise FactoryError(f"Armour '{armour_id}' not found.") from exc

    player = PlayerCharacter(
        class_def=class_def,
        name=name,
        archetype=class_id,
        behavior=behavior_cls(),
        max_hp=class_def.base_hp,
        base_attack=class_def.base_attack,
        defense=class_def.defense,
        initiative=class_def.initiative_at(1),
        level=1,
        moves_per_turn=moves_for_level(1),
        potions=class_def.potions,
        equipment=Equipment(weapon=weapon, armour=armour),
    )
    for _ in range(level - 1):
        player.level_up()
    player.remaining_moves = player.moves_per_turn
    return player
