"""Proportional enemy stat scaling."""
from __future__ import annotations

import math

from arena.domain.defs import ArchetypeDef, ProfileDef
from arena.domain.entities import StatBlock


def scale_from_player(player: StatBlock, archetype: ArchetypeDef, profile: ProfileDef) -> StatBlock:
    """Derive enemy stats from the player's, flooring every product.

    The difficulty profile multiplies the already-scaled attack and initiative.
    """
    attack = math.floor(player.attack * archetype.attack_multiplier)
    initiative = math.floor(player.initiative * archetype.initiative_multiplier)
    return StatBlock(
        max_hp=max(1, math.floor(player.max_hp * archetype.hp_multiplier)),
        attack=math.floor(attack * profile.attack_multiplier),
        defense=math.floor(player.defense * archetype.defense_multiplier),
        initiative=math.floor(initiative * profile.initiative_multiplier),
    )
