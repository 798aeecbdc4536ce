"""Domain definition exports."""

from .archetype_def import ArchetypeDef, ProfileDef
from .armour_def import ArmourDef
from .class_def import ClassDef
from .enemy_def import BossDef, EnemyDef
from .weapon_def import WeaponDef

__all__ = [
    "ArchetypeDef",
    "ArmourDef",
    "BossDef",
    "ClassDef",
    "EnemyDef",
    "ProfileDef",
    "WeaponDef",
]
