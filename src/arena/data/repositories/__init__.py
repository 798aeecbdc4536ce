"""Repository exports."""

from .archetypes_repo import ArchetypesRepository, ProfilesRepository
from .armour_repo import ArmourRepository
from .classes_repo import ClassesRepository
from .enemies_repo import EnemiesRepository
from .weapons_repo import WeaponsRepository

__all__ = [
    "ArchetypesRepository",
    "ArmourRepository",
    "ClassesRepository",
    "EnemiesRepository",
    "ProfilesRepository",
    "WeaponsRepository",
]
