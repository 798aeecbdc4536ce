"""Weapon definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class WeaponDef:
    """Weapon definition adding a flat attack bonus."""

    id: str
    name: str
    attack: int
    value: int
