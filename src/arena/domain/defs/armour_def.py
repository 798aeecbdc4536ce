"""Armour definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ArmourDef:
    """Armour definition adding a flat defense bonus."""

    id: str
    name: str
    defense: int
    value: int
