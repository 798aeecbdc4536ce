"""Stat models shared between factories and combatants."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class StatBlock:
    """Player stats enemies are proportionally scaled from."""

    max_hp: int
    attack: int
    defense: int
    initiative: int
