"""Runtime entity exports."""

from .equipment import Equipment
from .stats import StatBlock

__all__ = [
    "Equipment",
    "StatBlock",
]
