"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Dict, Iterable, Sequence

from arena.domain.combat_models import AvailableAction, CombatantView, CombatLogEntry, CombatStatus

_CATEGORY_PREFIXES: Dict[str, str] = {
    "combat_start": "==",
    "turn_start": "--",
    "damage": "  *",
    "evaded": "  ~",
    "reflection": "  <",
    "status_applied": "  +",
    "status_tick": "  .",
    "special": "  !",
    "dialogue": '  "',
    "failed_action": "  x",
    "combat_end": "==",
    "rewards": "  $",
    "bonus_rewards": "  $",
    "unique_loot": "  $",
    "level_up": "  ^",
}


def debug_enabled() -> bool:
    """Return True only when ARENA_DEBUG is explicitly set to '1'."""
    return os.getenv("ARENA_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def format_log_entry(entry: CombatLogEntry) -> str:
    prefix = _CATEGORY_PREFIXES.get(entry.category, "  -")
    line = f"{prefix} {entry.message}"
    if debug_enabled():
        line = f"[t{entry.turn} {entry.category}] {line}"
    return line


def render_log(entries: Iterable[CombatLogEntry]) -> None:
    for entry in entries:
        print(format_log_entry(entry))


def format_combatant(view: CombatantView) -> str:
    line = f"{view.name} (Lv {view.level} {view.archetype}) HP {view.hp}/{view.max_hp}"
    line += f" | ATK {view.attack} DEF {view.defense} INI {view.initiative}"
    if view.status_effects:
        effects = ", ".join(f"{effect.kind}({effect.remaining})" for effect in view.status_effects)
        line += f" | {effects}"
    return line


def render_status(status: CombatStatus) -> None:
    render_heading(f"Turn {status.turn_count}")
    for view in (status.player, status.enemy):
        if view is None:
            continue
        print(format_combatant(view))
        cooling = {key: turns for key, turns in view.cooldowns.items() if turns}
        if cooling:
            print("  cooldowns: " + ", ".join(f"{key} {turns}" for key, turns in sorted(cooling.items())))
        if debug_enabled() and view.details:
            print(f"  details: {view.details}")


def render_actions(actions: Sequence[AvailableAction]) -> None:
    render_heading("Your move")
    for idx, action in enumerate(actions, start=1):
        print(f"{idx}. {action.label} - {action.description}")
