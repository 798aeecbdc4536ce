"""Console-driven UI loop for the arena."""
from __future__ import annotations

import secrets
import time
from typing import Any, Dict, List, Sequence

from arena.core.rng import RNG
from arena.core.types import PLAYER_ARCHETYPES
from arena.data.repositories import (
    ArchetypesRepository,
    ArmourRepository,
    ClassesRepository,
    EnemiesRepository,
    ProfilesRepository,
    WeaponsRepository,
)
from arena.domain.combat_models import CombatLogEntry
from arena.domain.combatant import PlayerCharacter
from arena.services.combat_service import CombatService
from arena.services.controllers import CombatController
from arena.services.errors import FactoryError
from arena.services.factories import create_enemy, create_player

from .config import load_config, save_config
from .render import render_actions, render_heading, render_log, render_menu, render_status

_MAX_RANDOM_SEED = 2**31 - 1
_PROFILES = ("normal", "aggressive")


class _Repositories:
    def __init__(self) -> None:
        self.classes = ClassesRepository()
        self.weapons = WeaponsRepository()
        self.armour = ArmourRepository()
        self.enemies = EnemiesRepository()
        self.archetypes = ArchetypesRepository()
        self.profiles = ProfilesRepository()


def main() -> None:
    """Start the interactive CLI session."""
    repos = _Repositories()
    config = load_config()
    print("=== Arena ===")
    while True:
        render_menu("Main Menu", ["Fight", "Options", "Quit"])
        choice = _prompt_index(3)
        if choice == 0:
            _run_encounter(repos, config)
        elif choice == 1:
            config = _options_menu(config)
        else:
            break
    print("Goodbye!")


def _options_menu(config: Dict[str, Any]) -> Dict[str, Any]:
    render_heading("Options")
    print(f"Turn ceiling: {config['max_turns']}")
    print(f"Enemy thinking delay: {config['enemy_delay_seconds']}s")
    max_turns = _prompt_int("New turn ceiling (blank to keep): ", default=config["max_turns"], minimum=1)
    delay_raw = input("New enemy delay in seconds (blank to keep): ").strip()
    delay = config["enemy_delay_seconds"]
    if delay_raw:
        try:
            delay = max(0.0, float(delay_raw))
        except ValueError:
            print("Invalid delay, keeping the current value.")
    updated = {"max_turns": max_turns, "enemy_delay_seconds": delay}
    save_config(updated)
    return updated


def _run_encounter(repos: _Repositories, config: Dict[str, Any]) -> None:
    seed = _prompt_seed()
    rng = RNG(seed)
    try:
        player = _build_player(repos)
        enemy_id = _prompt_option("Choose an enemy", repos.enemies.ids())
        stage = _prompt_int("Stage (1-3, default 1): ", default=1, minimum=1)
        profile = _prompt_option("Difficulty profile", list(_PROFILES))
        enemy = create_enemy(
            enemy_id,
            stage=stage,
            player_stats=player.stat_block(),
            profile=profile,
            enemies_repo=repos.enemies,
            archetypes_repo=repos.archetypes,
            profiles_repo=repos.profiles,
            rng=rng,
        )
    except FactoryError as exc:
        print(f"Cannot set up the encounter: {exc}")
        return

    print(f"Combat seed: {seed}")
    controller = CombatController(CombatService(rng, max_turns=config["max_turns"]))
    status = controller.start_combat(player, enemy)
    shown = _render_new_entries(status.log, 0, config["enemy_delay_seconds"])
    while status.phase != "ended":
        render_status(status)
        actions = controller.get_player_available_actions()
        render_actions(actions)
        selected = actions[_prompt_index(len(actions))]
        controller.execute_player_action(selected.kind)
        status = controller.get_combat_status()
        shown = _render_new_entries(status.log, shown, config["enemy_delay_seconds"])
    render_status(status)


def _build_player(repos: _Repositories) -> PlayerCharacter:
    name = input("Enter hero name (default Hero): ").strip() or "Hero"
    class_id = _prompt_option("Choose a class", list(PLAYER_ARCHETYPES))
    level = _prompt_int("Level (default 1): ", default=1, minimum=1)
    weapon_id = _prompt_optional("Weapon", repos.weapons.ids())
    armour_id = _prompt_optional("Armour", repos.armour.ids())
    return create_player(
        class_id,
        name,
        level=level,
        weapon_id=weapon_id,
        armour_id=armour_id,
        classes_repo=repos.classes,
        weapons_repo=repos.weapons,
        armour_repo=repos.armour,
    )


def _render_new_entries(log: Sequence[CombatLogEntry], shown: int, delay: float) -> int:
    """Print entries past ``shown``; pauses before each enemy action."""
    for entry in log[shown:]:
        if entry.category == "enemy_action" and delay > 0:
            time.sleep(delay)
        render_log([entry])
    return len(log)


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _prompt_index(count: int) -> int:
    while True:
        raw = input("Select an option: ").strip()
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < count:
            return index
        print(f"Please enter a value between 1 and {count}.")


def _prompt_int(prompt: str, *, default: int, minimum: int) -> int:
    while True:
        raw = input(prompt).strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            print("Please enter a number.")
            continue
        if value >= minimum:
            return value
        print(f"Please enter a value of at least {minimum}.")


def _prompt_option(title: str, options: List[str]) -> str:
    render_menu(title, options)
    return options[_prompt_index(len(options))]


def _prompt_optional(title: str, options: List[str]) -> str | None:
    choice = _prompt_option(title, ["none", *options])
    return None if choice == "none" else choice
