import json
from pathlib import Path

import pytest

from arena.core.rng import RNG
from arena.data.repositories import ArchetypesRepository, EnemiesRepository, ProfilesRepository
from arena.services.errors import FactoryError
from arena.services.factories import create_enemy

from tests.helpers.factories import make_enemy, make_player


def test_create_player_level_one_uses_class_baseline() -> None:
    rogue = make_player("rogue", name="Vex")

    assert rogue.name == "Vex"
    assert rogue.archetype == "rogue"
    assert rogue.level == 1
    assert rogue.hp == rogue.max_hp == 100
    assert rogue.base_attack == 6
    assert rogue.defense == 8
    assert rogue.initiative == 18
    assert rogue.moves_per_turn == 1
    assert rogue.potions == 3
    assert set(rogue.cooldowns) == {"heavy_attack", "heal", "elite", "backstab"}


def test_create_player_applies_level_growth() -> None:
    rogue = make_player("rogue", level=3)

    assert rogue.level == 3
    assert rogue.hp == rogue.max_hp == 140
    assert rogue.base_attack == 18
    assert rogue.defense == 18
    assert rogue.initiative == 24
    assert rogue.moves_per_turn == 2
    assert rogue.remaining_moves == 2
    assert rogue.experience == 0


def test_create_player_equipment_is_additive() -> None:
    mage = make_player("mage", weapon_id="oak_staff", armour_id="mage_robe")

    assert mage.attack_power == 9
    assert mage.total_defense == 7
    assert mage.stat_block().attack == 9


@pytest.mark.parametrize(
    "class_id, kwargs",
    [
        ("paladin", {}),
        ("warrior", {"weapon_id": "laser_sword"}),
        ("warrior", {"armour_id": "plate_of_ages"}),
        ("warrior", {"level": 0}),
    ],
)
def test_create_player_rejects_bad_input(class_id: str, kwargs: dict) -> None:
    with pytest.raises(FactoryError):
        make_player(class_id, **kwargs)


def test_create_enemy_builds_rewards_and_cooldowns() -> None:
    goblin = make_enemy("goblin", stage=2)

    assert goblin.enemy_id == "goblin"
    assert goblin.name == "Goblin"
    assert goblin.level == 2
    assert goblin.stage == 2
    assert goblin.heavy_cooldown == 2
    assert set(goblin.cooldowns) == {"heavy_attack", "poisoned_blade", "dirty_fighting"}
    assert goblin.rewards.gold == 20
    assert goblin.rewards.xp == 50
    assert goblin.rewards.bonus_xp == 0
    assert goblin.rewards.unique_loot is None


def test_create_boss_applies_stat_bonus_and_rolls_identity() -> None:
    gladiator = make_enemy("gladiator_warrior", stage=2, rng=RNG(3))
    boss = gladiator.enemy_def.boss
    assert boss is not None

    assert gladiator.max_hp == 132
    assert gladiator.base_attack == 6
    assert gladiator.defense == 17
    assert gladiator.initiative == 12
    assert gladiator.name in boss.names
    assert gladiator.title == "The Iron Wall"
    assert gladiator.display_name == f"{gladiator.name}, The Iron Wall"
    assert gladiator.rewards.gold == 100
    assert gladiator.rewards.xp == 300
    assert gladiator.rewards.bonus_xp == 150
    assert gladiator.rewards.prestige_points == 1
    assert gladiator.rewards.unique_loot in boss.unique_loot


def test_gladiator_stage_three_has_no_gold() -> None:
    gladiator = make_enemy("gladiator_warrior", stage=3)

    assert gladiator.rewards.gold == 0
    assert gladiator.rewards.xp == 450


def test_boss_identity_is_deterministic_per_seed() -> None:
    first = make_enemy("gladiator_warrior", rng=RNG(99))
    second = make_enemy("gladiator_warrior", rng=RNG(99))

    assert first.name == second.name
    assert first.rewards.unique_loot == second.rewards.unique_loot


@pytest.mark.parametrize(
    "enemy_id, kwargs",
    [
        ("goblin", {"stage": 0}),
        ("goblin", {"stage": 4}),
        ("goblin", {"profile": "nightmare"}),
        ("dragon", {}),
    ],
)
def test_create_enemy_rejects_bad_input(enemy_id: str, kwargs: dict) -> None:
    with pytest.raises(FactoryError):
        make_enemy(enemy_id, **kwargs)


def test_create_enemy_rejects_ability_mismatch(tmp_path: Path) -> None:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    _write_json(
        definitions_dir / "enemies.json",
        {
            "goblin": {
                "name": "Goblin",
                "archetype": "small_humanoid",
                "description": "A goblin missing a trick.",
                "abilities": {"heavy_attack": 2, "poisoned_blade": 3},
            }
        },
    )

    with pytest.raises(FactoryError, match="ability cooldowns"):
        create_enemy(
            "goblin",
            stage=1,
            player_stats=make_player().stat_block(),
            enemies_repo=EnemiesRepository(base_path=definitions_dir),
            archetypes_repo=ArchetypesRepository(),
            profiles_repo=ProfilesRepository(),
            rng=RNG(1),
        )


def test_create_enemy_rejects_archetype_mismatch(tmp_path: Path) -> None:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    _write_json(
        definitions_dir / "enemies.json",
        {
            "goblin": {
                "name": "Goblin",
                "archetype": "large_beast",
                "description": "A very large goblin.",
                "abilities": {"heavy_attack": 2, "poisoned_blade": 3, "dirty_fighting": 4},
            }
        },
    )

    with pytest.raises(FactoryError, match="behavior"):
        create_enemy(
            "goblin",
            stage=1,
            player_stats=make_player().stat_block(),
            enemies_repo=EnemiesRepository(base_path=definitions_dir),
            archetypes_repo=ArchetypesRepository(),
            profiles_repo=ProfilesRepository(),
            rng=RNG(1),
        )


def _write_json(path: Path, data: dict[str, object]) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")
