import json
from pathlib import Path

import pytest

from arena.data.errors import DataLoadError, DataReferenceError, DataValidationError
from arena.data.repositories import (
    ArchetypesRepository,
    ArmourRepository,
    ClassesRepository,
    EnemiesRepository,
    ProfilesRepository,
    WeaponsRepository,
)


def test_shipped_definitions_load() -> None:
    classes = ClassesRepository()
    enemies = EnemiesRepository()
    archetypes = ArchetypesRepository()
    profiles = ProfilesRepository()

    assert classes.ids() == ["mage", "rogue", "warrior"]
    assert enemies.ids() == ["giant_lizard", "gladiator_warrior", "goblin", "knoll"]
    assert profiles.ids() == ["aggressive", "normal"]
    assert archetypes.get("gladiator").gold_for_stage(3) == 0
    assert archetypes.get("small_humanoid").xp_for_stage(2) == 50
    assert enemies.get("gladiator_warrior").boss is not None
    assert enemies.get("goblin").boss is None
    assert WeaponsRepository().has("short_sword")
    assert ArmourRepository().has("chain_mail")


def test_class_growth_is_loaded() -> None:
    warrior = ClassesRepository().get("warrior")

    assert warrior.base_hp == 120
    assert warrior.hp_per_level == 20
    assert warrior.initiative_at(1) == 12
    assert warrior.initiative_at(3) == 16


def test_missing_definition_file_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    repo = WeaponsRepository(base_path=definitions_dir)

    with pytest.raises(DataLoadError):
        repo.get("short_sword")


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "weapons.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(DataLoadError):
        WeaponsRepository(base_path=definitions_dir).ids()


def test_top_level_must_be_an_object(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "armour.json").write_text("[]", encoding="utf-8")

    with pytest.raises(DataValidationError):
        ArmourRepository(base_path=definitions_dir).ids()


def test_weapon_unknown_field_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "weapons.json",
        {"stick": {"name": "Stick", "attack": 1, "value": 1, "weight": 3}},
    )

    with pytest.raises(DataValidationError, match="unknown fields"):
        WeaponsRepository(base_path=definitions_dir).get("stick")


def test_boolean_is_not_accepted_as_integer(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "armour.json",
        {"vest": {"name": "Vest", "defense": True, "value": 1}},
    )

    with pytest.raises(DataValidationError, match="integer"):
        ArmourRepository(base_path=definitions_dir).get("vest")


def test_class_must_name_a_player_archetype(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    payload = _class_payload()
    _write_json(definitions_dir / "classes.json", {"paladin": payload})

    with pytest.raises(DataReferenceError):
        ClassesRepository(base_path=definitions_dir).ids()


def test_class_missing_growth_field_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    payload = _class_payload()
    del payload["growth"]["defense"]
    _write_json(definitions_dir / "classes.json", {"warrior": payload})

    with pytest.raises(DataValidationError, match="missing fields"):
        ClassesRepository(base_path=definitions_dir).get("warrior")


def test_enemy_unknown_archetype_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    payload = _enemy_payload()
    payload["archetype"] = "dragon"
    _write_json(definitions_dir / "enemies.json", {"goblin": payload})

    with pytest.raises(DataReferenceError):
        EnemiesRepository(base_path=definitions_dir).get("goblin")


def test_enemy_reaction_to_unknown_action_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    payload = _enemy_payload()
    payload["reactions"] = {"dance": ["The goblin is confused."]}
    _write_json(definitions_dir / "enemies.json", {"goblin": payload})

    with pytest.raises(DataValidationError, match="unknown action"):
        EnemiesRepository(base_path=definitions_dir).get("goblin")


def test_enemy_optional_text_defaults_to_empty(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "enemies.json", {"goblin": _enemy_payload()})

    goblin = EnemiesRepository(base_path=definitions_dir).get("goblin")

    assert goblin.flavor == ()
    assert goblin.reactions == {}
    assert goblin.abilities["poisoned_blade"] == 3


def test_boss_with_empty_names_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    payload = _enemy_payload()
    payload["archetype"] = "gladiator"
    payload["boss"] = {
        "title": "The Wall",
        "names": [],
        "dialogue": {"intro": [], "mid_battle": [], "low_health": [], "defeat": []},
        "unique_loot": [],
        "stat_bonus": {"attack": 0.1, "defense": 0.1, "hp": 0.1},
        "bonus_xp_fraction": 0.5,
        "prestige_points": 1,
    }
    _write_json(definitions_dir / "enemies.json", {"champion": payload})

    with pytest.raises(DataValidationError, match="names"):
        EnemiesRepository(base_path=definitions_dir).get("champion")


def test_archetype_gold_table_needs_every_stage(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "enemy_archetypes.json",
        {
            "small_humanoid": {
                "multipliers": {"hp": 0.25, "attack": 0.25, "defense": 0.25, "initiative": 0.25},
                "gold": {"1": 10, "2": 20},
                "xp_base": 25,
            }
        },
    )

    with pytest.raises(DataValidationError, match="missing fields"):
        ArchetypesRepository(base_path=definitions_dir).get("small_humanoid")


def test_archetype_null_gold_is_zero(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "enemy_archetypes.json",
        {
            "gladiator": {
                "multipliers": {"hp": 1, "attack": 1, "defense": 1, "initiative": 1},
                "gold": {"1": 50, "2": None, "3": None},
                "xp_base": 150,
            }
        },
    )

    gladiator = ArchetypesRepository(base_path=definitions_dir).get("gladiator")

    assert gladiator.gold_for_stage(1) == 50
    assert gladiator.gold_for_stage(2) == 0
    assert gladiator.hp_multiplier == 1.0


def test_profile_negative_multiplier_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "profiles.json", {"cursed": {"attack": -1, "initiative": 1}})

    with pytest.raises(DataValidationError, match="negative"):
        ProfilesRepository(base_path=definitions_dir).get("cursed")


def test_unknown_id_raises_key_error() -> None:
    with pytest.raises(KeyError):
        EnemiesRepository().get("dragon")


def _class_payload() -> dict:
    return {
        "name": "Warrior",
        "base_hp": 120,
        "base_attack": 6,
        "defense": 15,
        "initiative_base": 10,
        "initiative_per_level": 2,
        "potions": 3,
        "growth": {"hp": 20, "attack": 6, "defense": 5},
    }


def _enemy_payload() -> dict:
    return {
        "name": "Goblin",
        "archetype": "small_humanoid",
        "description": "A goblin.",
        "abilities": {"heavy_attack": 2, "poisoned_blade": 3, "dirty_fighting": 4},
    }


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir
