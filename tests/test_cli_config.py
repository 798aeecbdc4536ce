import json
from pathlib import Path

from arena.presentation.cli import config
from arena.presentation.cli.config import default_config, load_config, save_config


def test_missing_config_returns_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(config.MAX_TURNS_ENV_VAR, raising=False)

    assert load_config(tmp_path / "missing.json") == default_config()


def test_invalid_json_returns_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(config.MAX_TURNS_ENV_VAR, raising=False)
    path = tmp_path / "config.json"
    path.write_text("{broken", encoding="utf-8")

    assert load_config(path) == {"max_turns": 20, "enemy_delay_seconds": 0.8}


def test_save_then_load_round_trip(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(config.MAX_TURNS_ENV_VAR, raising=False)
    path = tmp_path / "nested" / "config.json"

    save_config({"max_turns": 30, "enemy_delay_seconds": 0}, path)

    assert json.loads(path.read_text(encoding="utf-8")) == {"enemy_delay_seconds": 0.0, "max_turns": 30}
    assert load_config(path) == {"max_turns": 30, "enemy_delay_seconds": 0.0}


def test_invalid_values_fall_back_per_key(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(config.MAX_TURNS_ENV_VAR, raising=False)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_turns": 0, "enemy_delay_seconds": 1.5}), encoding="utf-8")

    assert load_config(path) == {"max_turns": 20, "enemy_delay_seconds": 1.5}


def test_env_overrides_turn_ceiling(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(config.MAX_TURNS_ENV_VAR, "35")

    assert load_config(tmp_path / "missing.json")["max_turns"] == 35


def test_non_integer_env_override_is_ignored(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(config.MAX_TURNS_ENV_VAR, "lots")

    assert load_config(tmp_path / "missing.json")["max_turns"] == 20


def test_default_config_path_lives_in_user_dir(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_user_data_dir", lambda: tmp_path)

    assert config.get_default_config_path() == tmp_path / "config.json"
