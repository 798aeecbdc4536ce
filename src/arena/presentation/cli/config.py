"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from arena.services.combat_service import DEFAULT_MAX_TURNS

logger = logging.getLogger(__name__)

DEFAULT_ENEMY_DELAY_SECONDS = 0.8
MAX_TURNS_ENV_VAR = "ARENA_MAX_TURNS"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Arena"
        return Path.home() / "Arena"
    return Path.home() / ".config" / "arena"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def default_config() -> Dict[str, Any]:
    return {"max_turns": DEFAULT_MAX_TURNS, "enemy_delay_seconds": DEFAULT_ENEMY_DELAY_SECONDS}


def _normalize_max_turns(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
        return value
    return DEFAULT_MAX_TURNS


def _normalize_delay(value: object) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0:
        return float(value)
    return DEFAULT_ENEMY_DELAY_SECONDS


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "max_turns": _normalize_max_turns(raw.get("max_turns")),
        "enemy_delay_seconds": _normalize_delay(raw.get("enemy_delay_seconds")),
    }


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults.

    ``ARENA_MAX_TURNS`` overrides the stored turn ceiling when it holds a
    positive integer.
    """
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        raw = {}
    config = _normalize(raw) if isinstance(raw, dict) else default_config()

    override = os.environ.get(MAX_TURNS_ENV_VAR)
    if override is not None:
        try:
            config["max_turns"] = _normalize_max_turns(int(override))
        except ValueError:
            logger.warning("Ignoring non-integer %s=%r", MAX_TURNS_ENV_VAR, override)
    return config


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = _normalize(config)
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
