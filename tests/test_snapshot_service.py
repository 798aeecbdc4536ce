from __future__ import annotations

import copy
import json
from typing import Any, Dict

import pytest

from arena.core.rng import RNG
from arena.domain.combat_models import CombatState
from arena.services.combat_service import CombatService
from arena.services.errors import SnapshotError
from arena.services.snapshot_service import SnapshotService

from tests.helpers.factories import make_enemy, make_player, repositories

_PREFERENCE = ("heavy_attack", "attack", "defend", "heal")


def _frozen_clock() -> float:
    return 0.0


def _play(service: CombatService, state: CombatState, steps: int) -> None:
    for _ in range(steps):
        if state.is_over:
            return
        kinds = [action.kind for action in service.get_available_actions(state)]
        kind = next(candidate for candidate in _PREFERENCE if candidate in kinds)
        service.execute_player_action(state, kind)


def _start(seed: int = 42) -> tuple[CombatService, CombatState]:
    player = make_player("warrior", level=3)
    knoll = make_enemy("knoll", player=player)
    service = CombatService(RNG(seed), clock=_frozen_clock)
    return service, service.start_combat(player, knoll)


def _make_payload() -> Dict[str, Any]:
    service, state = _start()
    _play(service, state, 2)
    snapshot = SnapshotService(**repositories())
    return json.loads(json.dumps(snapshot.serialize(state, service.rng, service.max_turns)))


def test_snapshot_round_trip_resumes_identically() -> None:
    service, state = _start()
    _play(service, state, 3)
    snapshot = SnapshotService(**repositories())

    payload = json.loads(json.dumps(snapshot.serialize(state, service.rng, service.max_turns)))
    restored = snapshot.deserialize(payload)
    resumed = CombatService(restored.rng, max_turns=restored.max_turns, clock=_frozen_clock)

    assert resumed.get_status(restored.state) == service.get_status(state)

    _play(service, state, 60)
    _play(resumed, restored.state, 60)

    assert restored.state.log == state.log
    assert restored.state.outcome == state.outcome
    assert restored.state.player.hp == state.player.hp
    assert restored.state.enemy.hp == state.enemy.hp


def test_snapshot_payload_shape() -> None:
    payload = _make_payload()

    assert payload["snapshot_version"] == SnapshotService.SNAPSHOT_VERSION
    assert payload["max_turns"] == 20
    assert payload["player"]["class_id"] == "warrior"
    assert payload["enemy"]["enemy_id"] == "knoll"
    assert payload["combat"]["phase"] in ("player_turn", "ended")
    assert set(payload["player"]["flags"]) == {"is_defending", "recovering", "locked_out", "critical_next"}


def test_restores_boss_identity_and_rewards() -> None:
    player = make_player("warrior")
    gladiator = make_enemy("gladiator_warrior", player=player, rng=RNG(6))
    service = CombatService(RNG(6), clock=_frozen_clock)
    state = service.start_combat(player, gladiator)
    snapshot = SnapshotService(**repositories())

    restored = snapshot.deserialize(snapshot.serialize(state, service.rng, service.max_turns))

    enemy = restored.state.enemy
    assert enemy.name == gladiator.name
    assert enemy.title == "The Iron Wall"
    assert enemy.rewards == gladiator.rewards
    assert enemy.behavior.export_state() == gladiator.behavior.export_state()


def test_rejects_unknown_version() -> None:
    payload = _make_payload()
    payload["snapshot_version"] = 99

    with pytest.raises(SnapshotError, match="version"):
        SnapshotService(**repositories()).deserialize(payload)


def test_rejects_non_object_payload() -> None:
    with pytest.raises(SnapshotError):
        SnapshotService(**repositories()).deserialize([])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "section, key, value, match",
    [
        ("combat", "phase", "paused", "phase"),
        ("combat", "active_index", 2, "active_index"),
        ("combat", "turn_order", ["player", "player"], "turn order"),
        ("player", "gold", True, "gold"),
        ("player", "class_id", "paladin", "paladin"),
        ("player", "hp", 10**6, "max_hp"),
        ("player", "behavior", {}, "behavior"),
        ("enemy", "enemy_id", "dragon", "dragon"),
        ("enemy", "remaining_moves", 5, "remaining_moves"),
    ],
)
def test_rejects_invalid_fields(section: str, key: str, value: Any, match: str) -> None:
    payload = _make_payload()
    payload[section][key] = value

    with pytest.raises(SnapshotError, match=match):
        SnapshotService(**repositories()).deserialize(payload)


def test_rejects_cooldown_key_mismatch() -> None:
    payload = _make_payload()
    del payload["player"]["cooldowns"]["heal"]

    with pytest.raises(SnapshotError, match="cooldowns"):
        SnapshotService(**repositories()).deserialize(payload)


def test_rejects_unknown_status_kind() -> None:
    payload = _make_payload()
    payload["enemy"]["status_effects"].append(
        {
            "kind": "petrified",
            "remaining": 1,
            "source": "large_beast",
            "stacks": 1,
            "max_stacks": 3,
            "magnitude": 0,
            "accuracy_penalty": 0.0,
            "healing_reduction": 0.0,
        }
    )

    with pytest.raises(SnapshotError, match="petrified"):
        SnapshotService(**repositories()).deserialize(payload)


def test_rejects_unknown_log_category() -> None:
    payload = _make_payload()
    entry = copy.deepcopy(payload["combat"]["log"][0])
    entry["category"] = "gossip"
    payload["combat"]["log"].append(entry)

    with pytest.raises(SnapshotError, match="gossip"):
        SnapshotService(**repositories()).deserialize(payload)


def test_rejects_corrupt_rng_state() -> None:
    payload = _make_payload()
    payload["rng"]["state"] = "not-a-list"

    with pytest.raises(SnapshotError, match="RNG"):
        SnapshotService(**repositories()).deserialize(payload)
