"""Serialization of a running combat into a versioned, JSON-compatible payload."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, get_args

from arena.core.rng import RNG, RNGStatePayload
from arena.core.types import CombatOutcome, CombatPhase, LogCategory, Role
from arena.data.repositories import (
    ArmourRepository,
    ClassesRepository,
    EnemiesRepository,
    WeaponsRepository,
)
from arena.domain.behaviors import ENEMY_BEHAVIORS, PLAYER_BEHAVIORS
from arena.domain.combat_models import CombatLogEntry, CombatState, Rewards
from arena.domain.combatant import Combatant, Enemy, PlayerCharacter
from arena.domain.entities import Equipment
from arena.domain.errors import CombatStateError
from arena.domain.status_effects import STATUS_KINDS, StatusEffect
from arena.services.errors import SnapshotError

SnapshotPayload = Dict[str, Any]

_VALID_PHASES: tuple[CombatPhase, ...] = get_args(CombatPhase)
_VALID_OUTCOMES: tuple[CombatOutcome, ...] = get_args(CombatOutcome)
_VALID_CATEGORIES: tuple[LogCategory, ...] = get_args(LogCategory)
_VALID_ORDERS: tuple[tuple[Role, Role], ...] = (("player", "enemy"), ("enemy", "player"))


@dataclass(slots=True)
class RestoredCombat:
    """A combat rebuilt from a snapshot, ready to hand back to a CombatService."""

    state: CombatState
    rng: RNG
    max_turns: int


class SnapshotService:
    """Converts a mid-combat state to/from a validated, versioned payload."""

    SNAPSHOT_VERSION = 1

    def __init__(
        self,
        *,
        classes_repo: ClassesRepository,
        weapons_repo: WeaponsRepository,
        armour_repo: ArmourRepository,
        enemies_repo: EnemiesRepository,
    ) -> None:
        self._classes_repo = classes_repo
        self._weapons_repo = weapons_repo
        self._armour_repo = armour_repo
        self._enemies_repo = enemies_repo

    def serialize(self, state: CombatState, rng: RNG, max_turns: int) -> SnapshotPayload:
        """Return a JSON-serializable payload for the combat and its RNG stream."""
        return {
            "snapshot_version": self.SNAPSHOT_VERSION,
            "max_turns": max_turns,
            "rng": rng.export_state(),
            "player": self._serialize_player(state.player),
            "enemy": self._serialize_enemy(state.enemy),
            "combat": {
                "phase": state.phase,
                "turn_count": state.turn_count,
                "turn_order": list(state.turn_order),
                "active_index": state.active_index,
                "outcome": state.outcome,
                "rewards": self._serialize_rewards(state.rewards) if state.rewards else None,
                "log": [
                    {
                        "turn": entry.turn,
                        "category": entry.category,
                        "message": entry.message,
                        "timestamp": entry.timestamp,
                    }
                    for entry in state.log
                ],
            },
        }

    def deserialize(self, payload: Mapping[str, Any]) -> RestoredCombat:
        """Rebuild both combatants, the combat state and the RNG from a payload."""
        if not isinstance(payload, Mapping):
            raise SnapshotError("Snapshot must be a JSON object.")
        if payload.get("snapshot_version") != self.SNAPSHOT_VERSION:
            raise SnapshotError(f"Unsupported snapshot version: {payload.get('snapshot_version')!r}")
        max_turns = self._require_int(payload.get("max_turns"), "max_turns", minimum=1)
        rng_payload = self._require_dict(payload.get("rng"), "rng")
        combat = self._require_dict(payload.get("combat"), "combat")

        rng = RNG(0)
        try:
            rng.restore_state(self._coerce_rng_payload(rng_payload))
        except (TypeError, ValueError) as exc:
            raise SnapshotError(f"Invalid RNG state: {exc}") from exc

        player = self._deserialize_player(self._require_dict(payload.get("player"), "player"))
        enemy = self._deserialize_enemy(self._require_dict(payload.get("enemy"), "enemy"))

        phase = combat.get("phase")
        if phase not in _VALID_PHASES:
            raise SnapshotError(f"Invalid combat phase: {phase!r}")
        outcome = combat.get("outcome")
        if outcome is not None and outcome not in _VALID_OUTCOMES:
            raise SnapshotError(f"Invalid combat outcome: {outcome!r}")
        turn_order = tuple(combat.get("turn_order") or ())
        if phase != "inactive" and turn_order not in _VALID_ORDERS:
            raise SnapshotError(f"Invalid turn order: {list(turn_order)}")
        active_index = self._require_int(combat.get("active_index"), "combat.active_index", minimum=0)
        if active_index > 1:
            raise SnapshotError("combat.active_index must be 0 or 1.")
        rewards_raw = combat.get("rewards")

        state = CombatState(
            player=player,
            enemy=enemy,
            phase=phase,
            turn_count=self._require_int(combat.get("turn_count"), "combat.turn_count", minimum=0),
            turn_order=turn_order,
            active_index=active_index,
            outcome=outcome,
            rewards=self._deserialize_rewards(rewards_raw, "combat.rewards") if rewards_raw is not None else None,
            log=self._deserialize_log(combat.get("log")),
        )
        return RestoredCombat(state=state, rng=rng, max_turns=max_turns)

    # -----------------------
    # Combatants
    # -----------------------
    def _serialize_common(self, combatant: Combatant) -> Dict[str, Any]:
        return {
            "name": combatant.name,
            "level": combatant.level,
            "max_hp": combatant.max_hp,
            "hp": combatant.hp,
            "base_attack": combatant.base_attack,
            "defense": combatant.defense,
            "base_initiative": combatant.base_initiative,
            "initiative": combatant.initiative,
            "moves_per_turn": combatant.moves_per_turn,
            "remaining_moves": combatant.remaining_moves,
            "potions": combatant.potions,
            "heavy_cooldown": combatant.heavy_cooldown,
            "cooldowns": dict(combatant.cooldowns),
            "status_effects": [
                {
                    "kind": effect.kind,
                    "remaining": effect.remaining,
                    "source": effect.source,
                    "stacks": effect.stacks,
                    "max_stacks": effect.max_stacks,
                    "magnitude": effect.magnitude,
                    "accuracy_penalty": effect.accuracy_penalty,
                    "healing_reduction": effect.healing_reduction,
                }
                for effect in combatant.status_effects
            ],
            "flags": {
                "is_defending": combatant.is_defending,
                "recovering": combatant.recovering,
                "locked_out": combatant.locked_out,
                "critical_next": combatant.critical_next,
            },
            "turn_count": combatant.turn_count,
            "light_attack_count": combatant.light_attack_count,
            "behavior": combatant.behavior.export_state(),
        }

    def _serialize_player(self, player: PlayerCharacter) -> Dict[str, Any]:
        payload = self._serialize_common(player)
        payload.update(
            {
                "class_id": player.archetype,
                "experience": player.experience,
                "gold": player.gold,
                "prestige_points": player.prestige_points,
                "loot": list(player.loot),
                "weapon_id": player.equipment.weapon.id if player.equipment.weapon else None,
                "armour_id": player.equipment.armour.id if player.equipment.armour else None,
            }
        )
        return payload

    def _serialize_enemy(self, enemy: Enemy) -> Dict[str, Any]:
        payload = self._serialize_common(enemy)
        payload.update(
            {
                "enemy_id": enemy.enemy_id,
                "stage": enemy.stage,
                "profile": enemy.profile,
                "title": enemy.title,
                "rewards": self._serialize_rewards(enemy.rewards),
            }
        )
        return payload

    def _deserialize_player(self, data: Mapping[str, Any]) -> PlayerCharacter:
        class_id = self._require_str(data.get("class_id"), "player.class_id")
        try:
            class_def = self._classes_repo.get(class_id)
            behavior = PLAYER_BEHAVIORS[class_id]()
        except KeyError as exc:
            raise SnapshotError(f"Unknown player class '{class_id}'.") from exc
        weapon_id = self._coerce_optional_str(data.get("weapon_id"), "player.weapon_id")
        armour_id = self._coerce_optional_str(data.get("armour_id"), "player.armour_id")
        try:
            weapon = self._weapons_repo.get(weapon_id) if weapon_id else None
            armour = self._armour_repo.get(armour_id) if armour_id else None
        except KeyError as exc:
            raise SnapshotError(f"Unknown equipment {exc}.") from exc

        player = PlayerCharacter(
            class_def=class_def,
            experience=self._require_int(data.get("experience"), "player.experience", minimum=0),
            gold=self._require_int(data.get("gold"), "player.gold", minimum=0),
            prestige_points=self._require_int(data.get("prestige_points"), "player.prestige_points", minimum=0),
            loot=self._coerce_str_list(data.get("loot"), "player.loot"),
            archetype=class_id,
            behavior=behavior,
            equipment=Equipment(weapon=weapon, armour=armour),
            **self._core_kwargs(data, "player"),
        )
        self._restore_runtime(player, data, "player")
        return player

    def _deserialize_enemy(self, data: Mapping[str, Any]) -> Enemy:
        enemy_id = self._require_str(data.get("enemy_id"), "enemy.enemy_id")
        try:
            enemy_def = self._enemies_repo.get(enemy_id)
            behavior = ENEMY_BEHAVIORS[enemy_id]()
        except KeyError as exc:
            raise SnapshotError(f"Unknown enemy '{enemy_id}'.") from exc
        enemy = Enemy(
            enemy_def=enemy_def,
            stage=self._require_int(data.get("stage"), "enemy.stage", minimum=1),
            profile=self._require_str(data.get("profile"), "enemy.profile"),
            rewards=self._deserialize_rewards(data.get("rewards"), "enemy.rewards"),
            title=self._coerce_optional_str(data.get("title"), "enemy.title"),
            archetype=enemy_def.archetype,
            behavior=behavior,
            **self._core_kwargs(data, "enemy"),
        )
        self._restore_runtime(enemy, data, "enemy")
        return enemy

    def _core_kwargs(self, data: Mapping[str, Any], context: str) -> Dict[str, Any]:
        kwargs = {
            "name": self._require_str(data.get("name"), f"{context}.name"),
            "level": self._require_int(data.get("level"), f"{context}.level", minimum=1),
            "max_hp": self._require_int(data.get("max_hp"), f"{context}.max_hp", minimum=1),
            "hp": self._require_int(data.get("hp"), f"{context}.hp", minimum=0),
            "base_attack": self._require_int(data.get("base_attack"), f"{context}.base_attack", minimum=0),
            "defense": self._require_int(data.get("defense"), f"{context}.defense", minimum=0),
            "initiative": self._require_int(data.get("base_initiative"), f"{context}.base_initiative"),
            "moves_per_turn": self._require_int(data.get("moves_per_turn"), f"{context}.moves_per_turn", minimum=1),
            "potions": self._require_int(data.get("potions"), f"{context}.potions", minimum=0),
            "heavy_cooldown": self._require_int(data.get("heavy_cooldown"), f"{context}.heavy_cooldown", minimum=0),
        }
        if kwargs["hp"] > kwargs["max_hp"]:
            raise SnapshotError(f"{context}.hp exceeds max_hp.")
        return kwargs

    def _restore_runtime(self, combatant: Combatant, data: Mapping[str, Any], context: str) -> None:
        remaining = self._require_int(data.get("remaining_moves"), f"{context}.remaining_moves", minimum=0)
        if remaining > combatant.moves_per_turn:
            raise SnapshotError(f"{context}.remaining_moves exceeds moves_per_turn.")
        combatant.remaining_moves = remaining
        combatant.initiative = self._require_int(data.get("initiative"), f"{context}.initiative")
        combatant.turn_count = self._require_int(data.get("turn_count"), f"{context}.turn_count", minimum=0)
        combatant.light_attack_count = self._require_int(
            data.get("light_attack_count"), f"{context}.light_attack_count", minimum=0
        )

        cooldowns = self._coerce_int_dict(data.get("cooldowns"), f"{context}.cooldowns")
        if set(cooldowns) != set(combatant.cooldowns):
            raise SnapshotError(
                f"{context}.cooldowns keys {sorted(cooldowns)} do not match {sorted(combatant.cooldowns)}."
            )
        if any(value < 0 for value in cooldowns.values()):
            raise SnapshotError(f"{context}.cooldowns values must be non-negative.")
        try:
            combatant.restore_cooldowns(cooldowns)
        except CombatStateError as exc:
            raise SnapshotError(str(exc)) from exc

        flags = self._coerce_bool_dict(data.get("flags"), f"{context}.flags")
        expected_flags = {"is_defending", "recovering", "locked_out", "critical_next"}
        if set(flags) != expected_flags:
            raise SnapshotError(f"{context}.flags must contain exactly {sorted(expected_flags)}.")
        combatant.is_defending = flags["is_defending"]
        combatant.recovering = flags["recovering"]
        combatant.locked_out = flags["locked_out"]
        combatant.critical_next = flags["critical_next"]

        combatant.status_effects = self._deserialize_statuses(data.get("status_effects"), context)
        behavior_state = self._require_dict(data.get("behavior"), f"{context}.behavior")
        try:
            combatant.behavior.restore_state(behavior_state)
        except (KeyError, TypeError, ValueError) as exc:
            raise SnapshotError(f"Invalid {context}.behavior state: {exc}") from exc

    def _deserialize_statuses(self, value: Any, context: str) -> List[StatusEffect]:
        if not isinstance(value, list):
            raise SnapshotError(f"{context}.status_effects must be a list.")
        effects: List[StatusEffect] = []
        for index, raw in enumerate(value):
            entry_context = f"{context}.status_effects[{index}]"
            entry = self._require_dict(raw, entry_context)
            kind = self._require_str(entry.get("kind"), f"{entry_context}.kind")
            if kind not in STATUS_KINDS:
                raise SnapshotError(f"{entry_context}.kind '{kind}' is not a known status.")
            effects.append(
                StatusEffect(
                    kind=kind,
                    remaining=self._require_int(entry.get("remaining"), f"{entry_context}.remaining", minimum=0),
                    source=self._require_str(entry.get("source"), f"{entry_context}.source"),
                    stacks=self._require_int(entry.get("stacks"), f"{entry_context}.stacks", minimum=1),
                    max_stacks=self._require_int(entry.get("max_stacks"), f"{entry_context}.max_stacks", minimum=1),
                    magnitude=self._require_int(entry.get("magnitude"), f"{entry_context}.magnitude", minimum=0),
                    accuracy_penalty=self._require_float(
                        entry.get("accuracy_penalty"), f"{entry_context}.accuracy_penalty"
                    ),
                    healing_reduction=self._require_float(
                        entry.get("healing_reduction"), f"{entry_context}.healing_reduction"
                    ),
                )
            )
        return effects

    # -----------------------
    # Rewards and log
    # -----------------------
    @staticmethod
    def _serialize_rewards(rewards: Rewards) -> Dict[str, Any]:
        return {
            "gold": rewards.gold,
            "xp": rewards.xp,
            "bonus_xp": rewards.bonus_xp,
            "prestige_points": rewards.prestige_points,
            "unique_loot": rewards.unique_loot,
        }

    def _deserialize_rewards(self, value: Any, context: str) -> Rewards:
        data = self._require_dict(value, context)
        return Rewards(
            gold=self._require_int(data.get("gold"), f"{context}.gold", minimum=0),
            xp=self._require_int(data.get("xp"), f"{context}.xp", minimum=0),
            bonus_xp=self._require_int(data.get("bonus_xp"), f"{context}.bonus_xp", minimum=0),
            prestige_points=self._require_int(data.get("prestige_points"), f"{context}.prestige_points", minimum=0),
            unique_loot=self._coerce_optional_str(data.get("unique_loot"), f"{context}.unique_loot"),
        )

    def _deserialize_log(self, value: Any) -> List[CombatLogEntry]:
        if not isinstance(value, list):
            raise SnapshotError("combat.log must be a list.")
        entries: List[CombatLogEntry] = []
        for index, raw in enumerate(value):
            context = f"combat.log[{index}]"
            entry = self._require_dict(raw, context)
            category = entry.get("category")
            if category not in _VALID_CATEGORIES:
                raise SnapshotError(f"{context}.category {category!r} is not a known log category.")
            entries.append(
                CombatLogEntry(
                    turn=self._require_int(entry.get("turn"), f"{context}.turn", minimum=0),
                    category=category,
                    message=self._require_str(entry.get("message"), f"{context}.message"),
                    timestamp=self._require_float(entry.get("timestamp"), f"{context}.timestamp"),
                )
            )
        return entries

    # -----------------------
    # Validation helpers
    # -----------------------
    def _coerce_rng_payload(self, payload: Mapping[str, Any]) -> RNGStatePayload:
        version = self._require_int(payload.get("version"), "rng.version")
        state_values = payload.get("state")
        if not isinstance(state_values, list):
            raise SnapshotError("Invalid RNG state payload.")
        gauss = payload.get("gauss")
        return {"version": version, "state": state_values, "gauss": gauss}

    @staticmethod
    def _require_dict(value: Any, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SnapshotError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SnapshotError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str, *, minimum: int | None = None) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise SnapshotError(f"{context} must be an integer.")
        if minimum is not None and value < minimum:
            raise SnapshotError(f"{context} must be >= {minimum}.")
        return value

    @staticmethod
    def _require_float(value: Any, context: str) -> float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise SnapshotError(f"{context} must be a number.")
        return float(value)

    def _coerce_optional_str(self, value: Any, context: str) -> str | None:
        if value is None:
            return None
        return self._require_str(value, context)

    def _coerce_str_list(self, value: Any, context: str) -> List[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise SnapshotError(f"{context} must be a list.")
        result: List[str] = []
        for entry in value:
            result.append(self._require_str(entry, f"{context}[]"))
        return result

    def _coerce_int_dict(self, value: Any, context: str) -> Dict[str, int]:
        mapping = self._require_dict(value, context)
        result: Dict[str, int] = {}
        for key, entry in mapping.items():
            result[key] = self._require_int(entry, f"{context}.{key}")
        return result

    def _coerce_bool_dict(self, value: Any, context: str) -> Dict[str, bool]:
        mapping = self._require_dict(value, context)
        result: Dict[str, bool] = {}
        for key, entry in mapping.items():
            if not isinstance(entry, bool):
                raise SnapshotError(f"{context}.{key} must be a boolean.")
            result[key] = entry
        return result
