from __future__ import annotations

import math

import pytest

from arena.core.rng import RNG
from arena.domain.behaviors import EnemyBehavior
from arena.domain.behaviors.gladiator import dialogue_phase, execution_multiplier
from arena.domain.behaviors.knoll import pack_tactics_multiplier
from arena.domain.status_effects import make_status

from tests.helpers.factories import make_enemy, make_player
from tests.helpers.scripted_rng import ScriptedRNG


def _within_variance(damage: int, base: float) -> bool:
    return math.floor(base * 0.8) <= damage <= math.floor(base * 1.2)


def test_enemy_damage_variance_stays_within_twenty_percent() -> None:
    rng = RNG(5)
    rolls = {EnemyBehavior.roll_damage(10, rng) for _ in range(200)}

    assert rolls <= set(range(8, 13))
    assert len(rolls) > 1


def test_goblin_starts_with_every_action_available() -> None:
    goblin = make_enemy("goblin")

    assert goblin.available_actions() == [
        "attack",
        "defend",
        "heavy_attack",
        "poisoned_blade",
        "dirty_fighting",
    ]


def test_goblin_poisoned_blade_poisons_and_cools_down() -> None:
    player = make_player("warrior", level=3)
    goblin = make_enemy("goblin", player=player)

    result = goblin.perform("poisoned_blade", player, ScriptedRNG(ints=[3]))

    assert result.success
    assert result.offensive
    assert result.damage == 3
    assert [(effect.kind, effect.magnitude) for effect in result.target_effects] == [("poison", 1)]
    assert goblin.cooldowns["poisoned_blade"] == 3
    assert goblin.available_actions() == []

    goblin.start_turn()
    assert "poisoned_blade" not in goblin.available_actions()
    assert "dirty_fighting" in goblin.available_actions()


def test_enemy_cannot_use_ability_on_cooldown() -> None:
    player = make_player()
    goblin = make_enemy("goblin", player=player)
    goblin.set_cooldown("dirty_fighting", 2)

    result = goblin.perform("dirty_fighting", player, RNG(1))

    assert not result.success
    assert goblin.remaining_moves == 1


def test_goblin_reacts_to_player_actions() -> None:
    goblin = make_enemy("goblin")

    assert goblin.react_to("attack", RNG(1)) == "The goblin yelps and hops back."


@pytest.mark.parametrize("ratio, expected", [(1.0, 1.5), (0.6, 1.5), (0.5, 2.0), (0.1, 2.0)])
def test_pack_tactics_multiplier(ratio: float, expected: float) -> None:
    assert pack_tactics_multiplier(ratio) == expected


def test_knoll_frenzies_once_below_thirty_percent() -> None:
    knoll = make_enemy("knoll", player=make_player("warrior", level=3))
    knoll.hp = 24

    first = knoll.start_turn()

    assert knoll.behavior.frenzied
    assert knoll.base_attack == 11
    assert knoll.initiative == 9
    assert knoll.has_status("frenzy")
    assert len(first.special_triggers) == 1

    second = knoll.start_turn()
    assert second.special_triggers == []
    assert knoll.base_attack == 11


def test_knoll_natural_armor() -> None:
    knoll = make_enemy("knoll", player=make_player("warrior", level=3))

    result = knoll.take_damage(20, RNG(1))

    assert result.damage_taken == 18


def test_lizard_scales_and_hardening() -> None:
    lizard = make_enemy("giant_lizard")
    assert lizard.defense == 11

    assert lizard.take_damage(20, RNG(1)).damage_taken == 16

    lizard.receive_status(make_status("hardened_scales", duration=4, source="large_beast"))
    assert lizard.take_damage(20, RNG(1)).damage_taken == 12
    assert not lizard.can_use("scale_hardening")


def test_lizard_berserk_halves_armor() -> None:
    lizard = make_enemy("giant_lizard")
    lizard.hp = lizard.max_hp // 10

    report = lizard.start_turn()

    assert lizard.behavior.berserk
    assert lizard.behavior.natural_armor(lizard) == 2
    assert report.special_triggers


@pytest.mark.parametrize("ratio, expected", [(1.0, 1.0), (0.5, 2.0), (0.0, 3.0)])
def test_execution_multiplier(ratio: float, expected: float) -> None:
    assert execution_multiplier(ratio) == pytest.approx(expected)


@pytest.mark.parametrize(
    "ratio, expected",
    [(0.8, "intro"), (0.75, "mid_battle"), (0.25, "mid_battle"), (0.24, "low_health")],
)
def test_gladiator_dialogue_phase(ratio: float, expected: str) -> None:
    assert dialogue_phase(ratio) == expected


def test_gladiator_speaks_only_on_phase_change() -> None:
    gladiator = make_enemy("gladiator_warrior")
    boss = gladiator.enemy_def.boss
    assert boss is not None
    rng = RNG(2)

    intro = gladiator.behavior.phase_dialogue(gladiator, rng)
    repeat = gladiator.behavior.phase_dialogue(gladiator, rng)
    gladiator.hp = gladiator.max_hp // 2
    mid = gladiator.behavior.phase_dialogue(gladiator, rng)

    assert intro in boss.dialogue["intro"]
    assert repeat is None
    assert mid in boss.dialogue["mid_battle"]


def test_gladiator_iron_guard_reflects_and_mitigates() -> None:
    gladiator = make_enemy("gladiator_warrior")
    gladiator.receive_status(make_status("iron_guard", duration=2, source="gladiator"))

    result = gladiator.take_damage(50, RNG(1))

    assert result.reflected_damage == 15
    assert result.damage_taken == 37


def test_gladiator_endurance_caps_at_five_stacks() -> None:
    player = make_player()
    gladiator = make_enemy("gladiator_warrior", player=player)
    rng = RNG(1)
    for _ in range(5):
        gladiator.set_cooldown("battle_endurance", 0)
        gladiator.remaining_moves = 1
        assert gladiator.perform("battle_endurance", player, rng).success

    gladiator.set_cooldown("battle_endurance", 0)
    gladiator.remaining_moves = 1
    assert gladiator.behavior.endurance_stacks == 5
    assert not gladiator.can_use("battle_endurance")


def test_knoll_savage_bite_opens_a_bleed() -> None:
    player = make_player("warrior", level=3)
    knoll = make_enemy("knoll", player=player)

    result = knoll.perform("savage_bite", player, RNG(4))

    assert result.offensive
    assert _within_variance(result.damage, knoll.attack_power * 1.2)
    [bleed] = result.target_effects
    assert (bleed.kind, bleed.remaining) == ("bleed", 4)
    assert bleed.magnitude == max(1, math.floor(knoll.attack_power * 0.3))
    assert knoll.cooldowns["savage_bite"] == 3


def test_knoll_howl_intimidates_without_damage() -> None:
    player = make_player("warrior", level=3)
    knoll = make_enemy("knoll", player=player)

    result = knoll.perform("howl", player, RNG(4))

    assert result.damage == 0
    [howl] = result.target_effects
    assert (howl.kind, howl.remaining, howl.accuracy_penalty) == ("intimidated", 3, 0.15)
    assert player.receive_status(howl)
    assert player.accuracy_penalty == pytest.approx(0.15)


def test_lizard_tail_whip_sometimes_strikes_twice() -> None:
    player = make_player()
    lizard = make_enemy("giant_lizard", player=player)

    double = lizard.perform("tail_whip", player, ScriptedRNG(randoms=[0.29]))

    assert len(double.hits) == 2
    assert double.damage == sum(double.hits)
    assert all(_within_variance(hit, lizard.attack_power * 0.8) for hit in double.hits)
    assert "strikes twice" in double.message

    single = make_enemy("giant_lizard", player=player).perform("tail_whip", player, ScriptedRNG(randoms=[0.3]))

    assert len(single.hits) == 1
    assert "strikes twice" not in single.message


def test_lizard_venom_spit_poisons_and_dulls_healing() -> None:
    player = make_player()
    lizard = make_enemy("giant_lizard", player=player)

    result = lizard.perform("venom_spit", player, RNG(2))

    assert _within_variance(result.damage, lizard.attack_power * 0.6)
    [venom] = result.target_effects
    assert (venom.kind, venom.remaining, venom.healing_reduction) == ("toxic_venom", 5, 0.5)
    assert venom.magnitude == max(1, math.floor(lizard.attack_power * 0.25))


def test_lizard_crushing_bite_stuns_for_a_turn() -> None:
    player = make_player()
    lizard = make_enemy("giant_lizard", player=player)

    result = lizard.perform("crushing_bite", player, RNG(2))

    assert _within_variance(result.damage, lizard.attack_power * 1.8)
    [stun] = result.target_effects
    assert (stun.kind, stun.remaining) == ("stunned", 1)

    player.receive_status(stun)
    stunned_turn = player.start_turn()
    assert stunned_turn.stunned
    assert player.remaining_moves == 0

    recovered = player.start_turn()
    assert not recovered.stunned
    assert player.remaining_moves == player.moves_per_turn


def test_execution_strike_hits_harder_against_wounded_targets() -> None:
    player = make_player()
    gladiator = make_enemy("gladiator_warrior", player=player)
    player.hp = player.max_hp // 4

    result = gladiator.perform("execution_strike", player, RNG(6))

    expected = gladiator.attack_power * 2 * execution_multiplier(player.hp_ratio)
    assert _within_variance(result.damage, expected)
    assert "EXECUTION STRIKE" in result.message
    assert gladiator.cooldowns["execution_strike"] == 6


def test_warrior_shout_buffs_until_the_fury_fades() -> None:
    player = make_player()
    gladiator = make_enemy("gladiator_warrior", player=player)
    initiative = gladiator.initiative
    attack = gladiator.attack_power

    result = gladiator.perform("warrior_shout", player, RNG(1))

    assert gladiator.initiative == initiative + 5
    assert gladiator.attack_power == attack + math.floor(gladiator.base_attack * 0.2)
    [shout] = result.target_effects
    assert (shout.kind, shout.remaining, shout.accuracy_penalty) == ("intimidated", 2, 0.15)

    gladiator.start_turn()
    gladiator.start_turn()
    assert gladiator.initiative == initiative + 5

    faded = gladiator.start_turn()
    assert not gladiator.has_status("battle_fury")
    assert gladiator.initiative == initiative
    assert gladiator.attack_power == attack
    assert any("subsides" in note for note in faded.notes)
