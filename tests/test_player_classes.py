from __future__ import annotations

import pytest

from arena.core.rng import RNG

from tests.helpers.factories import make_player
from tests.helpers.scripted_rng import ScriptedRNG, always


def test_rogue_light_attack_hits_twice_for_half_attack() -> None:
    rogue = make_player("rogue")

    result = rogue.light_attack(RNG(1))

    assert result.hits == (3, 3)
    assert result.damage == 6


def test_rogue_flurry_splits_double_attack_over_four_hits() -> None:
    rogue = make_player("rogue")

    result = rogue.heavy_attack(RNG(1))

    assert result.hits == (3, 3, 3, 3)
    assert result.damage == 12


def test_rogue_dodge_chance_grows_with_defense() -> None:
    rogue = make_player("rogue")

    assert rogue.behavior.dodge_chance(rogue) == pytest.approx(0.23)


def test_rogue_full_dodge_sets_up_a_critical() -> None:
    rogue = make_player("rogue")
    rogue.defend()

    result = rogue.take_damage(20, ScriptedRNG(randoms=[0.0]))

    assert result.evaded
    assert result.damage_taken == 0
    assert rogue.has_status("expose")

    rogue.start_turn()
    follow_up = rogue.light_attack(RNG(1))

    assert follow_up.is_critical
    assert follow_up.hits == (4, 4)
    assert not rogue.has_status("expose")


def test_rogue_failed_dodge_still_mitigates() -> None:
    rogue = make_player("rogue")
    rogue.defend()

    result = rogue.take_damage(20, ScriptedRNG(randoms=[0.99]))

    assert not result.evaded
    assert result.damage_taken == 14


def _stealth_and_arm_backstab(rogue, rng) -> None:
    assert rogue.elite_skill(rng).success
    rogue.start_turn()
    armed = rogue.elite_skill(rng)
    assert armed.success
    assert armed.details["backstab_ready"] is True


def test_rogue_stealth_then_backstab() -> None:
    rogue = make_player("rogue", level=5)
    rng = RNG(1)

    stealth = rogue.elite_skill(rng)
    assert stealth.success
    assert not rogue.is_targetable
    assert rogue.cooldowns["elite"] == 4
    assert rogue.behavior.action_label(rogue, "elite") == "Backstab"

    rogue.start_turn()
    assert rogue.can_perform_action("elite")
    rogue.elite_skill(rng)
    assert rogue.cooldowns["backstab"] == 3

    rogue.start_turn()
    assert not rogue.is_targetable

    strike = rogue.light_attack(rng)
    assert strike.details["backstab_bonus"] == rogue.attack_power
    assert strike.damage == 2 * (rogue.attack_power // 2) + rogue.attack_power
    assert "BACKSTAB" in strike.message
    assert rogue.is_targetable
    assert not rogue.behavior.backstab_ready


def test_rogue_backstab_fades_with_stealth() -> None:
    rogue = make_player("rogue", level=3)
    rng = RNG(1)
    _stealth_and_arm_backstab(rogue, rng)
    assert rogue.cooldowns["backstab"] == 4

    report = rogue.start_turn()

    assert rogue.is_targetable
    assert any("emerges" in note for note in report.notes)
    assert not rogue.behavior.backstab_ready
    strike = rogue.light_attack(rng)
    assert strike.damage == 2 * (rogue.attack_power // 2)
    assert "backstab_bonus" not in strike.details


def test_rogue_flurry_reveals_and_drops_backstab() -> None:
    rogue = make_player("rogue", level=5)
    rng = RNG(1)
    _stealth_and_arm_backstab(rogue, rng)
    rogue.start_turn()
    assert not rogue.is_targetable

    flurry = rogue.heavy_attack(rng)

    assert flurry.success
    assert "leaves the shadows" in flurry.message
    assert rogue.is_targetable
    assert not rogue.behavior.backstab_ready


def test_mage_every_third_whip_shocks() -> None:
    mage = make_player("mage")
    rng = always(0.5)
    damages = []
    for _ in range(3):
        mage.start_turn()
        result = mage.light_attack(rng)
        assert result.target_effects == []
        damages.append(result.damage)

    assert damages == [6, 6, 12]


def test_mage_whip_can_chill() -> None:
    mage = make_player("mage")

    result = mage.light_attack(ScriptedRNG(randoms=[0.0]))

    assert [effect.kind for effect in result.target_effects] == ["chill"]
    assert result.details["chill_proc"] is True


def test_mage_ice_spikes_add_magic_bonus_and_chill() -> None:
    mage = make_player("mage")

    result = mage.heavy_attack(RNG(1))

    assert result.damage == 14
    assert [effect.kind for effect in result.target_effects] == ["chill"]


def test_mage_mist_step_evades_and_counters() -> None:
    mage = make_player("mage")
    mage.defend()
    assert mage.behavior.mist_charges == 1
    assert mage.behavior.evasion_chance(mage) == pytest.approx(0.35)

    result = mage.take_damage(20, ScriptedRNG(randoms=[0.0]))

    assert result.evaded
    assert result.damage_taken == 0
    assert result.reflected_damage == 3
    assert mage.behavior.mist_charges == 1


def test_mage_mist_step_softens_a_hit() -> None:
    mage = make_player("mage")
    mage.defend()

    result = mage.take_damage(20, ScriptedRNG(randoms=[0.99]))

    assert result.damage_taken == 18


def test_mage_firestorm_burns_and_empowers_attacks() -> None:
    mage = make_player("mage", level=3)
    rng = always(0.5)

    firestorm = mage.elite_skill(rng)

    assert firestorm.damage == 72
    assert firestorm.offensive
    assert [(effect.kind, effect.magnitude) for effect in firestorm.target_effects] == [("burn", 12)]
    assert mage.cooldowns["elite"] == 6

    mage.start_turn()
    whip = mage.light_attack(rng)
    assert [effect.kind for effect in whip.target_effects] == ["burn"]


def test_mage_unused_mist_charge_decays() -> None:
    mage = make_player("mage")
    mage.defend()
    mage.start_turn()
    mage.start_turn()

    assert mage.behavior.mist_charges == 0
