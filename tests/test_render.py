from arena.domain.combat_models import CombatLogEntry
from arena.domain.status_effects import make_status
from arena.presentation.cli.render import debug_enabled, format_combatant, format_log_entry

from tests.helpers.factories import make_player


def test_format_log_entry_uses_category_prefix(monkeypatch) -> None:
    monkeypatch.delenv("ARENA_DEBUG", raising=False)
    entry = CombatLogEntry(turn=3, category="damage", message="Goblin takes 5 damage.", timestamp=0.0)

    assert format_log_entry(entry) == "  * Goblin takes 5 damage."


def test_format_log_entry_debug_shows_turn_and_category(monkeypatch) -> None:
    monkeypatch.setenv("ARENA_DEBUG", "1")
    entry = CombatLogEntry(turn=3, category="special", message="Frenzy!", timestamp=0.0)

    assert format_log_entry(entry) == "[t3 special]   ! Frenzy!"


def test_debug_requires_exact_flag(monkeypatch) -> None:
    monkeypatch.setenv("ARENA_DEBUG", "yes")

    assert not debug_enabled()


def test_unlisted_category_gets_default_prefix(monkeypatch) -> None:
    monkeypatch.delenv("ARENA_DEBUG", raising=False)
    entry = CombatLogEntry(turn=1, category="player_action", message="Hi.", timestamp=0.0)

    assert format_log_entry(entry) == "  - Hi."


def test_format_combatant_lists_statuses() -> None:
    player = make_player("warrior")
    player.receive_status(make_status("poison", duration=3, source="small_humanoid", magnitude=1))

    line = format_combatant(player.to_view())

    assert line.startswith("Tester (Lv 1 warrior) HP 120/120")
    assert line.endswith("| poison(3)")
