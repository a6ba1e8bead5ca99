from __future__ import annotations

import pytest
from django.db import DatabaseError

from TB_game.engine.battle import simulate_battle
from TB_game.engine.contracts import BattleEvent, BattleResult, GameData
from TB_game.models import BattleRecord
from TB_game.storage import (
    ENGINE_VERSION,
    build_leaderboard,
    derive_battle_stats,
    recent_battles,
    save_battle_result,
)
from tests.helpers.battle_fixtures import FixedRandom, make_fighter


def _handmade_result(winner_is_challenger: bool = True) -> BattleResult:
    alice = make_fighter("alice", 1, archetype="The Magician", spirit_animal="Fox")
    bob = make_fighter("bob", 2, archetype="The Hero", spirit_animal="Turtle")
    log = (
        BattleEvent(type="battle_start", message="Battle begins! alice (The Magician) vs bob (The Hero)"),
        BattleEvent(type="type_advantage", message="The Magician has type advantage over The Hero!"),
        BattleEvent(type="speed_check", message="alice moves first! (Speed: 60)"),
        BattleEvent(type="attack", turn=1, attacker="alice", defender="bob", damage=10.0, defender_hp=90.0),
        BattleEvent(type="attack", turn=1, attacker="bob", defender="alice", damage=5.5, defender_hp=94.5),
        BattleEvent(type="passive_trigger", turn=2, attacker="bob", defender="alice", message="dodge"),
        BattleEvent(type="special_move", turn=3, attacker="alice", defender="bob", damage=15.3,
                    defender_hp=0.0, special_move="Arcane Blast"),
        BattleEvent(type="knockout", turn=3, defender="bob"),
        BattleEvent(type="battle_end", message="alice wins the battle!"),
    )
    if winner_is_challenger:
        return BattleResult(winner=alice, loser=bob, battle_log=log, total_turns=3,
                            final_hp={"challenger": 94.5, "opponent": 0.0})
    return BattleResult(winner=bob, loser=alice, battle_log=log, total_turns=3,
                        final_hp={"challenger": 0.0, "opponent": 94.5})


def test_derive_stats_sums_attacks_and_special_moves() -> None:
    stats = derive_battle_stats(_handmade_result(), challenger_login="alice")

    assert stats["total_damage_dealt_by_winner"] == 25.3
    assert stats["total_damage_dealt_by_loser"] == 5.5
    assert stats["winner_had_type_advantage"] is True
    assert stats["winner_final_hp"] == 94.5
    assert stats["loser_final_hp"] == 0.0
    assert stats["total_turns"] == stats["battle_duration_seconds"] == 3


def test_final_hp_resolved_by_identity_when_opponent_wins() -> None:
    # bob is the opponent here, so his HP lives under "opponent"
    stats = derive_battle_stats(_handmade_result(winner_is_challenger=False), challenger_login="alice")

    assert stats["winner_final_hp"] == 94.5
    assert stats["loser_final_hp"] == 0.0


def test_type_advantage_flag_false_without_matching_event(game_data: GameData) -> None:
    result = simulate_battle(make_fighter("alice", 1, speed=60), make_fighter("bob", 2), game_data,
                             rng=FixedRandom())
    assert derive_battle_stats(result, "alice")["winner_had_type_advantage"] is False


@pytest.mark.django_db
def test_save_battle_result_persists_record() -> None:
    battle_id = save_battle_result(_handmade_result(), challenger_login="alice")

    record = BattleRecord.objects.get(battle_id=battle_id)
    assert record.winner_login == "alice"
    assert record.winner_archetype == "The Magician"
    assert record.winner_spirit_animal == "Fox"
    assert record.loser_login == "bob"
    assert record.loser_profile_id == 2
    assert record.total_damage_dealt_by_winner == 25.3
    assert record.version == ENGINE_VERSION
    assert record.battle_log[0]["type"] == "battle_start"
    assert record.battle_log[-1] == {"type": "battle_end", "message": "alice wins the battle!"}


@pytest.mark.django_db
def test_save_battle_result_swallows_database_errors(monkeypatch, caplog) -> None:
    def boom(**kwargs):
        raise DatabaseError("disk full")

    monkeypatch.setattr(BattleRecord.objects, "create", boom)

    assert save_battle_result(_handmade_result(), challenger_login="alice") is None
    assert "Error saving battle result" in caplog.text


def _record(winner: str, loser: str) -> BattleRecord:
    return BattleRecord.objects.create(winner_login=winner, loser_login=loser, version=ENGINE_VERSION)


@pytest.mark.django_db
def test_leaderboard_sorted_by_wins_then_win_rate() -> None:
    _record("alice", "bob")
    _record("alice", "carol")
    _record("bob", "carol")
    _record("bob", "dave")
    _record("carol", "alice")
    _record("dave", "bob")

    board = build_leaderboard()

    assert [e["login"] for e in board] == ["alice", "bob", "dave", "carol"]
    alice, bob = board[0], board[1]
    assert (alice["wins"], alice["losses"]) == (2, 1)
    assert (bob["wins"], bob["losses"]) == (2, 2)
    assert alice["win_rate"] == pytest.approx(2 / 3)
    assert bob["win_rate"] == 0.5


@pytest.mark.django_db
def test_leaderboard_limit_and_empty() -> None:
    assert build_leaderboard() == []

    _record("alice", "bob")
    assert len(build_leaderboard(limit=1)) == 1


@pytest.mark.django_db
def test_recent_battles_newest_first() -> None:
    first = _record("alice", "bob")
    second = _record("bob", "alice")

    assert list(recent_battles(limit=1)) == [second]
    assert set(recent_battles()) == {first, second}
