from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from TB_game.models import BattleRecord, FighterProfile, GameDataSnapshot
from tests.helpers.battle_fixtures import fighter_doc, game_data_doc

pytestmark = pytest.mark.django_db


def _add_fighter(login: str, profile_id: int, **card) -> FighterProfile:
    doc = fighter_doc(login, profile_id, **card)
    return FighterProfile.objects.create(
        login=login,
        profile_id=profile_id,
        name=doc["profile"]["name"],
        avatar_url=doc["profile"]["avatar_url"],
        card=doc["card"],
    )


@pytest.fixture
def client() -> APIClient:
    return APIClient()


@pytest.fixture
def arena(db):
    GameDataSnapshot.objects.create(key="current", data=game_data_doc())
    _add_fighter("alice", 1, archetype="The Magician")
    _add_fighter("bob", 2, archetype="The Hero")


def _battle(client, **body):
    return client.post("/api/battle/", body, format="json")


def test_health(client) -> None:
    resp = client.get("/api/health/")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_fighter_list_and_archetype_filter(client, arena) -> None:
    resp = client.get("/api/fighters/")
    assert [f["login"] for f in resp.json()] == ["alice", "bob"]

    resp = client.get("/api/fighters/", {"archetype": "The Hero"})
    assert [f["login"] for f in resp.json()] == ["bob"]


def test_fighter_detail_is_case_insensitive(client, arena) -> None:
    resp = client.get("/api/fighters/ALICE/")

    assert resp.status_code == 200
    assert resp.json()["card"]["archetype"] == "The Magician"
    assert client.get("/api/fighters/ghost/").status_code == 404


def test_game_data_missing_then_present(client) -> None:
    assert client.get("/api/game-data/").status_code == 404

    GameDataSnapshot.objects.create(key="current", data=game_data_doc())
    resp = client.get("/api/game-data/")
    assert resp.status_code == 200
    assert resp.json()["mechanics"]["max_hp"] == 100


def test_battle_runs_and_saves(client, arena) -> None:
    resp = _battle(client, challenger="alice", opponent="bob", seed=7)

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["battle_id"]
    assert body["result"]["battle_log"][0]["type"] == "battle_start"
    assert body["result"]["battle_log"][-1]["type"] == "battle_end"

    record = BattleRecord.objects.get()
    assert str(record.battle_id) == body["battle_id"]
    assert {record.winner_login, record.loser_login} == {"alice", "bob"}


def test_battle_with_seed_is_reproducible(client, arena) -> None:
    first = _battle(client, challenger="alice", opponent="bob", seed=42, save=False).json()
    second = _battle(client, challenger="alice", opponent="bob", seed=42, save=False).json()

    assert first["battle_id"] is None
    assert first["result"] == second["result"]
    assert not BattleRecord.objects.exists()


def test_battle_rejects_self_battle(client, arena) -> None:
    resp = _battle(client, challenger="alice", opponent="Alice")

    assert resp.status_code == 400
    assert resp.json()["ok"] is False


def test_battle_unknown_fighter(client, arena) -> None:
    resp = _battle(client, challenger="alice", opponent="ghost")

    assert resp.status_code == 404
    assert "ghost" in resp.json()["error"]


def test_battle_without_game_data(client) -> None:
    _add_fighter("alice", 1)
    _add_fighter("bob", 2)

    assert _battle(client, challenger="alice", opponent="bob").status_code == 404


def test_battle_with_malformed_ruleset(client) -> None:
    bad = game_data_doc()
    del bad["mechanics"]["minimum_damage"]
    GameDataSnapshot.objects.create(key="current", data=bad)
    _add_fighter("alice", 1)
    _add_fighter("bob", 2)

    resp = _battle(client, challenger="alice", opponent="bob")

    assert resp.status_code == 400
    assert resp.json()["code"] == "MISSING_MECHANIC"
    assert not BattleRecord.objects.exists()


def test_random_battle_picks_someone_else(client, arena) -> None:
    resp = client.get("/api/battle/alice/random/")

    assert resp.status_code == 200
    record = BattleRecord.objects.get()
    assert {record.winner_login, record.loser_login} == {"alice", "bob"}


def test_random_battle_needs_an_opponent(client) -> None:
    GameDataSnapshot.objects.create(key="current", data=game_data_doc())
    _add_fighter("alice", 1)

    assert client.get("/api/battle/alice/random/").status_code == 404
    assert client.get("/api/battle/ghost/random/").status_code == 404


def test_replay_frames(client, arena) -> None:
    resp = client.post(
        "/api/battle/replay/",
        {"challenger": "alice", "opponent": "bob", "seed": 3, "speed": 2},
        format="json",
    )

    assert resp.status_code == 200
    body = resp.json()
    frames = body["frames"]
    assert frames[0]["delay_ms"] == 0
    assert frames[1]["delay_ms"] == 500
    assert (frames[0]["challenger_hp"], frames[0]["opponent_hp"]) == (100, 100)
    assert frames[-1]["event"]["type"] == "battle_end"
    assert body["winner"] in ("alice", "bob")
    assert body["battle_id"] is None


def test_replay_rejects_bad_speed(client, arena) -> None:
    resp = client.post(
        "/api/battle/replay/",
        {"challenger": "alice", "opponent": "bob", "speed": 3},
        format="json",
    )

    assert resp.status_code == 400


def test_leaderboard_and_recent(client, arena) -> None:
    for seed in (1, 2, 3):
        _battle(client, challenger="alice", opponent="bob", seed=seed)

    board = client.get("/api/leaderboard/").json()
    assert {e["login"] for e in board} == {"alice", "bob"}
    assert sum(e["wins"] for e in board) == 3
    assert board[0]["wins"] >= board[1]["wins"]

    assert len(client.get("/api/leaderboard/", {"limit": 1}).json()) == 1
    assert client.get("/api/leaderboard/", {"limit": "abc"}).status_code == 400

    recent = client.get("/api/battles/recent/").json()
    assert len(recent) == 3
    assert "battle_log" not in recent[0]


@pytest.mark.parametrize("limit", ["0", "-3", "abc"])
def test_leaderboard_rejects_non_positive_limit(client, arena, limit) -> None:
    _battle(client, challenger="alice", opponent="bob", seed=1)

    resp = client.get("/api/leaderboard/", {"limit": limit})

    assert resp.status_code == 400
    assert resp.json()["ok"] is False
