"""
Result Store: persists finished battles and aggregates the leaderboard.

Playback must never wait on storage, so save_battle_result() logs and
returns None on failure instead of raising.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from django.db import DatabaseError, transaction

from .engine.battle import CHALLENGER, OPPONENT, round1
from .engine.contracts import BattleResult
from .models import BattleRecord

logger = logging.getLogger(__name__)

ENGINE_VERSION = "1.0.0"

DAMAGE_EVENTS = ("attack", "special_move")


def damage_dealt_by(result: BattleResult, login: str) -> float:
    total = sum(e.damage or 0 for e in result.events_of(*DAMAGE_EVENTS) if e.attacker == login)
    return round1(total)


def had_type_advantage(result: BattleResult, archetype: str) -> bool:
    return any(
        archetype in (e.message or "")
        for e in result.events_of("type_advantage")
    )


def final_hp_for(result: BattleResult, login: str, challenger_login: str) -> float:
    key = CHALLENGER if login == challenger_login else OPPONENT
    return result.final_hp.get(key, 0)


def derive_battle_stats(result: BattleResult, challenger_login: str) -> dict:
    """
    Aggregate numbers for one battle, read purely off the event log.
    """
    winner = result.winner.profile.login
    loser = result.loser.profile.login
    return {
        "winner_final_hp": final_hp_for(result, winner, challenger_login),
        "loser_final_hp": final_hp_for(result, loser, challenger_login),
        "total_turns": result.total_turns,
        "total_damage_dealt_by_winner": damage_dealt_by(result, winner),
        "total_damage_dealt_by_loser": damage_dealt_by(result, loser),
        "winner_had_type_advantage": had_type_advantage(result, result.winner.card.archetype),
        # approximate: one turn per second of playback at 1x
        "battle_duration_seconds": result.total_turns,
    }


def save_battle_result(result: BattleResult, challenger_login: str) -> Optional[str]:
    """
    Returns the new battle id, or None if it could not be stored.
    """
    try:
        stats = derive_battle_stats(result, challenger_login)
        w, l = result.winner, result.loser
        with transaction.atomic():
            record = BattleRecord.objects.create(
                winner_login=w.profile.login,
                winner_profile_id=w.profile.id,
                winner_archetype=w.card.archetype,
                winner_spirit_animal=w.card.spirit_animal,
                loser_login=l.profile.login,
                loser_profile_id=l.profile.id,
                loser_archetype=l.card.archetype,
                loser_spirit_animal=l.card.spirit_animal,
                battle_log=[e.to_dict() for e in result.battle_log],
                version=ENGINE_VERSION,
                **stats,
            )
    except DatabaseError:
        logger.exception("Error saving battle result (%s vs %s)",
                         result.winner.profile.login, result.loser.profile.login)
        return None

    return str(record.battle_id)


# ============================================================
# LEADERBOARD
# ============================================================

def build_leaderboard(limit: Optional[int] = None) -> List[dict]:
    """
    Wins/losses per login over every stored battle, sorted by wins then
    win rate.
    """
    stats = {}
    for winner, loser in BattleRecord.objects.values_list("winner_login", "loser_login"):
        if winner:
            stats.setdefault(winner, {"wins": 0, "losses": 0})["wins"] += 1
        if loser:
            stats.setdefault(loser, {"wins": 0, "losses": 0})["losses"] += 1

    entries = [
        {
            "login": login,
            "wins": s["wins"],
            "losses": s["losses"],
            "win_rate": s["wins"] / (s["wins"] + s["losses"]),
        }
        for login, s in stats.items()
    ]
    entries.sort(key=lambda e: (-e["wins"], -e["win_rate"]))

    if limit is not None:
        entries = entries[:limit]
    return entries


def recent_battles(limit: int = 20):
    return BattleRecord.objects.all()[:limit]
