"""
Fighter Repository: reads fighters and the ruleset out of the local store
and hands them to the engine as engine contracts.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from .engine.contracts import Fighter, GameData
from .engine.rules import RuleError, validate_fighter, validate_game_data
from .models import FighterProfile, GameDataSnapshot

logger = logging.getLogger(__name__)

CURRENT_GAME_DATA = "current"


def _current_snapshot() -> Optional[GameDataSnapshot]:
    snap = GameDataSnapshot.objects.filter(key=CURRENT_GAME_DATA).first()
    if snap is None:
        # fall back to whatever snapshot exists
        snap = GameDataSnapshot.objects.first()
    return snap


def get_game_data_document() -> Optional[dict]:
    snap = _current_snapshot()
    return dict(snap.data) if snap else None


def get_game_data() -> Optional[GameData]:
    """
    Validated ruleset, or None when nothing has been synced yet.
    Raises RuleError if the stored document is malformed.
    """
    snap = _current_snapshot()
    if snap is None:
        return None
    validate_game_data(snap.data)
    return snap.to_game_data()


def get_fighter_profile(login: str) -> Optional[FighterProfile]:
    return FighterProfile.objects.filter(login__iexact=login).first()


def get_fighter(login: str) -> Optional[Fighter]:
    profile = get_fighter_profile(login)
    if profile is None:
        return None
    validate_fighter(profile.to_document())
    return profile.to_fighter()


def get_fighters() -> List[Fighter]:
    out = []
    for profile in FighterProfile.objects.all():
        try:
            validate_fighter(profile.to_document())
        except RuleError as e:
            # a half-synced card shouldn't hide every other fighter
            logger.warning("skipping fighter %s: %s", profile.login, e)
            continue
        out.append(profile.to_fighter())
    return out


def get_fighters_and_game_data() -> Optional[Tuple[List[Fighter], GameData]]:
    game_data = get_game_data()
    if game_data is None:
        logger.warning("No game data found in store")
        return None

    fighters = get_fighters()
    if not fighters:
        logger.warning("No fighters found in store")
        return None

    return fighters, game_data


def pick_opponent(login: str, rng: Optional[random.Random] = None) -> Optional[Fighter]:
    """
    Random fighter other than `login`.
    """
    rng = rng or random.Random()
    pool = [f for f in get_fighters() if f.login.lower() != login.lower()]
    if not pool:
        return None
    return rng.choice(pool)
