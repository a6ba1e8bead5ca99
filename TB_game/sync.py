"""
Mirrors fighters and the ruleset from the content API into the local store.

Sync never raises: failures are logged and reported as False so pages keep
serving whatever is already stored.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .engine.rules import RuleError, validate_fighter, validate_game_data
from .models import FighterProfile, GameDataSnapshot, SyncStatus
from .repository import CURRENT_GAME_DATA
from .techub_api import TechubAPI, TechubAPIError

logger = logging.getLogger(__name__)

FIGHTERS_STATUS = "fighters"
GAME_DATA_STATUS = "game_data"


def _touch_status(key: str, count: int = 0) -> None:
    try:
        SyncStatus.objects.update_or_create(
            key=key, defaults={"last_sync": timezone.now(), "last_sync_count": count},
        )
    except DatabaseError:
        # sync itself succeeded, only the bookkeeping didn't
        logger.warning("could not update sync status for %s", key)


def _parse_updated_at(raw) -> Optional[datetime]:
    if not raw:
        return None
    dt = parse_datetime(str(raw))
    if dt is not None and timezone.is_naive(dt):
        dt = timezone.make_aware(dt, dt_timezone.utc)
    return dt


def sync_game_data(api: Optional[TechubAPI] = None) -> bool:
    api = api or TechubAPI()
    try:
        data = api.get_game_data()
        validate_game_data(data)
        GameDataSnapshot.objects.update_or_create(
            key=CURRENT_GAME_DATA,
            defaults={"data": data, "last_synced": timezone.now()},
        )
    except (TechubAPIError, RuleError, DatabaseError) as e:
        logger.error("Error syncing game data: %s", e)
        return False

    _touch_status(GAME_DATA_STATUS, 1)
    logger.info("game data synced")
    return True


def sync_fighters(api: Optional[TechubAPI] = None) -> bool:
    api = api or TechubAPI()
    try:
        docs = api.get_battle_ready_profiles()
    except TechubAPIError as e:
        logger.error("Error fetching fighters: %s", e)
        return False

    if not docs:
        return True

    now = timezone.now()
    synced = 0
    try:
        with transaction.atomic():
            for doc in docs:
                try:
                    validate_fighter(doc)
                except RuleError as e:
                    logger.warning("skipping fighter from API: %s", e.message)
                    continue

                profile = doc["profile"]
                FighterProfile.objects.update_or_create(
                    login=profile["login"],
                    defaults={
                        "profile_id": profile.get("id") or 0,
                        "name": profile.get("name") or "",
                        "avatar_url": profile.get("avatar_url") or "",
                        "card": doc["card"],
                        "last_synced": now,
                        "last_updated": _parse_updated_at(profile.get("updated_at")) or now,
                    },
                )
                synced += 1
    except DatabaseError:
        logger.exception("Error writing fighters")
        return False

    _touch_status(FIGHTERS_STATUS, synced)
    logger.info("synced %d fighters", synced)
    return True


def force_full_sync(api: Optional[TechubAPI] = None) -> bool:
    """
    Forget the last sync time and resync every fighter.
    """
    SyncStatus.objects.filter(key=FIGHTERS_STATUS).delete()
    return sync_fighters(api)


def should_sync_fighters(stale_after: Optional[timedelta] = None) -> bool:
    if stale_after is None:
        stale_after = timedelta(seconds=settings.FIGHTER_SYNC_STALE_SECONDS)

    try:
        if not FighterProfile.objects.exists():
            return True
        status = SyncStatus.objects.filter(key=FIGHTERS_STATUS).first()
    except DatabaseError:
        logger.warning("could not read sync status, syncing anyway")
        return True

    if status is None or status.last_sync is None:
        return True
    return timezone.now() - status.last_sync > stale_after
