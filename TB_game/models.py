import uuid

from django.db import models

from .engine.contracts import Fighter, GameData


class FighterProfile(models.Model):
    """
    Local copy of a battle-ready profile from the content API.
    `card` is stored as the raw document so new card fields survive a sync.
    """
    login = models.CharField(max_length=120, unique=True)
    profile_id = models.BigIntegerField(default=0)
    name = models.CharField(max_length=200, blank=True)
    avatar_url = models.URLField(max_length=500, blank=True)

    card = models.JSONField(default=dict)

    last_synced = models.DateTimeField(null=True, blank=True)
    last_updated = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["login"]

    def __str__(self):
        return self.login

    @property
    def archetype(self):
        return self.card.get("archetype", "")

    def to_document(self) -> dict:
        return {
            "profile": {
                "id": self.profile_id,
                "login": self.login,
                "name": self.name,
                "avatar_url": self.avatar_url,
            },
            "card": dict(self.card),
        }

    def to_fighter(self) -> Fighter:
        return Fighter.from_dict(self.to_document())


class GameDataSnapshot(models.Model):
    """
    The ruleset (archetypes, type chart, spirit animals, abilities, mechanics).
    One row keyed "current" is what battles use.
    """
    key = models.CharField(max_length=40, unique=True, default="current")
    data = models.JSONField(default=dict)
    last_synced = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return self.key

    def to_game_data(self) -> GameData:
        return GameData.from_dict(self.data)


class SyncStatus(models.Model):
    key = models.CharField(max_length=40, unique=True)  # "fighters", "game_data"
    last_sync = models.DateTimeField(null=True, blank=True)
    last_sync_count = models.IntegerField(default=0)

    def __str__(self):
        return f"{self.key} @ {self.last_sync}"


class BattleRecord(models.Model):
    """
    One finished battle, flattened for leaderboard queries.
    """
    battle_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    timestamp = models.DateTimeField(auto_now_add=True)

    winner_login = models.CharField(max_length=120, db_index=True)
    winner_profile_id = models.BigIntegerField(default=0)
    winner_archetype = models.CharField(max_length=60, blank=True)
    winner_spirit_animal = models.CharField(max_length=60, blank=True)
    winner_final_hp = models.FloatField(default=0)

    loser_login = models.CharField(max_length=120, db_index=True)
    loser_profile_id = models.BigIntegerField(default=0)
    loser_archetype = models.CharField(max_length=60, blank=True)
    loser_spirit_animal = models.CharField(max_length=60, blank=True)
    loser_final_hp = models.FloatField(default=0)

    total_turns = models.IntegerField(default=0)
    total_damage_dealt_by_winner = models.FloatField(default=0)
    total_damage_dealt_by_loser = models.FloatField(default=0)
    winner_had_type_advantage = models.BooleanField(default=False)
    battle_duration_seconds = models.IntegerField(default=0)

    battle_log = models.JSONField(default=list, blank=True)
    version = models.CharField(max_length=20)

    class Meta:
        ordering = ["-timestamp", "-id"]

    def __str__(self):
        return f"{self.winner_login} beat {self.loser_login} ({self.total_turns} turns)"
