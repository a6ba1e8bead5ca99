from django.contrib import admin
from django.core.exceptions import ValidationError
from django import forms

from .engine.rules import RuleError, validate_fighter, validate_game_data
from .models import BattleRecord, FighterProfile, GameDataSnapshot, SyncStatus


# -----------------------------
# Helpers
# -----------------------------

class FighterProfileForm(forms.ModelForm):
    """
    Hand-edited cards must still be something the engine can fight with.
    """
    class Meta:
        model = FighterProfile
        fields = "__all__"

    def clean(self):
        cleaned = super().clean()
        doc = {"profile": {"login": cleaned.get("login")}, "card": cleaned.get("card") or {}}
        try:
            validate_fighter(doc)
        except RuleError as e:
            raise ValidationError(e.message)
        return cleaned


class GameDataSnapshotForm(forms.ModelForm):
    class Meta:
        model = GameDataSnapshot
        fields = "__all__"

    def clean_data(self):
        data = self.cleaned_data.get("data")
        try:
            validate_game_data(data)
        except RuleError as e:
            raise ValidationError(f"{e.code}: {e.message}")
        return data


# -----------------------------
# Fighters / Ruleset
# -----------------------------

@admin.register(FighterProfile)
class FighterProfileAdmin(admin.ModelAdmin):
    form = FighterProfileForm
    list_display = ("login", "name", "archetype", "last_synced")
    search_fields = ("login", "name")
    readonly_fields = ("last_synced",)


@admin.register(GameDataSnapshot)
class GameDataSnapshotAdmin(admin.ModelAdmin):
    form = GameDataSnapshotForm
    list_display = ("key", "last_synced")


@admin.register(SyncStatus)
class SyncStatusAdmin(admin.ModelAdmin):
    list_display = ("key", "last_sync", "last_sync_count")


# -----------------------------
# Battles
# -----------------------------

@admin.register(BattleRecord)
class BattleRecordAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "winner_login", "loser_login", "total_turns", "winner_had_type_advantage")
    list_filter = ("winner_archetype", "winner_had_type_advantage", "version")
    search_fields = ("winner_login", "loser_login")
    readonly_fields = ("battle_id", "timestamp", "battle_log")
