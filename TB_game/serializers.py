from rest_framework import serializers
from .models import BattleRecord, FighterProfile
from .replay import SPEEDS


class FighterProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = FighterProfile
        fields = ("login", "profile_id", "name", "avatar_url", "card", "last_synced", "last_updated")


class BattleRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = BattleRecord
        exclude = ("id", "battle_log")


class BattleRequestSerializer(serializers.Serializer):
    challenger = serializers.CharField(max_length=120)
    opponent = serializers.CharField(max_length=120)
    seed = serializers.IntegerField(required=False, allow_null=True)
    save = serializers.BooleanField(default=True)

    def validate(self, attrs):
        if attrs["challenger"].lower() == attrs["opponent"].lower():
            raise serializers.ValidationError("A fighter can't battle themselves.")
        return attrs


class ReplayRequestSerializer(BattleRequestSerializer):
    speed = serializers.ChoiceField(choices=SPEEDS, default=1)
    save = serializers.BooleanField(default=False)


class LeaderboardEntrySerializer(serializers.Serializer):
    login = serializers.CharField()
    wins = serializers.IntegerField()
    losses = serializers.IntegerField()
    win_rate = serializers.FloatField()
