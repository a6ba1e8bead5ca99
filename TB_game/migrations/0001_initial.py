import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="FighterProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("login", models.CharField(max_length=120, unique=True)),
                ("profile_id", models.BigIntegerField(default=0)),
                ("name", models.CharField(blank=True, max_length=200)),
                ("avatar_url", models.URLField(blank=True, max_length=500)),
                ("card", models.JSONField(default=dict)),
                ("last_synced", models.DateTimeField(blank=True, null=True)),
                ("last_updated", models.DateTimeField(blank=True, null=True)),
            ],
            options={"ordering": ["login"]},
        ),
        migrations.CreateModel(
            name="GameDataSnapshot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(default="current", max_length=40, unique=True)),
                ("data", models.JSONField(default=dict)),
                ("last_synced", models.DateTimeField(blank=True, null=True)),
            ],
        ),
        migrations.CreateModel(
            name="SyncStatus",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=40, unique=True)),
                ("last_sync", models.DateTimeField(blank=True, null=True)),
                ("last_sync_count", models.IntegerField(default=0)),
            ],
        ),
        migrations.CreateModel(
            name="BattleRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("battle_id", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("winner_login", models.CharField(db_index=True, max_length=120)),
                ("winner_profile_id", models.BigIntegerField(default=0)),
                ("winner_archetype", models.CharField(blank=True, max_length=60)),
                ("winner_spirit_animal", models.CharField(blank=True, max_length=60)),
                ("winner_final_hp", models.FloatField(default=0)),
                ("loser_login", models.CharField(db_index=True, max_length=120)),
                ("loser_profile_id", models.BigIntegerField(default=0)),
                ("loser_archetype", models.CharField(blank=True, max_length=60)),
                ("loser_spirit_animal", models.CharField(blank=True, max_length=60)),
                ("loser_final_hp", models.FloatField(default=0)),
                ("total_turns", models.IntegerField(default=0)),
                ("total_damage_dealt_by_winner", models.FloatField(default=0)),
                ("total_damage_dealt_by_loser", models.FloatField(default=0)),
                ("winner_had_type_advantage", models.BooleanField(default=False)),
                ("battle_duration_seconds", models.IntegerField(default=0)),
                ("battle_log", models.JSONField(blank=True, default=list)),
                ("version", models.CharField(max_length=20)),
            ],
            options={"ordering": ["-timestamp", "-id"]},
        ),
    ]
