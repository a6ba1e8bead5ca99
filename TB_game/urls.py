from django.urls import path
from . import views

urlpatterns = [
    path("api/health/", views.health, name="health"),

    path("api/fighters/", views.fighter_list, name="fighter-list"),
    path("api/fighters/<str:login>/", views.fighter_detail, name="fighter-detail"),
    path("api/game-data/", views.game_data_view, name="game-data"),

    path("api/battle/", views.api_battle, name="api-battle"),
    path("api/battle/replay/", views.api_battle_replay, name="api-battle-replay"),
    path("api/battle/<str:login>/random/", views.api_battle_random, name="api-battle-random"),

    path("api/leaderboard/", views.leaderboard, name="leaderboard"),
    path("api/battles/recent/", views.battles_recent, name="battles-recent"),
]
