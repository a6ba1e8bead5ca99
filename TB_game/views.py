import logging
import random

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .engine.battle import simulate_battle
from .engine.rules import RuleError
from .models import FighterProfile
from .replay import playback_frames
from .repository import get_fighter, get_game_data, get_game_data_document, pick_opponent
from .serializers import (
    BattleRecordSerializer,
    BattleRequestSerializer,
    FighterProfileSerializer,
    LeaderboardEntrySerializer,
    ReplayRequestSerializer,
)
from .storage import build_leaderboard, recent_battles, save_battle_result

logger = logging.getLogger(__name__)


def _rule_error(e: RuleError, status=400):
    return Response({"ok": False, "error": e.message, "code": e.code}, status=status)


def _not_found(msg):
    return Response({"ok": False, "error": msg}, status=404)


def _load_matchup(challenger_login, opponent_login):
    """
    Returns (challenger, opponent, game_data) or an error Response.
    """
    game_data = get_game_data()
    if game_data is None:
        return _not_found("No game data available. Run a sync first.")

    challenger = get_fighter(challenger_login)
    if challenger is None:
        return _not_found(f"Fighter '{challenger_login}' not found.")
    opponent = get_fighter(opponent_login)
    if opponent is None:
        return _not_found(f"Fighter '{opponent_login}' not found.")

    return challenger, opponent, game_data


def _fight(challenger, opponent, game_data, seed=None, save=True):
    result = simulate_battle(challenger, opponent, game_data, seed=seed)
    battle_id = save_battle_result(result, challenger.login) if save else None
    return result, battle_id


@require_GET
def health(request):
    return JsonResponse({
        "status": "healthy",
        "timestamp": timezone.now().isoformat(),
    })


@api_view(["GET"])
@permission_classes([AllowAny])
def fighter_list(request):
    fighters = FighterProfile.objects.all()
    archetype = request.query_params.get("archetype")
    if archetype:
        fighters = fighters.filter(card__archetype=archetype)
    serializer = FighterProfileSerializer(fighters, many=True)
    return Response(serializer.data)


@api_view(["GET"])
@permission_classes([AllowAny])
def fighter_detail(request, login):
    profile = FighterProfile.objects.filter(login__iexact=login).first()
    if not profile:
        return _not_found(f"Fighter '{login}' not found.")
    return Response(FighterProfileSerializer(profile).data)


@api_view(["GET"])
@permission_classes([AllowAny])
def game_data_view(request):
    doc = get_game_data_document()
    if doc is None:
        return _not_found("No game data available. Run a sync first.")
    return Response(doc)


@api_view(["POST"])
@permission_classes([AllowAny])
def api_battle(request):
    req = BattleRequestSerializer(data=request.data)
    if not req.is_valid():
        return Response({"ok": False, "error": req.errors}, status=400)
    data = req.validated_data

    try:
        loaded = _load_matchup(data["challenger"], data["opponent"])
        if isinstance(loaded, Response):
            return loaded
        result, battle_id = _fight(*loaded, seed=data.get("seed"), save=data["save"])
    except RuleError as e:
        logger.warning("battle rejected: %s", e)
        return _rule_error(e)

    return Response({"ok": True, "battle_id": battle_id, "result": result.to_dict()})


@api_view(["GET"])
@permission_classes([AllowAny])
def api_battle_random(request, login):
    try:
        challenger = get_fighter(login)
        if challenger is None:
            return _not_found(f"Fighter '{login}' not found.")
        game_data = get_game_data()
        if game_data is None:
            return _not_found("No game data available. Run a sync first.")
        opponent = pick_opponent(login, rng=random.Random())
        if opponent is None:
            return _not_found("No opponents available.")
        result, battle_id = _fight(challenger, opponent, game_data)
    except RuleError as e:
        return _rule_error(e)

    return Response({"ok": True, "battle_id": battle_id, "result": result.to_dict()})


@api_view(["POST"])
@permission_classes([AllowAny])
def api_battle_replay(request):
    req = ReplayRequestSerializer(data=request.data)
    if not req.is_valid():
        return Response({"ok": False, "error": req.errors}, status=400)
    data = req.validated_data

    try:
        loaded = _load_matchup(data["challenger"], data["opponent"])
        if isinstance(loaded, Response):
            return loaded
        challenger, opponent, game_data = loaded
        result, battle_id = _fight(challenger, opponent, game_data, seed=data.get("seed"), save=data["save"])
    except RuleError as e:
        return _rule_error(e)

    frames = list(playback_frames(
        result, challenger.login, opponent.login,
        speed=data["speed"], max_hp=game_data.mechanics.max_hp,
    ))
    return Response({
        "ok": True,
        "battle_id": battle_id,
        "winner": result.winner.login,
        "total_turns": result.total_turns,
        "frames": frames,
    })


@api_view(["GET"])
@permission_classes([AllowAny])
def leaderboard(request):
    limit = request.query_params.get("limit")
    if limit is not None:
        try:
            limit = int(limit)
        except ValueError:
            limit = 0
        if limit < 1:
            return Response({"ok": False, "error": "limit must be a positive integer."}, status=400)
    entries = build_leaderboard(limit=limit)
    return Response(LeaderboardEntrySerializer(entries, many=True).data)


@api_view(["GET"])
@permission_classes([AllowAny])
def battles_recent(request):
    serializer = BattleRecordSerializer(recent_battles(), many=True)
    return Response(serializer.data)
