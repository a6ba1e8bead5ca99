from .battle import BattleEngine, simulate_battle, simulate_from_documents
from .contracts import BattleEvent, BattleResult, Fighter, GameData
from .rules import RuleError

__all__ = [
    "BattleEngine",
    "BattleEvent",
    "BattleResult",
    "Fighter",
    "GameData",
    "RuleError",
    "simulate_battle",
    "simulate_from_documents",
]
