from __future__ import annotations

from typing import Iterator, Optional

from .engine.contracts import BattleResult

SPEEDS = (0.5, 1, 2, 4)
BASE_DELAY_MS = 1000


def playback_frames(result: BattleResult, challenger_login: str, opponent_login: str,
                    speed: float = 1, max_hp: Optional[float] = None) -> Iterator[dict]:
    """
    Step through the log in order, tracking displayed HP.
    HP only ever comes from an event's defender_hp; nothing is recomputed.
    """
    if speed not in SPEEDS:
        raise ValueError(f"speed must be one of {SPEEDS}, got {speed}")

    delay_ms = BASE_DELAY_MS / speed
    hp = {challenger_login: max_hp, opponent_login: max_hp}

    for index, event in enumerate(result.battle_log):
        if event.defender_hp is not None and event.defender in hp:
            hp[event.defender] = event.defender_hp
        yield {
            "index": index,
            "delay_ms": 0 if index == 0 else delay_ms,
            "event": event.to_dict(),
            "challenger_hp": hp[challenger_login],
            "opponent_hp": hp[opponent_login],
        }
