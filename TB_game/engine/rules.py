# TB_game/engine/rules.py

from dataclasses import dataclass
from typing import Optional, Dict, Any, Mapping


@dataclass
class RuleError(Exception):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self):
        return f"{self.code}: {self.message}"


# ============================================================
# EASY TO CHANGE STUFF (keep it here)
# ============================================================

DEFAULT_VARIANCE = 0.15        # +/- roll on every hit
REBEL_VARIANCE = 0.25          # The Rebel rolls wider

SPECIAL_MOVE_EVERY = 3         # special move on turns 3, 6, 9, ...
SPECIAL_MOVE_MIN_TURN = 1      # never on turn 1

JESTER_DODGE_CHANCE = 0.10
CAREGIVER_REGEN = 2

MAGICIAN_BONUS = 1.10          # vs archetypes it is strong against
RULER_BONUS = 1.10             # while above RULER_HP_THRESHOLD
RULER_HP_THRESHOLD = 0.75
HERO_MITIGATION = 1.05         # damage taken is divided by this
HERO_HP_THRESHOLD = 0.50
LOVER_MAX_BONUS = 0.30         # reached at 0 HP

# Floor on defense in the damage formula so a zero-defense card can't divide by zero.
MIN_EFFECTIVE_DEFENSE = 1.0

REQUIRED_MECHANICS = (
    "max_hp",
    "max_turns",
    "base_damage_multiplier",
    "random_variance",
    "type_multipliers",
    "minimum_damage",
)
REQUIRED_TYPE_MULTIPLIERS = ("strong", "weak", "neutral")
REQUIRED_CARD_STATS = ("attack", "defense", "speed")


# ============================================================
# HELPERS
# ============================================================

def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def is_special_move_turn(turn: int) -> bool:
    return turn > SPECIAL_MOVE_MIN_TURN and turn % SPECIAL_MOVE_EVERY == 0


# ============================================================
# VALIDATION
# ============================================================

def validate_game_data(data: Mapping[str, Any]) -> None:
    """
    Boundary check for a ruleset document, run before any simulation.

    Only `mechanics` is mandatory. type_chart / spirit_animals /
    archetype_abilities may be missing or partial: the engine falls back
    to neutral defaults for anything it can't find.
    """
    if not isinstance(data, Mapping):
        raise RuleError(code="MISSING_SECTION", message="Game data must be an object.")

    mechanics = data.get("mechanics")
    if not isinstance(mechanics, Mapping):
        raise RuleError(
            code="MISSING_SECTION",
            message="Game data has no mechanics.",
            details={"section": "mechanics"},
        )

    for key in ("type_chart", "spirit_animals", "archetype_abilities"):
        if data.get(key) is not None and not isinstance(data[key], Mapping):
            raise RuleError(
                code="MISSING_SECTION",
                message=f"Game data section '{key}' must be an object.",
                details={"section": key},
            )

    for key in REQUIRED_MECHANICS:
        if key not in mechanics or mechanics[key] is None:
            raise RuleError(
                code="MISSING_MECHANIC",
                message=f"Mechanics is missing '{key}'.",
                details={"field": key},
            )

    for key in ("max_hp", "max_turns", "base_damage_multiplier", "minimum_damage"):
        if not _is_number(mechanics[key]):
            raise RuleError(
                code="INVALID_MECHANIC",
                message=f"Mechanics '{key}' must be a number.",
                details={"field": key, "value": mechanics[key]},
            )

    if mechanics["max_hp"] <= 0:
        raise RuleError(code="INVALID_MECHANIC", message="max_hp must be positive.", details={"field": "max_hp"})
    if mechanics["max_turns"] < 1:
        raise RuleError(code="INVALID_MECHANIC", message="max_turns must be at least 1.", details={"field": "max_turns"})

    mults = mechanics["type_multipliers"]
    if not isinstance(mults, Mapping):
        raise RuleError(code="INVALID_MECHANIC", message="type_multipliers must be an object.",
                        details={"field": "type_multipliers"})
    for key in REQUIRED_TYPE_MULTIPLIERS:
        if not _is_number(mults.get(key)):
            raise RuleError(
                code="MISSING_MECHANIC",
                message=f"type_multipliers is missing '{key}'.",
                details={"field": f"type_multipliers.{key}"},
            )

    if not isinstance(mechanics["random_variance"], Mapping):
        raise RuleError(code="INVALID_MECHANIC", message="random_variance must be an object.",
                        details={"field": "random_variance"})

    _validate_type_chart(data.get("type_chart") or {})
    _validate_spirit_animals(data.get("spirit_animals") or {})
    _validate_abilities(data.get("archetype_abilities") or {})


def _invalid_section(section: str, message: str, field: str) -> RuleError:
    return RuleError(code="INVALID_SECTION", message=message, details={"section": section, "field": field})


def _is_str_list(v) -> bool:
    return isinstance(v, (list, tuple)) and all(isinstance(x, str) for x in v)


def _validate_type_chart(chart: Mapping[str, Any]) -> None:
    for archetype, entry in chart.items():
        if not isinstance(entry, Mapping):
            raise _invalid_section("type_chart", f"type_chart '{archetype}' must be an object.", archetype)
        for key in ("strong_against", "weak_against"):
            if entry.get(key) is not None and not _is_str_list(entry[key]):
                raise _invalid_section(
                    "type_chart",
                    f"type_chart '{archetype}' {key} must be a list of archetype names.",
                    f"{archetype}.{key}",
                )


def _validate_spirit_animals(animals: Mapping[str, Any]) -> None:
    for animal, mods in animals.items():
        if not isinstance(mods, Mapping):
            raise _invalid_section("spirit_animals", f"Spirit animal '{animal}' must be an object.", animal)
        for key in ("attack", "defense", "speed"):
            if key in mods and not _is_number(mods[key]):
                raise _invalid_section(
                    "spirit_animals",
                    f"Spirit animal '{animal}' {key} modifier must be a number.",
                    f"{animal}.{key}",
                )


def _validate_abilities(abilities: Mapping[str, Any]) -> None:
    for archetype, entry in abilities.items():
        if not isinstance(entry, Mapping):
            raise _invalid_section("archetype_abilities", f"Abilities for '{archetype}' must be an object.", archetype)
        moves = entry.get("special_moves")
        if moves is None:
            continue
        if not isinstance(moves, (list, tuple)):
            raise _invalid_section(
                "archetype_abilities", f"'{archetype}' special_moves must be a list.", f"{archetype}.special_moves",
            )
        for i, move in enumerate(moves):
            if not isinstance(move, Mapping):
                raise _invalid_section(
                    "archetype_abilities", f"'{archetype}' special move {i} must be an object.",
                    f"{archetype}.special_moves.{i}",
                )
            for key in ("damage_bonus", "defense_bonus", "speed_bonus"):
                if move.get(key) is not None and not _is_number(move[key]):
                    raise _invalid_section(
                        "archetype_abilities",
                        f"'{archetype}' special move {i} {key} must be a number.",
                        f"{archetype}.special_moves.{i}.{key}",
                    )


def validate_fighter(data: Mapping[str, Any]) -> None:
    """
    Minimum a fighter document needs: profile.login and the card stats
    the engine reads.
    """
    profile = data.get("profile") if isinstance(data, Mapping) else None
    card = data.get("card") if isinstance(data, Mapping) else None

    if not isinstance(profile, Mapping) or not profile.get("login"):
        raise RuleError(code="INVALID_FIGHTER", message="Fighter has no profile login.")

    login = profile["login"]
    if not isinstance(card, Mapping):
        raise RuleError(code="INVALID_FIGHTER", message=f"{login} has no card.", details={"login": login})

    for key in REQUIRED_CARD_STATS:
        if not _is_number(card.get(key)):
            raise RuleError(
                code="INVALID_FIGHTER",
                message=f"{login} card is missing '{key}'.",
                details={"login": login, "field": key},
            )

    for key in ("archetype", "spirit_animal"):
        if not isinstance(card.get(key), str):
            raise RuleError(
                code="INVALID_FIGHTER",
                message=f"{login} card is missing '{key}'.",
                details={"login": login, "field": key},
            )
