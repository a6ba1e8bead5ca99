from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

# =========================
# FIGHTERS
# =========================

@dataclass(frozen=True)
class Profile:
    id: int
    login: str
    name: str = ""
    avatar_url: str = ""

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Profile":
        return cls(
            id=int(d.get("id") or 0),
            login=str(d["login"]),
            name=d.get("name") or "",
            avatar_url=d.get("avatar_url") or "",
        )


@dataclass(frozen=True)
class Card:
    attack: float
    defense: float
    speed: float
    archetype: str
    spirit_animal: str
    special_move: Optional[str] = None
    vibe: Optional[str] = None
    buff: Optional[str] = None
    weakness: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Card":
        return cls(
            attack=float(d["attack"]),
            defense=float(d["defense"]),
            speed=float(d["speed"]),
            archetype=str(d.get("archetype") or ""),
            spirit_animal=str(d.get("spirit_animal") or ""),
            special_move=d.get("special_move") or None,
            vibe=d.get("vibe"),
            buff=d.get("buff"),
            weakness=d.get("weakness"),
        )


@dataclass(frozen=True)
class Fighter:
    profile: Profile
    card: Card

    @property
    def login(self) -> str:
        return self.profile.login

    @property
    def archetype(self) -> str:
        return self.card.archetype

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Fighter":
        return cls(profile=Profile.from_dict(d["profile"]), card=Card.from_dict(d["card"]))

    def to_dict(self) -> dict:
        return {
            "profile": {
                "id": self.profile.id,
                "login": self.profile.login,
                "name": self.profile.name,
                "avatar_url": self.profile.avatar_url,
            },
            "card": {
                k: v for k, v in {
                    "attack": self.card.attack,
                    "defense": self.card.defense,
                    "speed": self.card.speed,
                    "archetype": self.card.archetype,
                    "spirit_animal": self.card.spirit_animal,
                    "special_move": self.card.special_move,
                    "vibe": self.card.vibe,
                    "buff": self.card.buff,
                    "weakness": self.card.weakness,
                }.items() if v is not None
            },
        }


# =========================
# RULESET
# =========================

@dataclass(frozen=True)
class TypeAdvantage:
    strong_against: Tuple[str, ...] = ()
    weak_against: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SpiritAnimalModifiers:
    attack: float = 1.0
    defense: float = 1.0
    speed: float = 1.0


@dataclass(frozen=True)
class SpecialMove:
    name: str
    description: str = ""
    damage_bonus: Optional[float] = None
    defense_bonus: Optional[float] = None
    speed_bonus: Optional[float] = None


@dataclass(frozen=True)
class ArchetypeAbility:
    special_moves: Tuple[SpecialMove, ...] = ()
    passive: str = ""
    description: str = ""
    playstyle: str = ""


@dataclass(frozen=True)
class Mechanics:
    max_hp: float
    max_turns: int
    base_damage_multiplier: float
    strong_multiplier: float
    weak_multiplier: float
    neutral_multiplier: float
    minimum_damage: float


@dataclass(frozen=True)
class GameData:
    archetypes: Tuple[str, ...]
    type_chart: Dict[str, TypeAdvantage]
    spirit_animals: Dict[str, SpiritAnimalModifiers]
    archetype_abilities: Dict[str, ArchetypeAbility]
    mechanics: Mechanics

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "GameData":
        """
        Build a ruleset from the document shape served by the content API.
        Shape is assumed valid; call rules.validate_game_data first.
        """
        m = d["mechanics"]
        mults = m["type_multipliers"]

        type_chart = {
            name: TypeAdvantage(
                strong_against=tuple(entry.get("strong_against") or ()),
                weak_against=tuple(entry.get("weak_against") or ()),
            )
            for name, entry in (d.get("type_chart") or {}).items()
        }
        spirit_animals = {
            name: SpiritAnimalModifiers(
                attack=float(mods.get("attack", 1.0)),
                defense=float(mods.get("defense", 1.0)),
                speed=float(mods.get("speed", 1.0)),
            )
            for name, mods in (d.get("spirit_animals") or {}).items()
        }
        abilities = {}
        for name, entry in (d.get("archetype_abilities") or {}).items():
            moves = tuple(
                SpecialMove(
                    name=mv.get("name", ""),
                    description=mv.get("description", ""),
                    damage_bonus=mv.get("damage_bonus"),
                    defense_bonus=mv.get("defense_bonus"),
                    speed_bonus=mv.get("speed_bonus"),
                )
                for mv in (entry.get("special_moves") or [])
            )
            abilities[name] = ArchetypeAbility(
                special_moves=moves,
                passive=entry.get("passive", ""),
                description=entry.get("description", ""),
                playstyle=entry.get("playstyle", ""),
            )

        return cls(
            archetypes=tuple(d.get("archetypes") or ()),
            type_chart=type_chart,
            spirit_animals=spirit_animals,
            archetype_abilities=abilities,
            mechanics=Mechanics(
                max_hp=float(m["max_hp"]),
                max_turns=int(m["max_turns"]),
                base_damage_multiplier=float(m["base_damage_multiplier"]),
                strong_multiplier=float(mults["strong"]),
                weak_multiplier=float(mults["weak"]),
                neutral_multiplier=float(mults["neutral"]),
                minimum_damage=float(m["minimum_damage"]),
            ),
        )


# =========================
# BATTLE OUTPUT
# =========================

@dataclass
class FighterStats:
    """Per-battle mutable stats. Owned by one engine instance only."""
    attack: float
    defense: float
    speed: float
    hp: float
    max_hp: float

    @property
    def hp_pct(self) -> float:
        return self.hp / self.max_hp if self.max_hp else 0.0


@dataclass(frozen=True)
class BattleEvent:
    type: str
    turn: Optional[int] = None
    message: Optional[str] = None
    attacker: Optional[str] = None
    defender: Optional[str] = None
    damage: Optional[float] = None
    attacker_hp: Optional[float] = None
    defender_hp: Optional[float] = None
    type_multiplier: Optional[float] = None
    special_move: Optional[str] = None

    def to_dict(self) -> dict:
        # only the fields relevant to this event type are set
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass(frozen=True)
class BattleResult:
    winner: Fighter
    loser: Fighter
    battle_log: Tuple[BattleEvent, ...]
    total_turns: int
    final_hp: Dict[str, float] = field(default_factory=dict)

    def events_of(self, *types: str) -> List[BattleEvent]:
        return [e for e in self.battle_log if e.type in types]

    def to_dict(self) -> dict:
        return {
            "winner": self.winner.to_dict(),
            "loser": self.loser.to_dict(),
            "battle_log": [e.to_dict() for e in self.battle_log],
            "total_turns": self.total_turns,
            "final_hp": dict(self.final_hp),
        }
