from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from . import rules
from .contracts import BattleEvent, BattleResult, Fighter, FighterStats, GameData
from .kits import get_kit_for
from .stats import calc_stats

logger = logging.getLogger(__name__)

# =========================
# CONFIG
# =========================

CHALLENGER = "challenger"
OPPONENT = "opponent"

REBEL = "The Rebel"


class RandomSource(Protocol):
    def random(self) -> float: ...
    def uniform(self, a: float, b: float) -> float: ...


def round1(value: float) -> float:
    """Round half up to one decimal (Python's round() is banker's rounding)."""
    return math.floor(value * 10 + 0.5) / 10


# =========================
# RUNTIME TYPES
# =========================

@dataclass
class UnitRuntime:
    tag: str  # "challenger" / "opponent"
    fighter: Fighter
    stats: FighterStats
    passives: list = field(default_factory=list)

    @property
    def login(self) -> str:
        return self.fighter.profile.login

    @property
    def archetype(self) -> str:
        return self.fighter.card.archetype

    @property
    def alive(self):
        return self.stats.hp > 0


# =========================
# ENGINE
# =========================

class BattleEngine:
    """
    One engine instance runs exactly one battle.

    Fighters and game data are read-only; the only mutable state is the
    per-battle stats, the log and the turn counter owned by this instance.
    """

    def __init__(self, challenger: Fighter, opponent: Fighter, game_data: GameData,
                 rng: Optional[RandomSource] = None, seed: Optional[int] = None):
        self.game_data = game_data
        self.mechanics = game_data.mechanics
        self.rng = rng if rng is not None else random.Random(seed)
        self.turn = 0
        self.log: List[BattleEvent] = []

        self.challenger = self._build_unit(CHALLENGER, challenger)
        self.opponent = self._build_unit(OPPONENT, opponent)

        logger.debug(
            "battle init: %s (%s/%s) vs %s (%s/%s)",
            challenger.login, challenger.card.archetype, challenger.card.spirit_animal,
            opponent.login, opponent.card.archetype, opponent.card.spirit_animal,
        )

    def _build_unit(self, tag: str, fighter: Fighter) -> UnitRuntime:
        return UnitRuntime(
            tag=tag,
            fighter=fighter,
            stats=calc_stats(fighter, self.game_data),
            passives=get_kit_for(fighter.card.archetype),
        )

    def event(self, type_, **fields):
        self.log.append(BattleEvent(type=type_, **fields))

    # ---------- rules ----------

    def type_multiplier(self, attacker_archetype: str, defender_archetype: str) -> float:
        m = self.mechanics
        chart = self.game_data.type_chart.get(attacker_archetype)
        if chart is None:
            return m.neutral_multiplier
        if defender_archetype in chart.strong_against:
            return m.strong_multiplier
        if defender_archetype in chart.weak_against:
            return m.weak_multiplier
        return m.neutral_multiplier

    def roll_damage(self, attacker: UnitRuntime, defender: UnitRuntime, type_mult: float) -> float:
        m = self.mechanics
        defense = max(defender.stats.defense, rules.MIN_EFFECTIVE_DEFENSE)
        base = (attacker.stats.attack / defense) * m.base_damage_multiplier

        variance = rules.REBEL_VARIANCE if attacker.archetype == REBEL else rules.DEFAULT_VARIANCE
        random_factor = self.rng.uniform(1 - variance, 1 + variance)

        return max(m.minimum_damage, round1(base * random_factor * type_mult))

    def special_move_bonus(self, archetype: str) -> float:
        ability = self.game_data.archetype_abilities.get(archetype)
        if not ability or not ability.special_moves:
            return 1.0
        return ability.special_moves[0].damage_bonus or 1.0

    def special_move_name(self, unit: UnitRuntime) -> Optional[str]:
        # only a player-named move gets its own event; the bonus applies either way
        return unit.fighter.card.special_move or None

    # ---------- turn pieces ----------

    def _turn_order(self):
        c, o = self.challenger, self.opponent
        if c.stats.speed > o.stats.speed:
            return c, o
        if o.stats.speed > c.stats.speed:
            return o, c
        # exact tie: coin flip
        return (c, o) if self.rng.random() > 0.5 else (o, c)

    def _announce_type_advantage(self):
        c, o = self.challenger, self.opponent
        m = self.mechanics

        mult = self.type_multiplier(c.archetype, o.archetype)
        if mult == m.strong_multiplier:
            favoured, other = c, o
        elif mult == m.weak_multiplier:
            favoured, other = o, c
        else:
            # challenger's chart is silent; look from the opponent's side
            mult = self.type_multiplier(o.archetype, c.archetype)
            if mult == m.strong_multiplier:
                favoured, other = o, c
            elif mult == m.weak_multiplier:
                favoured, other = c, o
            else:
                return

        self.event(
            "type_advantage",
            message=f"{favoured.archetype} has type advantage over {other.archetype}!",
        )

    def _execute_attack(self, attacker: UnitRuntime, defender: UnitRuntime):
        # 1. Dodge (before any damage roll)
        for p in defender.passives:
            if p.dodges(self, defender, attacker):
                self.event(
                    "passive_trigger",
                    turn=self.turn,
                    message=f"{defender.login} dodged the attack! ({p.name})",
                    attacker=attacker.login,
                    defender=defender.login,
                )
                return

        # 2. Special move?
        use_special = rules.is_special_move_turn(self.turn)
        special_bonus = self.special_move_bonus(attacker.archetype) if use_special else 1.0
        move_name = self.special_move_name(attacker) if use_special else None

        # 3. Damage
        type_mult = self.type_multiplier(attacker.archetype, defender.archetype)
        damage = self.roll_damage(attacker, defender, type_mult)

        attack_bonus = 1.0
        for p in attacker.passives:
            attack_bonus *= p.attack_bonus(self, attacker, defender)
        mitigation = 1.0
        for p in defender.passives:
            mitigation *= p.mitigation(self, defender, attacker)

        damage = damage * attack_bonus * special_bonus / mitigation
        damage = max(self.mechanics.minimum_damage, round1(damage))

        # 4. Apply
        defender.stats.hp = max(0.0, round1(defender.stats.hp - damage))

        # 5. Log
        if move_name:
            self.event(
                "special_move",
                turn=self.turn,
                message=f"{attacker.login} uses {move_name}!",
                attacker=attacker.login,
                defender=defender.login,
                damage=damage,
                attacker_hp=attacker.stats.hp,
                defender_hp=defender.stats.hp,
                type_multiplier=type_mult,
                special_move=move_name,
            )
        else:
            self.event(
                "attack",
                turn=self.turn,
                message=f"{attacker.login} attacks {defender.login}",
                attacker=attacker.login,
                defender=defender.login,
                damage=damage,
                attacker_hp=attacker.stats.hp,
                defender_hp=defender.stats.hp,
                type_multiplier=type_mult,
            )

        # 6. KO?
        if defender.stats.hp <= 0:
            self.event(
                "knockout",
                turn=self.turn,
                message=f"{defender.login} has been knocked out!",
                defender=defender.login,
            )

    def _end_of_turn(self):
        for unit in (self.challenger, self.opponent):
            for p in unit.passives:
                p.on_turn_end(self, unit)

    # ---------- main loop ----------

    def simulate(self) -> BattleResult:
        if self.log:
            raise RuntimeError("BattleEngine instances are single-use.")

        c, o = self.challenger, self.opponent

        self.event(
            "battle_start",
            message=f"Battle begins! {c.login} ({c.archetype}) vs {o.login} ({o.archetype})",
        )
        self._announce_type_advantage()

        first, second = self._turn_order()
        self.event(
            "speed_check",
            message=f"{first.login} moves first! (Speed: {math.floor(first.stats.speed + 0.5)})",
        )

        while self.turn < self.mechanics.max_turns and c.alive and o.alive:
            self.turn += 1

            self._execute_attack(first, second)
            if c.alive and o.alive:
                self._execute_attack(second, first)

            self._end_of_turn()

            if not c.alive or not o.alive:
                break

        # strict >: equal HP goes to the opponent
        if c.stats.hp > o.stats.hp:
            winner, loser = c, o
        else:
            winner, loser = o, c

        self.event("battle_end", message=f"{winner.login} wins the battle!")

        logger.debug("battle over: %s beat %s in %d turns", winner.login, loser.login, self.turn)

        return BattleResult(
            winner=winner.fighter,
            loser=loser.fighter,
            battle_log=tuple(self.log),
            total_turns=self.turn,
            final_hp={
                CHALLENGER: round1(c.stats.hp),
                OPPONENT: round1(o.stats.hp),
            },
        )


# =========================
# PUBLIC API
# =========================

def simulate_battle(challenger: Fighter, opponent: Fighter, game_data: GameData,
                    rng: Optional[RandomSource] = None, seed: Optional[int] = None) -> BattleResult:
    """
    Runs a full battle in one go.
    """
    return BattleEngine(challenger, opponent, game_data, rng=rng, seed=seed).simulate()


def simulate_from_documents(challenger: dict, opponent: dict, game_data: dict,
                            rng: Optional[RandomSource] = None, seed: Optional[int] = None) -> BattleResult:
    """
    Validate raw documents (as stored / served by the content API) and fight.
    Raises rules.RuleError before anything is simulated.
    """
    rules.validate_game_data(game_data)
    rules.validate_fighter(challenger)
    rules.validate_fighter(opponent)
    return simulate_battle(
        Fighter.from_dict(challenger),
        Fighter.from_dict(opponent),
        GameData.from_dict(game_data),
        rng=rng,
        seed=seed,
    )
