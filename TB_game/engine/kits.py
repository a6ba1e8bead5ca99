from __future__ import annotations

from . import rules
from .abilities import Passive


class ArcaneFocus(Passive):
    name = "Arcane Focus"
    desc = "+10% damage against archetypes it is strong against."

    def attack_bonus(self, ctx, unit, target):
        mult = ctx.type_multiplier(unit.archetype, target.archetype)
        if mult == ctx.mechanics.strong_multiplier:
            return rules.MAGICIAN_BONUS
        return 1.0


class LastStand(Passive):
    name = "Last Stand"
    desc = "Takes 5% less damage below half HP."

    def mitigation(self, ctx, unit, attacker):
        if unit.stats.hp < unit.stats.max_hp * rules.HERO_HP_THRESHOLD:
            return rules.HERO_MITIGATION
        return 1.0


class Command(Passive):
    name = "Command"
    desc = "+10% damage while above 75% HP."

    def attack_bonus(self, ctx, unit, target):
        if unit.stats.hp > unit.stats.max_hp * rules.RULER_HP_THRESHOLD:
            return rules.RULER_BONUS
        return 1.0


class Heartbreak(Passive):
    name = "Heartbreak"
    desc = "Up to +30% damage as HP drops."

    def attack_bonus(self, ctx, unit, target):
        return 1 + (1 - unit.stats.hp_pct) * rules.LOVER_MAX_BONUS


class JesterChaos(Passive):
    name = "Jester Chaos"
    desc = "10% chance to dodge an attack."

    def dodges(self, ctx, unit, attacker):
        return ctx.rng.random() < rules.JESTER_DODGE_CHANCE


class Regeneration(Passive):
    name = "Regeneration"
    desc = "Regains 2 HP at the end of every turn."

    def on_turn_end(self, ctx, unit):
        if unit.stats.hp > 0:
            unit.stats.hp = min(unit.stats.max_hp, unit.stats.hp + rules.CAREGIVER_REGEN)


# archetype -> passives. The Rebel's wider roll lives in the damage formula.
KITS = {
    "The Magician": (ArcaneFocus,),
    "The Hero": (LastStand,),
    "The Ruler": (Command,),
    "The Lover": (Heartbreak,),
    "The Jester": (JesterChaos,),
    "The Caregiver": (Regeneration,),
}


def get_kit_for(archetype: str) -> list[Passive]:
    return [cls() for cls in KITS.get(archetype, ())]
