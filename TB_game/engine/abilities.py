from __future__ import annotations


class Passive:
    name = "Unnamed Passive"
    desc = ""

    # hooks
    # attacker-side damage multiplier for this attack
    def attack_bonus(self, ctx, unit, target) -> float: return 1.0
    # defender-side divisor applied to incoming damage
    def mitigation(self, ctx, unit, attacker) -> float: return 1.0
    # True cancels the incoming attack entirely
    def dodges(self, ctx, unit, attacker) -> bool: return False
    # once per full turn, after both fighters acted
    def on_turn_end(self, ctx, unit): pass

    def describe(self) -> str:
        return f"{self.name}: {self.desc}".strip(": ")
