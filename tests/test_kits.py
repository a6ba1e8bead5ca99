from __future__ import annotations

from TB_game.engine.battle import BattleEngine
from TB_game.engine.contracts import GameData
from TB_game.engine.kits import KITS, JesterChaos, Regeneration, get_kit_for
from tests.helpers.battle_fixtures import FixedRandom, make_fighter


def _engine(game_data: GameData, attacker_archetype: str, defender_archetype: str,
            rng: FixedRandom | None = None) -> BattleEngine:
    return BattleEngine(
        make_fighter("alice", 1, speed=60, archetype=attacker_archetype),
        make_fighter("bob", 2, speed=50, archetype=defender_archetype),
        game_data,
        rng=rng or FixedRandom(),
    )


def _hit(engine: BattleEngine, turn: int = 1):
    engine.turn = turn
    engine._execute_attack(engine.challenger, engine.opponent)
    return engine.log[-1]


def test_every_archetype_without_passive_gets_empty_kit() -> None:
    assert get_kit_for("The Explorer") == []
    assert get_kit_for("") == []


def test_kit_table_builds_fresh_instances() -> None:
    first = get_kit_for("The Jester")
    second = get_kit_for("The Jester")
    assert isinstance(first[0], JesterChaos)
    assert first[0] is not second[0]
    assert set(KITS) == {
        "The Magician", "The Hero", "The Ruler", "The Lover", "The Jester", "The Caregiver",
    }


def test_magician_bonus_only_with_type_advantage(game_data: GameData) -> None:
    strong = _hit(_engine(game_data, "The Magician", "The Hero"))
    neutral = _hit(_engine(game_data, "The Magician", "The Explorer"))

    assert strong.type_multiplier == 1.5
    assert strong.damage == 16.5  # 10 x 1.5 x 1.10
    assert neutral.damage == 10.0


def test_hero_mitigates_damage_below_half_hp(game_data: GameData) -> None:
    engine = _engine(game_data, "The Explorer", "The Hero")
    engine.opponent.stats.hp = 40

    event = _hit(engine)

    assert event.damage == 9.5  # 10 / 1.05
    assert event.defender_hp == 30.5


def test_hero_takes_full_damage_above_half_hp(game_data: GameData) -> None:
    engine = _engine(game_data, "The Explorer", "The Hero")
    engine.opponent.stats.hp = 60

    assert _hit(engine).damage == 10.0


def test_ruler_bonus_only_while_healthy(game_data: GameData) -> None:
    healthy = _engine(game_data, "The Ruler", "The Explorer")
    hurt = _engine(game_data, "The Ruler", "The Explorer")
    hurt.challenger.stats.hp = 75  # not strictly above 75%

    assert _hit(healthy).damage == 11.0
    assert _hit(hurt).damage == 10.0


def test_lover_scales_with_missing_hp(game_data: GameData) -> None:
    full = _engine(game_data, "The Lover", "The Explorer")
    half = _engine(game_data, "The Lover", "The Explorer")
    half.challenger.stats.hp = 50
    near_dead = _engine(game_data, "The Lover", "The Explorer")
    near_dead.challenger.stats.hp = 0.1

    assert _hit(full).damage == 10.0
    assert _hit(half).damage == 11.5
    assert _hit(near_dead).damage == 13.0


def test_jester_dodge_skips_damage_roll(game_data: GameData) -> None:
    rng = FixedRandom(0.05)
    engine = _engine(game_data, "The Explorer", "The Jester", rng=rng)

    event = _hit(engine)

    assert event.type == "passive_trigger"
    assert event.message == "bob dodged the attack! (Jester Chaos)"
    assert event.attacker == "alice" and event.defender == "bob"
    assert rng.uniform_calls == []
    assert engine.opponent.stats.hp == 100


def test_jester_is_hit_when_dodge_roll_fails(game_data: GameData) -> None:
    engine = _engine(game_data, "The Explorer", "The Jester", rng=FixedRandom(0.5))
    assert _hit(engine).type == "attack"


def test_caregiver_regenerates_capped_at_max(game_data: GameData) -> None:
    engine = _engine(game_data, "The Caregiver", "The Explorer")
    unit = engine.challenger
    regen = Regeneration()

    unit.stats.hp = 50
    regen.on_turn_end(engine, unit)
    assert unit.stats.hp == 52

    unit.stats.hp = 99.5
    regen.on_turn_end(engine, unit)
    assert unit.stats.hp == 100

    unit.stats.hp = 0
    regen.on_turn_end(engine, unit)
    assert unit.stats.hp == 0


def test_passive_describe() -> None:
    assert Regeneration().describe() == "Regeneration: Regains 2 HP at the end of every turn."
