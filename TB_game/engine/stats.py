from .contracts import Fighter, FighterStats, GameData, SpiritAnimalModifiers

NEUTRAL_MODIFIERS = SpiritAnimalModifiers()


def calc_stats(fighter: Fighter, game_data: GameData) -> FighterStats:
    card = fighter.card
    mods = game_data.spirit_animals.get(card.spirit_animal, NEUTRAL_MODIFIERS)
    max_hp = game_data.mechanics.max_hp
    return FighterStats(
        attack=card.attack * mods.attack,
        defense=card.defense * mods.defense,
        speed=card.speed * mods.speed,
        hp=max_hp,
        max_hp=max_hp,
    )
