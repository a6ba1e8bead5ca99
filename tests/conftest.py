from __future__ import annotations

import pytest

from TB_game.engine.contracts import GameData
from tests.helpers.battle_fixtures import FixedRandom, make_game_data


@pytest.fixture
def game_data() -> GameData:
    return make_game_data()


@pytest.fixture
def fixed_rng() -> FixedRandom:
    return FixedRandom()
