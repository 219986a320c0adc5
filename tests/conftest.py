import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tilerummy.game import new_game
from tilerummy.tiles import Color, Tile

COLOR_CODES = {"B": Color.BLACK, "R": Color.RED, "U": Color.BLUE, "O": Color.ORANGE}


def parse_spec(spec):
    """'O9' is orange 9, 'U3' blue 3, 'J' a joker."""
    if spec == "J":
        return Tile.new_joker()
    return Tile(int(spec[1:]), COLOR_CODES[spec[0]])


def take(game, spec):
    wanted = parse_spec(spec)
    for i, candidate in enumerate(game.bank.tiles):
        if candidate.signature() == wanted.signature():
            return game.bank.tiles.pop(i)
    raise LookupError(f"no {spec} left in the bank")


@pytest.fixture
def tiles():
    def build(*specs):
        return [parse_spec(s) for s in specs]

    return build


@pytest.fixture
def scripted():
    """Build a started game whose hands hold exactly the given tiles, taken from the bank."""

    def build(*hands, ruleset=None, seed=0):
        players = [f"p{i + 1}" for i in range(len(hands))]
        game = new_game(players, ruleset=ruleset, rng_seed=seed)
        for player, specs in zip(players, hands):
            game.hands[player].tiles = [take(game, s) for s in specs]
        game.started = True
        game.turn = 0
        return game

    return build
