"""Rummikub-style tile rummy rule engine."""

from .rules import Ruleset
from .tiles import Color, Tile
from .combination import Combination, CombinationKind, validate_combination, validate_initial_meld
from .stage import Stage
from .action import ActionKind, ActionRequest, ActionResponse, StateResponse
from .game import Game, new_game
from .errors import ActionError, GameSetupError, RummyError

__all__ = [
    "Ruleset",
    "Color",
    "Tile",
    "Combination",
    "CombinationKind",
    "validate_combination",
    "validate_initial_meld",
    "Stage",
    "ActionKind",
    "ActionRequest",
    "ActionResponse",
    "StateResponse",
    "Game",
    "new_game",
    "ActionError",
    "GameSetupError",
    "RummyError",
]
