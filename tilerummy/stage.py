from __future__ import annotations

from enum import Enum
from typing import List

from .action import ActionKind


class Stage(str, Enum):
    INITIAL_MELD = "initialMeld"
    MAIN_GAME = "mainGame"

    def available_actions(self) -> List[ActionKind]:
        return list(_STAGE_ACTIONS[self])

    def permits(self, action: ActionKind) -> bool:
        return action in _STAGE_ACTIONS[self]


_STAGE_ACTIONS = {
    Stage.INITIAL_MELD: (ActionKind.INITIAL_MELD, ActionKind.PASS),
    Stage.MAIN_GAME: (
        ActionKind.ADD_PIECE,
        ActionKind.REMOVE_PIECE,
        ActionKind.REPLACE_PIECE,
        ActionKind.ADD_COMBINATION,
        ActionKind.CONCAT_COMBINATIONS,
        ActionKind.SPLIT_COMBINATION,
        ActionKind.PASS,
    ),
}
