"""Request, response and state models exchanged with the caller."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .tiles import Color, Tile


class ActionKind(str, Enum):
    INITIAL_MELD = "initialMeld"
    ADD_PIECE = "addPiece"
    REMOVE_PIECE = "removePiece"
    REPLACE_PIECE = "replacePiece"
    ADD_COMBINATION = "addCombination"
    CONCAT_COMBINATIONS = "concatCombinations"
    SPLIT_COMBINATION = "splitCombination"
    PASS = "pass"


class ActionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    player: str
    action: ActionKind
    added_pieces: List[int] = Field(default_factory=list, alias="addedPieces")
    removed_piece: int = Field(0, alias="removedPiece")
    split_before_index: int = Field(0, alias="splitBeforeIndex")
    used_combinations: List[int] = Field(default_factory=list, alias="usedCombinations")
    timer_exceeded: bool = Field(False, alias="timerExceeded")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class ActionResponse(BaseModel):
    success: bool
    error: Optional[str] = None

    def to_json(self) -> str:
        return self.model_dump_json()


class TileView(BaseModel):
    number: int
    color: Color
    joker: bool

    @classmethod
    def of(cls, tile: Tile) -> "TileView":
        return cls(number=tile.number, color=tile.color, joker=tile.joker)


class StateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    turn: bool
    hand: List[TileView]
    available_actions: List[ActionKind] = Field(alias="availableActions")
    started: bool
    finished: bool
    winner: Optional[str] = None
    field: Dict[int, List[TileView]] = Field(default_factory=dict)
    bank_size: int = Field(0, alias="bankSize")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
