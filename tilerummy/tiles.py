from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .rules import Ruleset

JOKER_NUMBER = 0


class Color(str, Enum):
    BLACK = "black"
    RED = "red"
    BLUE = "blue"
    ORANGE = "orange"
    JOKER = "jokerColor"


TILE_COLORS = (Color.BLACK, Color.RED, Color.BLUE, Color.ORANGE)


@dataclass
class Tile:
    """A numbered tile, or a joker.

    A joker keeps the number and color it impersonates inside its current
    combination and is reset to ``(0, jokerColor)`` whenever it leaves one.
    """

    number: int
    color: Color
    joker: bool = False

    @classmethod
    def new_joker(cls) -> "Tile":
        return cls(JOKER_NUMBER, Color.JOKER, joker=True)

    def is_neutral(self) -> bool:
        return self.joker and self.number == JOKER_NUMBER and self.color == Color.JOKER

    def clear_if_joker(self) -> None:
        if self.joker:
            self.number = JOKER_NUMBER
            self.color = Color.JOKER

    def copy(self) -> "Tile":
        return Tile(self.number, self.color, self.joker)

    def signature(self) -> tuple:
        return (self.number, self.color.value, self.joker)

    def __str__(self) -> str:
        if self.is_neutral():
            return "J"
        prefix = "J" if self.joker else ""
        return f"{prefix}{self.color.value[0].upper()}{self.number}"


def iter_full_pack(ruleset: Ruleset) -> Iterable[Tile]:
    for _ in range(ruleset.decks):
        yield Tile.new_joker()
        for color in TILE_COLORS:
            for number in range(ruleset.min_number, ruleset.max_number + 1):
                yield Tile(number, color)


def build_pack(ruleset: Ruleset) -> List[Tile]:
    return list(iter_full_pack(ruleset))


def sort_tiles(tiles: Iterable[Tile]) -> List[Tile]:
    # Stable, so tiles sharing a number keep their relative order.
    return sorted(tiles, key=lambda t: t.number)


def copy_tiles(tiles: Iterable[Tile]) -> List[Tile]:
    return [t.copy() for t in tiles]
