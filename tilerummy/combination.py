"""Group and run validation.

The validator resolves jokers by writing the impersonated number and color
onto the joker tiles it is given. Callers that must not see that side effect
on a failed attempt pass copies (see ``tilerummy.tiles.copy_tiles``).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .rules import Ruleset
from .tiles import JOKER_NUMBER, TILE_COLORS, Tile, copy_tiles, sort_tiles

_DEFAULT_RULES = Ruleset()


class CombinationKind(str, Enum):
    GROUP = "G"
    RUN = "R"


@dataclass
class Combination:
    kind: CombinationKind
    tiles: List[Tile]

    def total(self) -> int:
        return sum(t.number for t in self.tiles)

    def copy(self) -> "Combination":
        return Combination(self.kind, copy_tiles(self.tiles))

    def __len__(self) -> int:
        return len(self.tiles)

    def __str__(self) -> str:
        return f"{self.kind.value}[{' '.join(str(t) for t in self.tiles)}]"


def _clear_jokers(tiles: Iterable[Tile]) -> None:
    for tile in tiles:
        tile.clear_if_joker()


def is_valid_group(tiles: List[Tile], ruleset: Ruleset) -> bool:
    if not ruleset.min_group_size <= len(tiles) <= ruleset.max_group_size:
        return False

    number = JOKER_NUMBER
    used_colors = []
    for tile in tiles:
        if tile.joker:
            continue
        if number == JOKER_NUMBER:
            number = tile.number
        elif tile.number != number:
            return False
        if tile.color in used_colors:
            return False
        used_colors.append(tile.color)

    if number == JOKER_NUMBER:
        return False

    free_colors = [c for c in TILE_COLORS if c not in used_colors]
    jokers = [t for t in tiles if t.joker]
    if len(jokers) > len(free_colors):
        return False
    for joker, color in zip(jokers, free_colors):
        joker.number = number
        joker.color = color
    return True


def is_valid_run(tiles: List[Tile], ruleset: Ruleset) -> bool:
    if len(tiles) < ruleset.min_run_size:
        return False

    # Neutral jokers carry number 0, so they sort to the front.
    ordered = sort_tiles(tiles)
    leading = sum(1 for t in ordered if t.joker)

    # The lowest real tile anchors the walk; every joker is gap credit.
    real = ordered[leading:]
    if not real:
        return False

    run_color = real[-1].color
    if real[0].color != run_color:
        return False

    credit = leading
    values: List[int] = []
    last = real[0].number
    for tile in real[1:]:
        if tile.color != run_color:
            return False
        gap = tile.number - last
        if gap <= 0:
            return False
        if gap - 1 > credit:
            return False
        credit -= gap - 1
        values.extend(range(last + 1, tile.number))
        last = tile.number

    upward = min(credit, ruleset.max_number - last)
    values.extend(range(last + 1, last + 1 + upward))
    credit -= upward

    first = real[0].number
    if first - credit < ruleset.min_number:
        return False
    values.extend(range(first - credit, first))

    for joker, value in zip(ordered[:leading], values):
        joker.number = value
        joker.color = run_color
    return True


def validate_combination(tiles: Iterable[Tile], ruleset: Optional[Ruleset] = None) -> Optional[Combination]:
    """Return the group or run formed by ``tiles``, or None.

    Jokers are re-resolved from scratch on every call and left neutral when
    the tiles form neither kind of combination.
    """
    ruleset = ruleset or _DEFAULT_RULES
    tiles = list(tiles)
    _clear_jokers(tiles)

    if is_valid_group(tiles, ruleset):
        return Combination(CombinationKind.GROUP, sort_tiles(tiles))
    if is_valid_run(tiles, ruleset):
        return Combination(CombinationKind.RUN, sort_tiles(tiles))

    _clear_jokers(tiles)
    return None


def validate_initial_meld(tiles: Iterable[Tile], ruleset: Optional[Ruleset] = None) -> Optional[Combination]:
    ruleset = ruleset or _DEFAULT_RULES
    tiles = list(tiles)
    combination = validate_combination(tiles, ruleset)
    if combination is None:
        return None
    if combination.total() < ruleset.initial_meld_min_points:
        _clear_jokers(tiles)
        return None
    return combination
