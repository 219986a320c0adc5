from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .rules import Ruleset
from .tiles import JOKER_NUMBER, Tile, build_pack


@dataclass
class Bank:
    """Undealt tiles. The front of the list is always drawn first."""

    tiles: List[Tile] = field(default_factory=list)

    @classmethod
    def full(cls, ruleset: Ruleset) -> "Bank":
        return cls(build_pack(ruleset))

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self.tiles)

    def draw(self, count: int) -> List[Tile]:
        count = max(0, min(count, len(self.tiles)))
        drawn = self.tiles[:count]
        del self.tiles[:count]
        return drawn

    def put_back(self, tiles: Iterable[Tile]) -> None:
        for tile in tiles:
            tile.clear_if_joker()
            self.tiles.append(tile)

    def __len__(self) -> int:
        return len(self.tiles)


@dataclass
class Hand:
    tiles: List[Tile] = field(default_factory=list)

    def tile_at(self, index: int) -> Optional[Tile]:
        if not 0 <= index < len(self.tiles):
            return None
        return self.tiles[index]

    def gather(self, indices: Sequence[int]) -> List[Tile]:
        """Resolve hand indices in request order; raises IndexError on the first miss."""
        gathered = []
        for index in indices:
            tile = self.tile_at(index)
            if tile is None:
                raise IndexError(index)
            gathered.append(tile)
        return gathered

    def add(self, tile: Tile) -> None:
        tile.clear_if_joker()
        self.tiles.append(tile)

    def extend(self, tiles: Iterable[Tile]) -> None:
        for tile in tiles:
            self.add(tile)

    def remove_indices(self, indices: Iterable[int]) -> List[Tile]:
        # Highest first so the remaining indices stay valid.
        removed = []
        for index in sorted(set(indices), reverse=True):
            removed.append(self.tiles.pop(index))
        return removed

    def largest_number(self) -> int:
        return max((t.number for t in self.tiles if not t.joker), default=JOKER_NUMBER)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)
