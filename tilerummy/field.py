from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .combination import Combination


@dataclass(frozen=True)
class Step:
    number: int
    player: Optional[str]


class History:
    """Append-only record of every combination placed on the table.

    Steps live in a list indexed by their number; index 0 is the sentinel
    head, so neighbours are found by index arithmetic.
    """

    def __init__(self) -> None:
        self._steps: List[Step] = [Step(0, None)]
        self._combinations: Dict[int, Combination] = {}

    @property
    def head(self) -> Step:
        return self._steps[0]

    @property
    def last(self) -> Step:
        return self._steps[-1]

    def append(self, player: str, combination: Combination) -> Step:
        step = Step(len(self._steps), player)
        self._steps.append(step)
        self._combinations[step.number] = combination.copy()
        return step

    def step(self, number: int) -> Optional[Step]:
        if not 0 <= number < len(self._steps):
            return None
        return self._steps[number]

    def previous(self, number: int) -> Optional[Step]:
        if number <= 0:
            return None
        return self.step(number - 1)

    def next(self, number: int) -> Optional[Step]:
        return self.step(number + 1)

    def combination(self, number: int) -> Optional[Combination]:
        return self._combinations.get(number)

    def by_player(self, player: str) -> List[Step]:
        return [s for s in self if s.player == player]

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps[1:])

    def __len__(self) -> int:
        return len(self._steps) - 1


@dataclass
class Field:
    """Combinations currently on the table, keyed by the step that placed them."""

    combinations: Dict[int, Combination] = field(default_factory=dict)
    owners: Dict[int, str] = field(default_factory=dict)

    def place(self, step: Step, combination: Combination) -> None:
        self.combinations[step.number] = combination
        self.owners[step.number] = step.player

    def get(self, step_number: int) -> Optional[Combination]:
        return self.combinations.get(step_number)

    def remove(self, step_number: int) -> Combination:
        self.owners.pop(step_number, None)
        return self.combinations.pop(step_number)

    def tile_count(self) -> int:
        return sum(len(c) for c in self.combinations.values())

    def items(self) -> Iterator[Tuple[int, Combination]]:
        return iter(sorted(self.combinations.items()))

    def __contains__(self, step_number: object) -> bool:
        return step_number in self.combinations

    def __len__(self) -> int:
        return len(self.combinations)
