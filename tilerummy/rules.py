from dataclasses import dataclass


@dataclass(frozen=True)
class Ruleset:
    hand_size: int = 14
    min_number: int = 1
    max_number: int = 13
    decks: int = 2
    penalty_size: int = 3
    initial_meld_min_points: int = 30
    min_group_size: int = 3
    max_group_size: int = 4
    min_run_size: int = 3
    min_players: int = 2
    max_players: int = 4
    # Enforced by the caller, which sets ActionRequest.timer_exceeded.
    time_limit_seconds: int = 60

    def pack_size(self, colors: int = 4) -> int:
        numbers = self.max_number - self.min_number + 1
        return self.decks * (colors * numbers + 1)
