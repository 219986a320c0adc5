from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, List, Optional, TextIO

from .game import Game, new_game
from .rules import Ruleset


def run_session(game: Game, lines: Iterable[str], out: TextIO, show_state: bool = False) -> int:
    """Feed JSON action requests to ``game`` one per line; return the number of rejected ones."""
    rejected = 0
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        response, error = game.handle_action(line)
        out.write(response + "\n")
        if error is not None:
            rejected += 1
        if show_state and game.current_player is not None:
            out.write(game.current_state(game.current_player) + "\n")
        if game.finished:
            break
    return rejected


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play a tile rummy session from JSON action requests on stdin.")
    parser.add_argument("--players", nargs="+", default=["p1", "p2"], help="Player ids in registration order.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible deck order.")
    parser.add_argument("--hand-size", type=int, default=Ruleset.hand_size, help="Tiles dealt to each player.")
    parser.add_argument("--state", action="store_true", help="Print the next player's state after every action.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level for the engine.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    game = new_game(args.players, ruleset=Ruleset(hand_size=args.hand_size), rng_seed=args.seed)
    game.start()
    print(f"First player: {game.current_player}")

    rejected = run_session(game, sys.stdin, sys.stdout, show_state=args.state)
    print(f"Rejected actions: {rejected}")
    if game.winner is not None:
        print(f"Winner: {game.winner}")
    else:
        print("No winner yet")
    print("Hand sizes:", {p: game.hand_size(p) for p in game.players})
    print("Table combinations:", game.field_size())


if __name__ == "__main__":
    main()
