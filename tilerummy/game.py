from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from .action import ActionKind, ActionRequest, ActionResponse, StateResponse, TileView
from .combination import Combination, validate_combination, validate_initial_meld
from .errors import (
    ActionError,
    CardinalityError,
    GameSetupError,
    GameStateError,
    MalformedRequestError,
    NotYourTurnError,
    RuleError,
    StageError,
    StructuralError,
    UnknownPlayerError,
)
from .field import Field, History, Step
from .pack import Bank, Hand
from .rules import Ruleset
from .stage import Stage
from .tiles import Tile, copy_tiles

logger = logging.getLogger(__name__)

RawRequest = Union[str, bytes, dict, ActionRequest]


def first_player_index(hands: Sequence[Hand]) -> int:
    """Index of the hand holding the largest tile number; ties go to the earliest hand."""
    best_index = 0
    best_value = -1
    for index, hand in enumerate(hands):
        largest = hand.largest_number()
        if largest > best_value:
            best_index = index
            best_value = largest
    return best_index


class Game:
    def __init__(self, players: Sequence[str], ruleset: Ruleset, rng_seed: Optional[int] = None) -> None:
        self.ruleset = ruleset
        self.players: List[str] = list(players)
        self.bank = Bank.full(ruleset)
        self.field = Field()
        self.history = History()
        self.hands: Dict[str, Hand] = {p: Hand() for p in self.players}
        self.stages: Dict[str, Stage] = {p: Stage.INITIAL_MELD for p in self.players}
        self.turn = 0
        self.started = False
        self.finished = False
        self.winner: Optional[str] = None
        self.rng_seed = rng_seed
        self._rng = random.Random(rng_seed)
        self._handlers = {
            ActionKind.INITIAL_MELD: self._initial_meld,
            ActionKind.ADD_PIECE: self._add_piece,
            ActionKind.REMOVE_PIECE: self._remove_piece,
            ActionKind.REPLACE_PIECE: self._replace_piece,
            ActionKind.ADD_COMBINATION: self._add_combination,
            ActionKind.CONCAT_COMBINATIONS: self._concat_combinations,
            ActionKind.SPLIT_COMBINATION: self._split_combination,
        }

    # Lifecycle

    def start(self) -> None:
        if len(self.players) < self.ruleset.min_players:
            raise GameSetupError(
                f"must be between {self.ruleset.min_players} and {self.ruleset.max_players} players"
            )
        if self.started:
            logger.warning("game restarted; hands and table are returned to the bank and re-dealt")
            for hand in self.hands.values():
                self.bank.put_back(hand.tiles)
                hand.tiles = []
            for _, combination in self.field.items():
                self.bank.put_back(combination.tiles)
            self.field = Field()
            self.history = History()
            self.stages = {p: Stage.INITIAL_MELD for p in self.players}

        self.bank.shuffle(self._rng)
        for player in self.players:
            self.hands[player].extend(self.bank.draw(self.ruleset.hand_size))
        self.turn = first_player_index([self.hands[p] for p in self.players])
        self.started = True
        self.finished = False
        self.winner = None
        logger.info("game started: players=%s first=%s bank=%d", self.players, self.current_player, len(self.bank))

    def remove_player(self, player: str) -> None:
        if player not in self.hands:
            raise UnknownPlayerError(f"there is no player with id {player}")

        index = self.players.index(player)
        self.players.pop(index)
        hand = self.hands.pop(player)
        del self.stages[player]
        self.bank.put_back(hand.tiles)

        if index < self.turn:
            self.turn -= 1
        if self.turn >= len(self.players):
            self.turn = 0

        if self.started and not self.finished and len(self.players) < self.ruleset.min_players:
            self.finished = True
            self.winner = self.players[0] if self.players else None
        logger.info("player %s left the game; %d remaining", player, len(self.players))

    @property
    def current_player(self) -> Optional[str]:
        if not self.players:
            return None
        return self.players[self.turn]

    # Actions

    def handle_action(self, raw: RawRequest) -> Tuple[str, Optional[ActionError]]:
        """Apply a serialized action request.

        Returns the serialized ``ActionResponse`` together with the error that
        rejected the action, if any. A rejected action never changes the game.
        """
        try:
            request = parse_action_request(raw)
            self.apply(request)
        except ActionError as exc:
            logger.info("action rejected: %s", exc)
            return ActionResponse(success=False, error=str(exc)).to_json(), exc
        return ActionResponse(success=True).to_json(), None

    def apply(self, request: ActionRequest) -> None:
        player = request.player
        self._check_can_act(player)

        if request.timer_exceeded or request.action == ActionKind.PASS:
            drawn = self._penalty(player)
            logger.debug("%s drew %d penalty tiles (timer_exceeded=%s)", player, drawn, request.timer_exceeded)
        else:
            stage = self.stages[player]
            if not stage.permits(request.action):
                raise StageError(f"action {request.action.value} is not allowed at stage {stage.value} for player {player}")
            self._handlers[request.action](player, request)
            logger.debug("%s applied %s; field=%d hand=%d", player, request.action.value, len(self.field), len(self.hands[player]))

        self._end_turn(player)

    def _check_can_act(self, player: str) -> None:
        if not self.started:
            raise GameStateError("game is not started yet")
        if self.finished:
            raise GameStateError("game is already finished")
        if player not in self.hands:
            raise UnknownPlayerError(f"there is no player with id {player}")
        if self.current_player != player:
            raise NotYourTurnError(f"it is not {player}'s turn")

    def _end_turn(self, player: str) -> None:
        if len(self.hands[player]) == 0:
            self.finished = True
            self.winner = player
            logger.info("game finished; winner=%s", player)
            return
        self.turn = (self.turn + 1) % len(self.players)

    def _penalty(self, player: str) -> int:
        drawn = self.bank.draw(self.ruleset.penalty_size)
        self.hands[player].extend(drawn)
        return len(drawn)

    def _initial_meld(self, player: str, request: ActionRequest) -> None:
        indices = request.added_pieces
        self._require_hand_indices(indices)
        tiles = self._gather(player, indices)

        combination = validate_initial_meld(copy_tiles(tiles), self.ruleset)
        if combination is None:
            raise RuleError(
                f"pieces {indices} do not form a combination worth at least {self.ruleset.initial_meld_min_points}"
            )

        self.hands[player].remove_indices(indices)
        self._place(player, combination)
        self.stages[player] = Stage.MAIN_GAME

    def _add_piece(self, player: str, request: ActionRequest) -> None:
        if len(request.added_pieces) != 1:
            raise CardinalityError("exactly one piece per action can be added")
        step_number = self._single_combination(request, "addition")
        combination = self._combination(step_number)
        piece_index = request.added_pieces[0]
        piece = self._gather(player, [piece_index])[0]

        candidate = copy_tiles(combination.tiles)
        candidate.append(piece.copy())
        new_combination = validate_combination(candidate, self.ruleset)
        if new_combination is None:
            raise RuleError(f"can't add the piece {piece_index} to the combination {step_number}")

        self._place(player, new_combination)
        self.field.remove(step_number)
        self.hands[player].remove_indices([piece_index])

    def _remove_piece(self, player: str, request: ActionRequest) -> None:
        step_number = self._single_combination(request, "removing")
        combination = self._combination(step_number)
        piece_index = self._combination_index(combination, request.removed_piece, step_number)

        candidate = copy_tiles(combination.tiles)
        del candidate[piece_index]
        new_combination = validate_combination(candidate, self.ruleset)
        if new_combination is None:
            raise RuleError(f"can't remove the piece {piece_index} from the combination {step_number}")

        removed = combination.tiles[piece_index]
        self._place(player, new_combination)
        self.field.remove(step_number)
        self.hands[player].add(removed)

    def _replace_piece(self, player: str, request: ActionRequest) -> None:
        if len(request.added_pieces) != 1:
            raise CardinalityError("exactly one piece per action can be replaced")
        step_number = self._single_combination(request, "replacing")
        combination = self._combination(step_number)
        hand_index = request.added_pieces[0]
        piece = self._gather(player, [hand_index])[0]
        table_index = self._combination_index(combination, request.removed_piece, step_number)

        candidate = copy_tiles(combination.tiles)
        candidate[table_index] = piece.copy()
        new_combination = validate_combination(candidate, self.ruleset)
        if new_combination is None:
            raise RuleError(
                f"piece {hand_index} from hand can't replace piece {table_index} from combination {step_number}"
            )

        displaced = combination.tiles[table_index]
        self._place(player, new_combination)
        self.field.remove(step_number)
        hand = self.hands[player]
        hand.remove_indices([hand_index])
        hand.add(displaced)

    def _add_combination(self, player: str, request: ActionRequest) -> None:
        indices = request.added_pieces
        self._require_hand_indices(indices)
        tiles = self._gather(player, indices)

        combination = validate_combination(copy_tiles(tiles), self.ruleset)
        if combination is None:
            raise RuleError(f"pieces {indices} do not form a valid combination")

        self.hands[player].remove_indices(indices)
        self._place(player, combination)

    def _concat_combinations(self, player: str, request: ActionRequest) -> None:
        step_numbers = request.used_combinations
        if len(step_numbers) < 2:
            raise CardinalityError("at least 2 combinations can be concatenated")
        if len(set(step_numbers)) != len(step_numbers):
            raise CardinalityError("a combination can't be concatenated with itself")

        pooled: List[Tile] = []
        for step_number in step_numbers:
            pooled.extend(copy_tiles(self._combination(step_number).tiles))

        combination = validate_combination(pooled, self.ruleset)
        if combination is None:
            joined = ", ".join(str(n) for n in step_numbers)
            raise RuleError(f"combinations [{joined}] can't be concatenated to the valid one")

        self._place(player, combination)
        for step_number in step_numbers:
            self.field.remove(step_number)

    def _split_combination(self, player: str, request: ActionRequest) -> None:
        step_number = self._single_combination(request, "splitting")
        combination = self._combination(step_number)
        split_at = request.split_before_index
        if not 0 < split_at < len(combination):
            raise StructuralError(f"index {split_at} out of range in combination {step_number}")

        candidate = copy_tiles(combination.tiles)
        left = validate_combination(candidate[:split_at], self.ruleset)
        right = validate_combination(candidate[split_at:], self.ruleset)
        if left is None or right is None:
            raise RuleError(
                f"can't create two valid combinations from splitting combination {step_number} on index {split_at}"
            )

        self.field.remove(step_number)
        self._place(player, left)
        self._place(player, right)

    # Lookups

    def _require_hand_indices(self, indices: Sequence[int]) -> None:
        if not indices:
            raise CardinalityError("at least one piece must be used")
        if len(set(indices)) != len(indices):
            raise CardinalityError(f"piece indices {list(indices)} contain duplicates")

    def _gather(self, player: str, indices: Sequence[int]) -> List[Tile]:
        try:
            return self.hands[player].gather(indices)
        except IndexError as exc:
            raise StructuralError(f"there is no piece with index {exc.args[0]}") from exc

    def _single_combination(self, request: ActionRequest, purpose: str) -> int:
        if len(request.used_combinations) != 1:
            raise CardinalityError(f"exactly one combination per action can be used for {purpose}")
        return request.used_combinations[0]

    def _combination(self, step_number: int) -> Combination:
        combination = self.field.get(step_number)
        if combination is None:
            raise StructuralError(f"there is no combination with index {step_number}")
        return combination

    def _combination_index(self, combination: Combination, index: int, step_number: int) -> int:
        if not 0 <= index < len(combination):
            raise StructuralError(f"there is no piece with index {index} in combination {step_number}")
        return index

    def _place(self, player: str, combination: Combination) -> Step:
        step = self.history.append(player, combination)
        self.field.place(step, combination)
        logger.debug("step %d by %s: %s", step.number, player, combination)
        return step

    # Read side

    def state(self, player: str) -> StateResponse:
        if player not in self.hands:
            raise UnknownPlayerError(f"there is no player with id {player}")
        running = self.started and not self.finished
        return StateResponse(
            turn=running and self.current_player == player,
            hand=[TileView.of(t) for t in self.hands[player]],
            available_actions=self.stages[player].available_actions() if running else [],
            started=self.started,
            finished=self.finished,
            winner=self.winner,
            field={n: [TileView.of(t) for t in c.tiles] for n, c in self.field.items()},
            bank_size=len(self.bank),
        )

    def current_state(self, player: str) -> str:
        return self.state(player).to_json()

    def field_size(self) -> int:
        return len(self.field)

    def hand_size(self, player: str) -> int:
        if player not in self.hands:
            raise UnknownPlayerError(f"there is no player with id {player}")
        return len(self.hands[player])

    def bank_size(self) -> int:
        return len(self.bank)

    def stage_of(self, player: str) -> Stage:
        if player not in self.stages:
            raise UnknownPlayerError(f"there is no player with id {player}")
        return self.stages[player]

    def total_tiles(self) -> int:
        return len(self.bank) + sum(len(h) for h in self.hands.values()) + self.field.tile_count()


def parse_action_request(raw: RawRequest) -> ActionRequest:
    if isinstance(raw, ActionRequest):
        return raw
    try:
        if isinstance(raw, dict):
            return ActionRequest.model_validate(raw)
        return ActionRequest.model_validate_json(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "request"
        raise MalformedRequestError(
            f"malformed action request: {location}: {first['msg']} ({exc.error_count()} error(s))"
        ) from exc


def new_game(players: Sequence[str], ruleset: Optional[Ruleset] = None, rng_seed: Optional[int] = None) -> Game:
    ruleset = ruleset or Ruleset()
    players = list(players)
    if not ruleset.min_players <= len(players) <= ruleset.max_players:
        raise GameSetupError(f"must be between {ruleset.min_players} and {ruleset.max_players} players")
    if any(not p for p in players):
        raise GameSetupError("player ids must be non-empty")
    if len(set(players)) != len(players):
        raise GameSetupError("player ids must be unique")

    game = Game(players, ruleset, rng_seed=rng_seed)
    logger.info("new game: players=%s pack=%d", players, len(game.bank))
    return game
