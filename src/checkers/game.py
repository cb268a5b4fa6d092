"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn -->
who holds the turn, when a turn expires, forfeits, and when the game is over.
The service layer then persists the result and pushes it to the viewers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.clock import TurnClock
from src.checkers.moves import Move, generate_moves, jump_moves
from src.checkers.outcome import evaluate_winner
from src.checkers.pieces import Side
from src.checkers.rules import find_legal_move, is_promotion, play
from src.checkers.square import Square
from src.core.exceptions import (
    GameNotActiveError,
    GameStateError,
    IllegalMoveError,
    NotAPlayerError,
    NotYourTurnError,
    TurnNotExpiredError,
)
from src.core.models import GameModel


class Status(Enum):
    WAITING = auto()
    ACTIVE = auto()
    WON = auto()
    FORFEITED = auto()


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    game_id: str
    board: Board
    turn: Optional[Side]
    status: Status
    players: dict[Side, str]
    moves: list[Move]
    winner: Optional[Side] = None
    forfeited_by: Optional[Side] = None
    turn_started_at: Optional[datetime] = None
    # Only used when jumps are chained: the square of the piece that must continue jumping.
    chain_square: Optional[Square] = None
    revision: int = 0
    clock: TurnClock = field(default_factory=TurnClock)
    chain_jumps: bool = False

    @classmethod
    def from_model(
        cls,
        model: GameModel,
        clock: Optional[TurnClock] = None,
        chain_jumps: bool = False,
    ) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        status_name = model.status.upper()
        if status_name not in Status.__members__:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.name.lower() for status in Status])}"
            )

        # create the Game
        return cls(
            game_id=model.game_id,
            board=Board.from_layout(model.board),
            turn=Side.from_name(model.turn) if model.turn else None,
            status=Status[status_name],
            players={
                Side.from_name(side_name): player
                for side_name, player in model.players.items()
            },
            moves=[Move.from_notation(notation) for notation in model.moves],
            winner=Side.from_name(model.winner) if model.winner else None,
            forfeited_by=(
                Side.from_name(model.forfeited_by) if model.forfeited_by else None
            ),
            turn_started_at=model.turn_started_at,
            chain_square=(
                Square.from_notation(model.chain_square) if model.chain_square else None
            ),
            revision=model.revision,
            clock=clock or TurnClock(),
            chain_jumps=chain_jumps,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            game_id=self.game_id,
            board=self.board.to_layout(),
            turn=self.turn.to_name() if self.turn else None,
            status=self.status.name.lower(),
            players={side.to_name(): player for side, player in self.players.items()},
            moves=[move.to_notation() for move in self.moves],
            winner=self.winner.to_name() if self.winner else None,
            forfeited_by=self.forfeited_by.to_name() if self.forfeited_by else None,
            turn_started_at=self.turn_started_at,
            chain_square=self.chain_square.to_notation() if self.chain_square else None,
            revision=self.revision,
        )

    @classmethod
    def new_game(
        cls,
        game_id: str,
        player: str,
        clock: Optional[TurnClock] = None,
        chain_jumps: bool = False,
    ) -> Self:
        """The creator takes the Red seat. Red always moves first, but the clock only starts once Black joins."""
        return cls(
            game_id=game_id,
            board=Board.starting(),
            turn=Side.RED,
            status=Status.WAITING,
            players={Side.RED: player},
            moves=[],
            clock=clock or TurnClock(),
            chain_jumps=chain_jumps,
        )

    @property
    def winner_player(self) -> Optional[str]:
        """Who won: the winner of the position, or the opponent of whoever forfeited."""
        if self.status == Status.WON and self.winner:
            return self.players.get(self.winner)
        if self.status == Status.FORFEITED and self.forfeited_by:
            return self.players.get(self.forfeited_by.opponent)
        return None

    @property
    def loser_player(self) -> Optional[str]:
        if self.status == Status.WON and self.winner:
            return self.players.get(self.winner.opponent)
        if self.status == Status.FORFEITED and self.forfeited_by:
            return self.players.get(self.forfeited_by)
        return None

    def seat_of(self, player: str) -> Optional[Side]:
        """The side the player is seated at. None for spectators."""
        return next(
            (side for side, name in self.players.items() if name == player), None
        )

    def claim_seat(self, player: str, now: datetime) -> Optional[Side]:
        """
        Seat assignment for a connecting identity
        ----

        1. Already seated? Keep your seat.
        2. Red seat empty? Take it.
        3. Black seat empty (and you're not the Red occupant)? Take it.
        4. Otherwise you are a spectator (None)

        The game starts the instant the second seat gets filled.
        """
        seat = self.seat_of(player)
        if seat is not None:
            return seat

        if self.status != Status.WAITING:
            return None

        for side in (Side.RED, Side.BLACK):
            if side not in self.players:
                self.players[side] = player
                seat = side
                break

        if len(self.players) == len(Side):
            self._start(now)
        return seat

    def legal_moves(self, player: str) -> list[Move]:
        """
        Service will request the set of legal moves.
        ----

        1. Check the game is active and it is your turn
        2. Generate legal moves (restricted to the jumping piece while a chain is in progress)
        """
        self._assert_active()
        self._assert_your_turn(player)
        return self._generate_legal_moves()

    def make_move(
        self, from_square: Square, to_square: Square, player: str, now: datetime
    ) -> None:
        """
        Attempt to make a move
        -----

        1. game must be active, you must be seated and hold the turn
        2. the move must be legal (mandatory capture included)
        3. update the board and the move history
        4. chained jumps: keep the turn if the jumping piece can capture again
        5. otherwise: check for a winner, or pass the turn to the opponent

        Nothing gets changed when any of the checks fail.
        """
        self._assert_active()
        side = self._assert_your_turn(player)

        move = self._find_move(side, from_square, to_square)
        promoted = is_promotion(self.board, move)

        self.board = play(self.board, move)
        self.moves.append(move)

        if self._continues_chain(move, promoted):
            self.chain_square = move.to_square
            self.turn_started_at = now
            return

        self.chain_square = None
        winner = evaluate_winner(self.board, last_mover=side)
        if winner is not None:
            self._finish(Status.WON)
            self.winner = winner
            return

        self._pass_turn(now)

    def skip_turn(self, player: str, now: datetime) -> None:
        """
        Timeout: the turn holder let the turn budget run out.

        Any seated player may report it, once the budget is spent. The board stays as it is, so no check for a winner either.
        """
        self._assert_active()
        self._assert_seated(player)
        if not self.clock.is_expired(self.turn_started_at, now):
            raise TurnNotExpiredError(
                f"Turn has {self.remaining_seconds(now):.0f} seconds left."
            )
        self.chain_square = None
        self._pass_turn(now)

    def forfeit(self, player: str) -> None:
        """Either side may give up at any time while the game is active."""
        self._assert_active()
        side = self._assert_seated(player)
        self._finish(Status.FORFEITED)
        self.forfeited_by = side

    def remaining_seconds(self, now: datetime) -> float:
        if self.status != Status.ACTIVE:
            return 0.0
        return self.clock.remaining(self.turn_started_at, now)

    # -- PRIVATE HELPERS ---
    def _start(self, now: datetime) -> None:
        self.status = Status.ACTIVE
        self.turn = self.turn or Side.RED
        self.turn_started_at = now

    def _finish(self, status: Status) -> None:
        self.status = status
        self.turn = None
        self.chain_square = None

    def _pass_turn(self, now: datetime) -> None:
        # for the type checker: only called while the game is active
        assert self.turn is not None
        self.turn = self.turn.opponent
        self.turn_started_at = now

    def _assert_active(self) -> None:
        if self.status != Status.ACTIVE:
            raise GameNotActiveError(
                f"Game is not active. status: {self.status.name.lower()}"
            )

    def _assert_seated(self, player: str) -> Side:
        side = self.seat_of(player)
        if side is None:
            raise NotAPlayerError(f"{player} is not seated in game {self.game_id}.")
        return side

    def _assert_your_turn(self, player: str) -> Side:
        """You must wait for your turn before calculating legal moves / making a move."""
        side = self._assert_seated(player)
        if side != self.turn:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.players.get(self.turn) if self.turn else None} to make a move first."
            )
        return side

    def _generate_legal_moves(self) -> list[Move]:
        # for the type checker: only called while the game is active
        assert self.turn is not None
        if self.chain_square is not None:
            return jump_moves(self.chain_square, self.board)
        return generate_moves(self.board, self.turn)

    def _find_move(self, side: Side, from_square: Square, to_square: Square) -> Move:
        piece = self.board.piece(from_square) if from_square.is_inside() else None
        if piece is not None and piece.owner != side:
            raise IllegalMoveError(
                f"The piece on {from_square.to_notation()} belongs to your opponent."
            )

        if self.chain_square is None:
            return find_legal_move(self.board, from_square, to_square)

        for move in jump_moves(self.chain_square, self.board):
            if move.from_square == from_square and move.to_square == to_square:
                return move
        raise IllegalMoveError(
            f"Must continue jumping with the piece on {self.chain_square.to_notation()}."
        )

    def _continues_chain(self, move: Move, promoted: bool) -> bool:
        """A jump that did not crown the piece continues while the same piece can capture again."""
        if not (self.chain_jumps and move.is_jump) or promoted:
            return False
        return len(jump_moves(move.to_square, self.board)) > 0
