"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    ForfeitRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    JoinGameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    TimeoutRequest,
)
from src.checkers.clock import TurnClock
from src.checkers.game import Game
from src.checkers.square import Square
from src.config import Config
from src.core.exceptions import GameNotFoundError, WriteConflictError
from src.core.models import GameModel
from src.core.shared_types import Seat, Side
from src.db.repository import Expected, GameRepository
from src.services.channel import GameChannel

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckersService:
    """
    Orchestration of layers for a checkers game.

    Every operation follows the same steps: read the record, let the Game apply the rules,
    write the result conditionally on what was read, and push the new record to the viewers.
    A rejected operation writes nothing.
    """

    def __init__(
        self,
        repository: GameRepository,
        channel: Optional[GameChannel] = None,
        clock: Optional[TurnClock] = None,
        chain_jumps: bool = Config.CHAIN_JUMPS,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repo = repository
        self.channel = channel
        self.clock = clock or TurnClock(
            turn_seconds=Config.TURN_DURATION_SEC, tick_seconds=Config.CLOCK_TICK_SEC
        )
        self.chain_jumps = chain_jumps
        self.now = now

    # -- API routes logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """First player creates a game under an ID of their choice (and takes the Red seat)."""
        new_game = Game.new_game(
            game_id=request.game_id,
            player=request.player_name,
            clock=self.clock,
            chain_jumps=self.chain_jumps,
        )
        stored_game = self.repo.create_game(new_game.to_model())
        logger.info("Game %s created by %s", request.game_id, request.player_name)
        return self._create_game_response(stored_game)

    def join_game(self, request: JoinGameRequest) -> JoinGameResponse:
        """
        A player connects to a game.
        ----
        Seat assignment: first Red, then Black, everyone else watches as a spectator.
        Only a newly claimed seat gets written.
        """
        stored_model = self._fetch_game(request.game_id)
        game = self._load(stored_model)

        seat = game.claim_seat(request.player_name, self.now())

        after_join = game.to_model()
        if after_join != stored_model:
            after_join = self._store(request.game_id, stored_model, after_join)
            logger.info(
                "%s took the %s seat of game %s",
                request.player_name,
                seat.to_name() if seat else None,
                request.game_id,
            )

        return JoinGameResponse(
            seat=Seat(seat.to_name()) if seat else Seat.SPECTATOR,
            game=self._create_game_response(after_join),
        )

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used by viewers to catch up when they missed a pushed update, or after reconnecting.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves."""
        stored_model = self._fetch_game(request.game_id)
        game = self._load(stored_model)

        legal_moves = game.legal_moves(request.player_name)
        side = game.seat_of(request.player_name)
        # for the type checker: legal_moves already rejected spectators
        assert side is not None
        return LegalMovesResponse(
            game_id=request.game_id,
            player_name=request.player_name,
            side=Side(side.to_name()),
            legal_moves=[move.to_notation() for move in legal_moves],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        stored_model = self._fetch_game(request.game_id)
        game = self._load(stored_model)

        game.make_move(
            from_square=Square.from_notation(request.from_square),
            to_square=Square.from_notation(request.to_square),
            player=request.player_name,
            now=self.now(),
        )

        after_move = self._store(request.game_id, stored_model, game.to_model())
        logger.info(
            "Game %s: %s played %s (status: %s)",
            request.game_id,
            request.player_name,
            after_move.moves[-1],
            after_move.status,
        )
        return self._create_game_response(after_move)

    def timeout(self, request: TimeoutRequest) -> GameResponse:
        """
        The turn budget ran out: skip the turn holder.
        ----
        Several viewers may report the same timeout. The first write wins, the others get a WriteConflictError.
        """
        stored_model = self._fetch_game(request.game_id)
        game = self._load(stored_model)

        game.skip_turn(request.player_name, self.now())

        after_skip = self._store(request.game_id, stored_model, game.to_model())
        logger.info(
            "Game %s: turn timed out, %s to move", request.game_id, after_skip.turn
        )
        return self._create_game_response(after_skip)

    def forfeit(self, request: ForfeitRequest) -> GameResponse:
        """A seated player gives up."""
        stored_model = self._fetch_game(request.game_id)
        game = self._load(stored_model)

        game.forfeit(request.player_name)

        after_forfeit = self._store(request.game_id, stored_model, game.to_model())
        logger.info("Game %s forfeited by %s", request.game_id, request.player_name)
        return self._create_game_response(after_forfeit)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _load(self, model: GameModel) -> Game:
        return Game.from_model(model, clock=self.clock, chain_jumps=self.chain_jumps)

    def _store(self, game_id: str, before: GameModel, after: GameModel) -> GameModel:
        """
        Conditional write of the new state, followed by a push to everyone watching.
        ----
        Conflict? Re-read the record and hand it to the caller together with the error, the stale copy is discarded.
        """
        try:
            stored = self.repo.update_game(game_id, after, Expected.of(before))
        except WriteConflictError as exc:
            latest = self.repo.get_game(game_id)
            logger.warning("Write conflict on game %s, re-read the record", game_id)
            raise WriteConflictError(
                str(exc),
                latest=self._create_game_response(latest) if latest else None,
            ) from exc

        if stored is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")

        self._publish(stored)
        return stored

    def _publish(self, model: GameModel) -> None:
        if self.channel is not None:
            self.channel.publish(model.game_id, self._create_game_response(model))

    def _create_game_response(self, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse."""
        game = self._load(model)
        return GameResponse(
            game_id=model.game_id,
            players=model.players,
            board=model.board,
            turn=model.turn,
            status=model.status,
            winner=model.winner,
            forfeited_by=model.forfeited_by,
            turn_started_at=model.turn_started_at,
            remaining_seconds=game.remaining_seconds(self.now()),
            chain_square=model.chain_square,
            move_history=model.moves,
            revision=model.revision,
        )

    def _fetch_game(self, game_id: str) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model
