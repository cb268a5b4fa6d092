"""
A connected client watching (and possibly playing) one game.

Each viewer keeps its own copy of the latest record, pushed by the channel, and runs its own turn countdown.
When the viewer's own side holds the turn and the countdown hits zero, the viewer reports the timeout itself:
there is no central scheduler. The write is conditional, so viewers racing to report the same timeout end up with one outcome.
"""

import logging
from datetime import datetime
from threading import Event
from typing import Callable, Optional

from src.api.models import (
    ForfeitRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    MoveRequest,
    TimeoutRequest,
)
from src.checkers.board import Board
from src.checkers.clock import TurnClock
from src.checkers.square import Square
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    NotAPlayerError,
    NotYourTurnError,
    TurnNotExpiredError,
    WriteConflictError,
)
from src.core.shared_types import Seat, Status
from src.services.channel import GameChannel, Unsubscribe
from src.services.checkers_service import CheckersService, utc_now

logger = logging.getLogger(__name__)


class GameViewer:
    def __init__(
        self,
        service: CheckersService,
        channel: GameChannel,
        game_id: str,
        player_name: str,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.service = service
        self.channel = channel
        self.game_id = game_id
        self.player_name = player_name
        self.now = now

        self.seat: Seat = Seat.SPECTATOR
        self.state: Optional[GameResponse] = None
        self.selected: Optional[Square] = None
        self.remaining_seconds: float = 0.0
        self.last_error: Optional[str] = None
        self._unsubscribe: Optional[Unsubscribe] = None
        # revision for which this viewer already reported a timeout
        self._timeout_reported: Optional[int] = None

    @property
    def clock(self) -> TurnClock:
        return self.service.clock

    @property
    def is_connected(self) -> bool:
        return self._unsubscribe is not None

    @property
    def is_my_turn(self) -> bool:
        if self.state is None or self.seat == Seat.SPECTATOR:
            return False
        return self.state.status == Status.ACTIVE and self.state.turn == self.seat.value

    # -- connection --
    def connect(self) -> Seat:
        """Claim a seat (or watch as spectator) and start listening for updates."""
        response = self.service.join_game(
            JoinGameRequest(game_id=self.game_id, player_name=self.player_name)
        )
        self.seat = response.seat
        self._adopt(response.game)
        if self._unsubscribe is None:
            self._unsubscribe = self.channel.subscribe(self.game_id, self.on_update)
        return self.seat

    def disconnect(self) -> None:
        """Stop listening. Nothing happens server-side: the countdown just isn't observed by this viewer anymore."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.selected = None

    def refresh(self) -> GameResponse:
        """Re-read the authoritative record (after a missed update, for instance)."""
        response = self.service.get_game_state(GetGameRequest(game_id=self.game_id))
        self._adopt(response)
        return response

    def on_update(self, game: GameResponse) -> None:
        """Pushed by the channel after every write."""
        self._adopt(game)

    # -- turn clock --
    def tick(self) -> float:
        """
        Recompute the countdown of the turn holder.

        Reaching zero while holding the turn yourself --> report the timeout (once per observed record).
        """
        if self.state is None or self.state.status != Status.ACTIVE:
            self.remaining_seconds = 0.0
            return self.remaining_seconds

        now = self.now()
        self.remaining_seconds = self.clock.remaining(self.state.turn_started_at, now)
        if (
            self.is_my_turn
            and self.clock.is_expired(self.state.turn_started_at, now)
            and self._timeout_reported != self.state.revision
        ):
            self._report_timeout()
        return self.remaining_seconds

    def watch(self, stop: Event) -> None:
        """Tick on a fixed interval while the game is active, until `stop` is set."""
        while not stop.is_set():
            self.tick()
            if self.state is not None and self.state.status in (
                Status.WON,
                Status.FORFEITED,
            ):
                break
            stop.wait(self.clock.tick_seconds)

    # -- player input --
    def click(self, square: Square) -> Optional[GameResponse]:
        """
        Select one of your pieces, then click the destination.

        A rejected move clears the selection: the player has to choose again.
        """
        if self.state is None or not self.is_my_turn:
            return None

        if self.selected is None:
            piece = self._board().piece(square)
            if piece is not None and piece.owner.to_name() == self.seat.value:
                self.selected = square
            return None

        from_square, self.selected = self.selected, None
        return self.submit_move(from_square, square)

    def submit_move(
        self, from_square: Square, to_square: Square
    ) -> Optional[GameResponse]:
        request = MoveRequest(
            game_id=self.game_id,
            player_name=self.player_name,
            from_square=from_square.to_notation(),
            to_square=to_square.to_notation(),
        )
        try:
            response = self.service.make_move(request)
        except (
            IllegalMoveError,
            NotYourTurnError,
            NotAPlayerError,
            GameStateError,
        ) as exc:
            self.selected = None
            self.last_error = str(exc)
            logger.info("Move rejected for %s: %s", self.player_name, exc)
            return None
        except WriteConflictError as exc:
            self.selected = None
            self.last_error = str(exc)
            self._adopt_latest(exc)
            return None

        self.last_error = None
        self._adopt(response)
        return response

    def forfeit(self) -> GameResponse:
        response = self.service.forfeit(
            ForfeitRequest(game_id=self.game_id, player_name=self.player_name)
        )
        self._adopt(response)
        return response

    # -- internal helpers --
    def _report_timeout(self) -> None:
        # for the type checker: only called with a record
        assert self.state is not None
        self._timeout_reported = self.state.revision
        try:
            response = self.service.timeout(
                TimeoutRequest(game_id=self.game_id, player_name=self.player_name)
            )
        except WriteConflictError as exc:
            # someone else changed the record first (another viewer reporting the same timeout, or a move)
            self._adopt_latest(exc)
            return
        except TurnNotExpiredError as exc:
            # our clock runs ahead of the server's: report again on a later tick
            logger.info("Timeout not yet due for game %s: %s", self.game_id, exc)
            self._timeout_reported = None
            self.refresh()
            return
        except GameStateError as exc:
            # our view was stale (game already over): take the record as it is now
            logger.info("Timeout not applied for game %s: %s", self.game_id, exc)
            self.refresh()
            return
        self._adopt(response)

    def _adopt_latest(self, exc: WriteConflictError) -> None:
        if isinstance(exc.latest, GameResponse):
            self._adopt(exc.latest)
        else:
            self.refresh()

    def _adopt(self, game: GameResponse) -> None:
        """Only ever move forward: an update older than what we have is dropped."""
        if self.state is not None and game.revision < self.state.revision:
            return
        if self.state is None or game.revision != self.state.revision:
            self.selected = None
        self.state = game
        self.remaining_seconds = (
            self.clock.remaining(game.turn_started_at, self.now())
            if game.status == Status.ACTIVE
            else 0.0
        )

    def _board(self) -> Board:
        # for the type checker: only called with a record
        assert self.state is not None
        return Board.from_layout(self.state.board)
