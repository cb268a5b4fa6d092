"""
Custom exceptions used across layers.

Every exception derives from GameError, so the API layer can catch a single type and
let the specific subclasses decide on the response.
"""

from typing import Any, Optional


class GameError(Exception):
    """Top-level exception for anything that goes wrong while playing a game."""


# --- RULES / STATE MACHINE ---
class IllegalMoveError(GameError):
    """The requested move is not in the set of legal moves."""


class NotYourTurnError(GameError):
    """The player attempted to move (or time out) while it is the opponent's turn."""


class NotAPlayerError(GameError):
    """Spectators have no write privileges over moves, timeouts, or forfeits."""


class GameStateError(GameError):
    """The game is not in a state that allows the requested operation."""


class GameNotActiveError(GameStateError):
    """Moves, timeouts, and forfeits are only processed while the game is active."""


class TurnNotExpiredError(GameStateError):
    """A timeout was requested before the turn budget ran out."""


class InvalidLayoutError(GameError):
    """The text encoding of a board could not be parsed."""


# --- PERSISTENCE ---
class RepositoryError(GameError):
    """Something went wrong reading from / writing to the record store."""


class GameNotFoundError(RepositoryError):
    """No record exists for the given game ID. Never retried."""


class DuplicateGameError(RepositoryError):
    """A record with the chosen game ID already exists."""


class WriteConflictError(RepositoryError):
    """
    The stored record no longer matches the state the writer last observed.

    The service attaches the freshly re-read record as `latest`, so the caller can discard
    the stale copy and resubmit against the current state.
    """

    def __init__(self, message: str, latest: Optional[Any] = None) -> None:
        super().__init__(message)
        self.latest = latest


# --- BOUNDARY ---
class InvalidRequestError(GameError):
    """Request data failed validation."""
