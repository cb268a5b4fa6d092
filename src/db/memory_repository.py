"""Implementation of (Game)Repository keeping the records in a dictionary"""

import logging
from dataclasses import replace
from threading import Lock

from src.core.exceptions import DuplicateGameError, WriteConflictError
from src.core.models import GameModel
from src.db.repository import Expected

logger = logging.getLogger(__name__)


class InMemoryGameRepository:
    """Records live as long as the process. Handy for tests and for running a single server."""

    def __init__(self) -> None:
        self._games: dict[str, GameModel] = {}
        self._lock = Lock()

    def get_game(self, game_id: str) -> GameModel | None:
        """Get game by ID, if record exists."""
        game = self._games.get(game_id)
        return self._copy(game) if game else None

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game under its (human chosen) ID."""
        with self._lock:
            if game.game_id in self._games:
                raise DuplicateGameError(f"Game ID {game.game_id!r} is already taken.")
            self._games[game.game_id] = self._copy(game)
        return self._copy(game)

    def update_game(
        self, game_id: str, game: GameModel, expected: Expected
    ) -> GameModel | None:
        """Compare-and-swap on turn, status, and revision."""
        with self._lock:
            stored = self._games.get(game_id)
            if stored is None:
                return None
            if not expected.matches(stored):
                logger.debug(
                    "Conflict on %s: expected %s, stored revision %s",
                    game_id,
                    expected,
                    stored.revision,
                )
                raise WriteConflictError(
                    f"Game {game_id} changed since it was last read."
                )
            updated = replace(self._copy(game), revision=stored.revision + 1)
            self._games[game_id] = updated
        return self._copy(updated)

    def delete_game(self, game_id: str) -> GameModel | None:
        """Remove a game's record. The removed record is handed back (no longer stored, so no copy needed)."""
        with self._lock:
            return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        with self._lock:
            self._games.clear()

    @staticmethod
    def _copy(game: GameModel) -> GameModel:
        """Callers never get a reference to the stored record itself."""
        return replace(game, players=dict(game.players), moves=list(game.moves))
