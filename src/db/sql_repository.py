"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.core.exceptions import DuplicateGameError, WriteConflictError
from src.core.models import GameModel
from src.db.repository import Expected
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: str) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game under its (human chosen) ID."""
        if self._fetch_game(game.game_id) is not None:
            raise DuplicateGameError(f"Game ID {game.game_id!r} is already taken.")

        game_db = DBGame(
            id=game.game_id,
            board=game.board,
            turn=game.turn,
            status=game.status,
            players=game.players,
            moves=game.moves,
            winner=game.winner,
            forfeited_by=game.forfeited_by,
            turn_started_at=game.turn_started_at,
            chain_square=game.chain_square,
            revision=game.revision,
        )
        self.db.add(game_db)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # lost the race against another insert with the same ID
            self.db.rollback()
            raise DuplicateGameError(
                f"Game ID {game.game_id!r} is already taken."
            ) from exc
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def update_game(
        self, game_id: str, game: GameModel, expected: Expected
    ) -> GameModel | None:
        """
        Conditional update: the WHERE clause only matches while turn, status, and revision are what the writer saw.
        No matching row --> either the game does not exist (None) or somebody else wrote first (conflict).
        """
        turn_matches = (
            DBGame.turn.is_(None) if expected.turn is None else DBGame.turn == expected.turn
        )
        query = (
            update(DBGame)
            .where(
                DBGame.id == game_id,
                turn_matches,
                DBGame.status == expected.status,
                DBGame.revision == expected.revision,
            )
            .values(
                board=game.board,
                turn=game.turn,
                status=game.status,
                players=game.players,
                moves=game.moves,
                winner=game.winner,
                forfeited_by=game.forfeited_by,
                turn_started_at=game.turn_started_at,
                chain_square=game.chain_square,
                revision=expected.revision + 1,
            )
            .execution_options(synchronize_session="fetch")
        )
        result = self.db.execute(query)
        if result.rowcount == 0:
            self.db.rollback()
            if self._fetch_game(game_id) is None:
                return None
            logger.debug("Conflict on %s: expected %s", game_id, expected)
            raise WriteConflictError(f"Game {game_id} changed since it was last read.")

        self.db.commit()
        game_db = self._fetch_game(game_id)
        # for the type checker: the row was just updated
        assert game_db is not None
        return self._to_model(game_db)

    def delete_game(self, game_id: str) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: str) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            game_id=game_db.id,
            board=game_db.board,
            turn=game_db.turn,
            status=game_db.status,
            players=dict(game_db.players),
            moves=list(game_db.moves),
            winner=game_db.winner,
            forfeited_by=game_db.forfeited_by,
            turn_started_at=_as_utc(game_db.turn_started_at),
            chain_square=game_db.chain_square,
            revision=game_db.revision,
        )


def _as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes, even for timezone aware columns. Everything is stored in UTC."""
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=timezone.utc)
