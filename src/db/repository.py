"""Protocol repository (implemented in memory and with SQLAlchemy)"""

from dataclasses import dataclass
from typing import Optional, Protocol, Self

from src.core.models import GameModel


@dataclass(frozen=True)
class Expected:
    """
    What the writer last observed of the record.

    An update only goes through while the stored turn, status, and revision still match these values.
    """

    turn: Optional[str]
    status: str
    revision: int

    @classmethod
    def of(cls, model: GameModel) -> Self:
        return cls(turn=model.turn, status=model.status, revision=model.revision)

    def matches(self, model: GameModel) -> bool:
        return (
            model.turn == self.turn
            and model.status == self.status
            and model.revision == self.revision
        )


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: str) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game under its (human chosen) ID. Raises DuplicateGameError if the ID is taken."""
        ...

    def update_game(
        self, game_id: str, game: GameModel, expected: Expected
    ) -> GameModel | None:
        """
        Conditional update of an existing record. Returns None if there is no such record.
        Raises WriteConflictError if the stored record does not match `expected`.
        The stored revision is bumped by one.
        """
        ...

    def delete_game(self, game_id: str) -> GameModel | None:
        """Remove a game's record."""
        ...
