"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.checkers.board import Board
from src.checkers.pieces import Piece
from src.checkers.square import Square
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def board_with() -> Callable[[dict[str, str]], Board]:
    """
    Call the inner function with a mapping of square notation to piece character.
    ex. {"21": "r", "32": "B"} --> red man on row 2 column 1, black king on row 3 column 2, rest empty.
    """

    def _create_board(pieces: dict[str, str]) -> Board:
        board = Board.empty()
        for notation, character in pieces.items():
            board.place_piece(Piece.from_char(character), Square.from_notation(notation))
        return board

    return _create_board


class FakeNow:
    """Stand-in for the wall clock. Time only moves when a test says so."""

    def __init__(self, start: datetime) -> None:
        self.moment = start

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, seconds: float) -> None:
        self.moment += timedelta(seconds=seconds)


@pytest.fixture
def fake_now() -> FakeNow:
    return FakeNow(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))
