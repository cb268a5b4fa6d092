"""Unit tests for /src/checkers/board.py"""

from typing import Callable

from src.checkers.board import Board
from src.checkers.pieces import Piece, Side
from src.checkers.square import Square

STARTING_LAYOUT = ".b.b.b.b/b.b.b.b./.b.b.b.b/......../......../r.r.r.r./.r.r.r.r/r.r.r.r."

BoardFactory = Callable[[dict[str, str]], Board]


def test_starting_board() -> None:
    board = Board.starting()
    assert board.to_layout() == STARTING_LAYOUT
    assert board.count_pieces() == {Side.RED: 12, Side.BLACK: 12}


def test_from_layout_roundtrip() -> None:
    assert Board.from_layout(STARTING_LAYOUT).to_layout() == STARTING_LAYOUT


def test_empty_board() -> None:
    board = Board.empty()
    assert board.count_pieces() == {Side.RED: 0, Side.BLACK: 0}
    assert board.is_empty(Square(3, 3))


def test_place_and_remove_piece() -> None:
    board = Board.empty()
    square = Square(4, 3)
    board.place_piece(Piece(Side.BLACK, is_king=True), square)
    assert board.piece(square) == Piece(Side.BLACK, is_king=True)
    assert not board.is_empty(square)

    board.remove_piece(square)
    assert board.piece(square) is None


def test_clone_shares_no_rows() -> None:
    """Changing the clone must leave the original untouched"""
    board = Board.starting()
    clone = board.clone()
    assert clone == board
    assert all(
        clone_row is not row for clone_row, row in zip(clone.grid, board.grid)
    )

    clone.remove_piece(Square(5, 0))
    assert board.piece(Square(5, 0)) == Piece(Side.RED)
    assert clone != board


def test_locate_side(board_with: BoardFactory) -> None:
    board = board_with({"21": "r", "32": "B", "76": "R"})
    assert set(board.locate_side(Side.RED)) == {Square(2, 1), Square(7, 6)}
    assert board.locate_side(Side.BLACK) == [Square(3, 2)]


def test_is_inside() -> None:
    board = Board.empty()
    assert board.is_inside(0, 0)
    assert board.is_inside(7, 7)
    assert not board.is_inside(8, 0)
    assert not board.is_inside(0, -1)
