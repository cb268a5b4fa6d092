"""Unit tests for /src/checkers/rules.py"""

from typing import Callable

import pytest

from src.checkers.board import Board
from src.checkers.moves import Move, generate_moves
from src.checkers.pieces import Piece, Side
from src.checkers.rules import apply_move, find_legal_move, is_promotion, should_promote
from src.checkers.square import Square
from src.core.exceptions import IllegalMoveError

BoardFactory = Callable[[dict[str, str]], Board]


def sq(notation: str) -> Square:
    return Square.from_notation(notation)


# -- ACCEPTED MOVES --
def test_step_relocates_piece() -> None:
    board = Board.starting()
    new_board = apply_move(board, sq("52"), sq("43"))
    assert new_board.piece(sq("52")) is None
    assert new_board.piece(sq("43")) == Piece(Side.RED)
    assert new_board.count_pieces() == {Side.RED: 12, Side.BLACK: 12}


def test_input_board_is_not_changed() -> None:
    board = Board.starting()
    before = board.to_layout()
    _ = apply_move(board, sq("52"), sq("43"))
    assert board.to_layout() == before


def test_jump_removes_captured_piece(board_with: BoardFactory) -> None:
    board = board_with({"52": "r", "43": "b", "07": "b"})
    new_board = apply_move(board, sq("52"), sq("34"))
    assert new_board.piece(sq("34")) == Piece(Side.RED)
    assert new_board.piece(sq("43")) is None
    assert new_board.piece(sq("52")) is None
    assert new_board.count_pieces() == {Side.RED: 1, Side.BLACK: 1}


def test_jump_is_a_single_ply(board_with: BoardFactory) -> None:
    """A king that could keep capturing stops after one jump."""
    board = board_with({"52": "R", "43": "b", "25": "b"})
    new_board = apply_move(board, sq("52"), sq("34"))
    assert new_board.piece(sq("34")) == Piece(Side.RED, is_king=True)
    assert new_board.piece(sq("25")) == Piece(Side.BLACK)


# -- PROMOTION --
def test_red_man_reaching_row_zero_is_crowned(board_with: BoardFactory) -> None:
    board = board_with({"12": "r"})
    new_board = apply_move(board, sq("12"), sq("01"))
    assert new_board.piece(sq("01")) == Piece(Side.RED, is_king=True)


def test_black_man_reaching_last_row_is_crowned(board_with: BoardFactory) -> None:
    """Black man on (6,1) steps onto (7,0) and is king-ranked on arrival."""
    board = board_with({"61": "b"})
    new_board = apply_move(board, sq("61"), sq("70"))
    assert new_board.piece(sq("70")) == Piece(Side.BLACK, is_king=True)


def test_crowned_by_jump(board_with: BoardFactory) -> None:
    board = board_with({"52": "b", "63": "r"})
    new_board = apply_move(board, sq("52"), sq("74"))
    assert new_board.piece(sq("74")) == Piece(Side.BLACK, is_king=True)
    assert new_board.piece(sq("63")) is None


def test_king_stays_king(board_with: BoardFactory) -> None:
    """Promotion is monotonic: a king moving away from (or back onto) the back rank remains a king."""
    board = board_with({"12": "R"})
    board = apply_move(board, sq("12"), sq("01"))
    assert board.piece(sq("01")) == Piece(Side.RED, is_king=True)
    board = apply_move(board, sq("01"), sq("12"))
    assert board.piece(sq("12")) == Piece(Side.RED, is_king=True)
    board = apply_move(board, sq("12"), sq("23"))
    assert board.piece(sq("23")) == Piece(Side.RED, is_king=True)


def test_own_back_rank_does_not_crown(board_with: BoardFactory) -> None:
    board = board_with({"12": "b"})
    assert not should_promote(Piece(Side.BLACK), 0)
    new_board = apply_move(board, sq("12"), sq("23"))
    assert new_board.piece(sq("23")) == Piece(Side.BLACK)


def test_is_promotion(board_with: BoardFactory) -> None:
    board = board_with({"12": "r", "16": "R"})
    assert is_promotion(board, Move(sq("12"), sq("01")))
    assert not is_promotion(board, Move(sq("16"), sq("05")))
    assert not is_promotion(board, Move(sq("12"), sq("23")))


# -- REJECTIONS --
def test_reject_no_piece() -> None:
    with pytest.raises(IllegalMoveError):
        _ = apply_move(Board.starting(), sq("43"), sq("34"))


def test_reject_occupied_destination() -> None:
    with pytest.raises(IllegalMoveError):
        _ = apply_move(Board.starting(), sq("61"), sq("52"))


def test_reject_backwards_man(board_with: BoardFactory) -> None:
    board = board_with({"43": "r"})
    with pytest.raises(IllegalMoveError):
        _ = apply_move(board, sq("43"), sq("54"))


def test_reject_step_while_capture_available(board_with: BoardFactory) -> None:
    """The step is geometrically fine, but another piece has a capture: mandatory capture."""
    board = board_with({"52": "r", "43": "b", "76": "r"})
    with pytest.raises(IllegalMoveError):
        _ = apply_move(board, sq("76"), sq("65"))


@pytest.mark.parametrize(
    "from_notation, to_notation",
    [("52", "52"), ("52", "30"), ("52", "34"), ("41", "30"), ("50", "61")],
)
def test_reject_pairs_not_in_legal_moves(from_notation: str, to_notation: str) -> None:
    board = Board.starting()
    legal = {
        (move.from_square, move.to_square) for move in generate_moves(board, Side.RED)
    }
    assert (sq(from_notation), sq(to_notation)) not in legal
    with pytest.raises(IllegalMoveError):
        _ = apply_move(board, sq(from_notation), sq(to_notation))


def test_reject_off_board_squares() -> None:
    with pytest.raises(IllegalMoveError):
        _ = find_legal_move(Board.starting(), Square(-1, 0), sq("41"))
    with pytest.raises(IllegalMoveError):
        _ = find_legal_move(Board.starting(), sq("50"), Square(4, -1))
