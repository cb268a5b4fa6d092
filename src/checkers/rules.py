"""
Applying a single ply to a board.

The board passed in is never changed: every accepted move produces a new Board.
"""

import logging

from src.checkers.board import Board
from src.checkers.moves import Move, generate_moves
from src.checkers.pieces import Piece
from src.checkers.square import Square
from src.core.exceptions import IllegalMoveError

logger = logging.getLogger(__name__)


def should_promote(piece: Piece, row: int) -> bool:
    """A man ending its move on the back rank of the opposing side gets crowned."""
    return row == piece.owner.crowning_row


def find_legal_move(board: Board, from_square: Square, to_square: Square) -> Move:
    """
    Look up the move (from, to) in the set of legal moves for the owner of the piece on `from_square`.

    Raises IllegalMoveError if
    1. there is no piece to move
    2. the destination is occupied
    3. the pair is not a legal move (this includes steps while a capture is available anywhere)
    """
    piece = board.piece(from_square) if from_square.is_inside() else None
    if piece is None:
        raise IllegalMoveError(f"No piece to move on {from_square.to_notation()}.")

    if not to_square.is_inside() or not board.is_empty(to_square):
        raise IllegalMoveError(
            f"Destination {to_square.to_notation()} is not an empty cell on the board."
        )

    for move in generate_moves(board, piece.owner):
        if move.from_square == from_square and move.to_square == to_square:
            return move

    raise IllegalMoveError(
        f"Move not allowed: {from_square.to_notation()} to {to_square.to_notation()}"
    )


def apply_move(board: Board, from_square: Square, to_square: Square) -> Board:
    """
    Validate and apply exactly one ply.
    -----

    1. find the move in the legal set (raises IllegalMoveError otherwise)
    2. relocate the piece on a copy of the board
    3. a jump removes the piece in between
    4. promotion: crowned when landing on the opposing back rank

    Jumps are NOT chained here. Whether the side gets to continue is up to the Game.
    """
    move = find_legal_move(board, from_square, to_square)
    return play(board, move)


def play(board: Board, move: Move) -> Board:
    """Apply an already validated move to a copy of the board."""
    new_board = board.clone()
    piece = new_board.piece(move.from_square)
    # for the type checker: legal moves always start on an occupied cell
    assert piece is not None

    new_board.remove_piece(move.from_square)
    if move.captured is not None:
        new_board.remove_piece(move.captured)

    if should_promote(piece, move.to_square.row):
        piece = piece.crowned()
    new_board.place_piece(piece, move.to_square)

    logger.debug("Played %s", move.to_notation())
    return new_board


def is_promotion(board: Board, move: Move) -> bool:
    """Does this move crown a man? (a king reaching the back rank stays the same piece)"""
    piece = board.piece(move.from_square)
    return (
        piece is not None
        and not piece.is_king
        and should_promote(piece, move.to_square.row)
    )
