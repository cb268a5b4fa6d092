"""Checks for the end of the game"""

from typing import Optional

from src.checkers.board import Board
from src.checkers.moves import has_legal_move
from src.checkers.pieces import Side


def has_lost(board: Board, side: Side) -> bool:
    """No pieces left, or pieces but nothing to move."""
    if not board.locate_side(side):
        return True
    return not has_legal_move(board, side)


def evaluate_winner(board: Board, last_mover: Optional[Side] = None) -> Optional[Side]:
    """
    The winner of the position, if there is one.
    ---

    * exactly one side lost --> the other side wins
    * nobody lost --> None

    Both sides stuck at the same time: the side that just moved wins, since the opponent is to move and cannot.
    Without knowing who moved last, Red is checked first and Black is declared the winner.
    """
    red_lost = has_lost(board, Side.RED)
    black_lost = has_lost(board, Side.BLACK)

    if red_lost and black_lost:
        return last_mover if last_mover is not None else Side.BLACK
    if red_lost:
        return Side.BLACK
    if black_lost:
        return Side.RED
    return None
