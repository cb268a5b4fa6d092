"""
Geometry/Base movement and capturing rules

Key idea: every piece looks along its diagonals. A man only along the two forward ones, a king along all four.
A step lands on the adjacent diagonal cell, a jump hops over an opposing piece onto the cell right behind it.

Mandatory capture is applied on the combined list of the side's moves: as soon as one jump exists anywhere on the board,
steps are no longer legal for any piece of that side.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Self

from src.checkers.pieces import Piece, Side
from src.checkers.square import Square

Vector = tuple[int, int]

KING_DIRECTIONS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]

STEP_SEPARATOR = "-"
JUMP_SEPARATOR = "x"


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def locate_side(self, side: Side) -> list[Square]: ...


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made. A move with a captured square is a jump."""

    from_square: Square
    to_square: Square
    captured: Optional[Square] = None

    @property
    def is_jump(self) -> bool:
        return self.captured is not None

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """
        examples:
        * "52-43": the piece on row 5, column 2 steps to row 4, column 3
        * "21x43": the piece on row 2, column 1 jumps to row 4, column 3, capturing the piece on 32
        """
        separator = JUMP_SEPARATOR if JUMP_SEPARATOR in notation else STEP_SEPARATOR
        from_notation, to_notation = notation.split(separator)
        from_sq = Square.from_notation(from_notation)
        to_sq = Square.from_notation(to_notation)
        if separator == JUMP_SEPARATOR:
            return cls(from_sq, to_sq, midpoint(from_sq, to_sq))
        return cls(from_sq, to_sq)

    def to_notation(self) -> str:
        separator = JUMP_SEPARATOR if self.is_jump else STEP_SEPARATOR
        return f"{self.from_square.to_notation()}{separator}{self.to_square.to_notation()}"


def midpoint(from_square: Square, to_square: Square) -> Square:
    """The cell that gets jumped over"""
    return Square(
        (from_square.row + to_square.row) // 2,
        (from_square.col + to_square.col) // 2,
    )


def piece_directions(piece: Piece) -> list[Vector]:
    """Kings move along all four diagonals, men only along the two in their forward direction."""
    if piece.is_king:
        return KING_DIRECTIONS
    forward = piece.owner.forward
    return [(forward, -1), (forward, 1)]


# --- MOVEMENT RULES ---
def step_moves(square: Square, board: Board) -> list[Move]:
    """A step to an adjacent diagonal cell that is on the board and empty."""
    piece = board.piece(square)
    if piece is None:
        return []

    moves: list[Move] = []
    for d_row, d_col in piece_directions(piece):
        target = square.shifted(d_row, d_col)
        if target.is_inside() and board.is_empty(target):
            moves.append(Move(from_square=square, to_square=target))
    return moves


def jump_moves(square: Square, board: Board) -> list[Move]:
    """A jump over an adjacent opposing piece, landing on the (empty) cell right behind it."""
    piece = board.piece(square)
    if piece is None:
        return []

    moves: list[Move] = []
    for d_row, d_col in piece_directions(piece):
        jumped = square.shifted(d_row, d_col)
        landing = square.shifted(2 * d_row, 2 * d_col)
        if not landing.is_inside() or not board.is_empty(landing):
            continue

        jumped_piece = board.piece(jumped)
        if jumped_piece is not None and jumped_piece.owner != piece.owner:
            moves.append(Move(from_square=square, to_square=landing, captured=jumped))
    return moves


def generate_moves(board: Board, side: Side) -> list[Move]:
    """
    Legal moves for `side`.
    ---

    1. collect steps and jumps for every piece of the side
    2. mandatory capture: any jump anywhere on the board means ONLY jumps are legal

    Order of the list carries no meaning.
    """
    steps: list[Move] = []
    jumps: list[Move] = []
    for square in board.locate_side(side):
        jumps.extend(jump_moves(square, board))
        steps.extend(step_moves(square, board))
    return jumps if jumps else steps


def has_legal_move(board: Board, side: Side) -> bool:
    return len(generate_moves(board, side)) > 0
