"""The Game board: the 8x8 grid of cells. Only accessors live here, the rules live in moves.py / rules.py"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.checkers.layout import parse_layout, starting_layout, to_layout
from src.checkers.pieces import Piece, Side
from src.checkers.square import BOARD_SIZE, Square, is_inside

Grid = list[list[Optional[Piece]]]


@dataclass
class Board:
    grid: Grid

    @classmethod
    def from_layout(cls, layout: str) -> Self:
        """Construct a board using a layout string.

        ex. standard starting position:
        .b.b.b.b/b.b.b.b./.b.b.b.b/......../......../r.r.r.r./.r.r.r.r/r.r.r.r.
        means:
        * row 0 is written first, and Black's men cover the dark squares of rows 0 through 2
        * rows 3 and 4 are empty
        * Red's men cover the dark squares of rows 5 through 7
        * upper case letters would be kings
        """
        return cls(parse_layout(layout))

    @classmethod
    def starting(cls) -> Self:
        return cls.from_layout(starting_layout())

    @classmethod
    def empty(cls) -> Self:
        return cls([[None] * BOARD_SIZE for _ in range(BOARD_SIZE)])

    def to_layout(self) -> str:
        return to_layout(self.grid)

    def piece(self, square: Square) -> Optional[Piece]:
        return self.grid[square.row][square.col]

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> None:
        self.grid[square.row][square.col] = None

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def is_inside(self, row: int, col: int) -> bool:
        return is_inside(row, col)

    def clone(self) -> Self:
        """Deep copy: the rows of the clone are never shared with the original."""
        return deepcopy(self)

    def locate_side(self, side: Side) -> list[Square]:
        return [
            Square(row, col)
            for row, cells in enumerate(self.grid)
            for col, piece in enumerate(cells)
            if piece is not None and piece.owner == side
        ]

    def count_pieces(self) -> dict[Side, int]:
        """Tally the number of pieces each side still has on the board"""
        return {side: len(self.locate_side(side)) for side in Side}
