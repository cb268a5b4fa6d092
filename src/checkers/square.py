"""
A cell on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Checkers board is always 8x8. Kept as a constant so the bounds are spelled out once.
BOARD_SIZE = 8


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_notation(cls, sq: str) -> Square:
        """Notation is the row digit followed by the column digit: '21' is row 2, column 1"""
        return cls(int(sq[0]), int(sq[1]))

    def to_notation(self) -> str:
        return f"{self.row}{self.col}"

    def is_inside(self) -> bool:
        return is_inside(self.row, self.col)

    def shifted(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)


def is_inside(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_dark(row: int, col: int) -> bool:
    """Pieces only ever stand on the dark squares of the starting layout."""
    return (row + col) % 2 == 1
