"""
Text encoding of a board position (the checkers counterpart of the position part of a FEN string).

Eight rows of eight characters, joined by slashes, row 0 first:
* '.' an empty cell
* 'r' / 'b' a red / black man
* 'R' / 'B' a red / black king
"""

from typing import Optional

from src.checkers.pieces import CHAR_TO_SIDE, EMPTY_CHAR, Piece, Side, piece_to_char
from src.checkers.square import BOARD_SIZE, is_dark
from src.core.exceptions import InvalidLayoutError

ROW_SEPARATOR = "/"

# Number of rows each side fills with men at the start of the game
STARTING_ROWS = 3


def is_valid_layout(layout: str) -> bool:
    rows = layout.split(ROW_SEPARATOR)
    if len(rows) != BOARD_SIZE:
        return False

    for row in rows:
        if len(row) != BOARD_SIZE:
            return False
        for character in row:
            # make sure every character is valid
            if character != EMPTY_CHAR and character.lower() not in CHAR_TO_SIDE:
                return False
    return True


def parse_layout(layout: str) -> list[list[Optional[Piece]]]:
    if not is_valid_layout(layout):
        raise InvalidLayoutError(f"Cannot interpret {layout!r} as a board layout.")

    return [
        [
            None if character == EMPTY_CHAR else Piece.from_char(character)
            for character in row
        ]
        for row in layout.split(ROW_SEPARATOR)
    ]


def to_layout(grid: list[list[Optional[Piece]]]) -> str:
    return ROW_SEPARATOR.join(
        "".join(piece_to_char(piece) for piece in row) for row in grid
    )


def starting_layout() -> str:
    """Black on the dark squares of the first three rows, Red on the dark squares of the last three."""
    grid: list[list[Optional[Piece]]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    for row in range(BOARD_SIZE):
        if row < STARTING_ROWS:
            side = Side.BLACK
        elif row >= BOARD_SIZE - STARTING_ROWS:
            side = Side.RED
        else:
            continue
        for col in range(BOARD_SIZE):
            if is_dark(row, col):
                grid[row][col] = Piece(side)
    return to_layout(grid)
