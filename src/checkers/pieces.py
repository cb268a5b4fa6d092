"""Defines the sides and the pieces"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Self

from src.checkers.square import BOARD_SIZE


class Side(Enum):
    RED = auto()
    BLACK = auto()

    @property
    def opponent(self) -> Side:
        return Side.BLACK if self == Side.RED else Side.RED

    @property
    def forward(self) -> int:
        """Red moves up the board (towards row 0), Black moves down (towards the last row)."""
        return -1 if self == Side.RED else 1

    @property
    def crowning_row(self) -> int:
        """The back rank of the opposing side."""
        return 0 if self == Side.RED else BOARD_SIZE - 1

    @classmethod
    def from_name(cls, name: str) -> Self:
        return cls[name.upper()]

    def to_name(self) -> str:
        return self.name.lower()


CHAR_TO_SIDE: dict[str, Side] = {
    "r": Side.RED,
    "b": Side.BLACK,
}

SIDE_TO_CHAR: dict[Side, str] = {value: key for key, value in CHAR_TO_SIDE.items()}

EMPTY_CHAR = "."


@dataclass(frozen=True)
class Piece:
    owner: Side
    is_king: bool = False

    @classmethod
    def from_char(cls, character: str) -> Self:
        # lower case: men, upper case: kings
        return cls(CHAR_TO_SIDE[character.lower()], character.isupper())

    def to_char(self) -> str:
        char = SIDE_TO_CHAR[self.owner]
        return char.upper() if self.is_king else char

    def crowned(self) -> Piece:
        """A new piece with king rank. Crowning a king gives back an equal king."""
        return replace(self, is_king=True)


def piece_to_char(piece: Optional[Piece]) -> str:
    return piece.to_char() if piece else EMPTY_CHAR
