"""Requests and Response models"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Seat, Side, Status

SideName = str
PlayerName = str

# Game IDs are chosen by the players: letters, digits, dashes, and underscores only
GAME_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
SQUARE_PATTERN = re.compile(r"^[0-7][0-7]$")


def _validate_game_id(value: str) -> str:
    value = value.strip()
    if not GAME_ID_PATTERN.fullmatch(value):
        raise InvalidRequestError(
            "Game ID can only contain letters, numbers, dashes (-), and underscores (_)."
        )
    return value


def _validate_player_name(value: str) -> str:
    if not value.strip():
        raise InvalidRequestError("Player name cannot be empty.")
    return value


# --- REQUEST MODELS ---
class GameRequest(BaseModel):
    game_id: str

    @field_validator("game_id")
    @classmethod
    def validate_game_id(cls, value: str) -> str:
        return _validate_game_id(value)


class PlayerRequest(GameRequest):
    player_name: str

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _validate_player_name(value)


class CreateGameRequest(PlayerRequest):
    pass


class JoinGameRequest(PlayerRequest):
    pass


class GetGameRequest(GameRequest):
    pass


class DeleteGameRequest(GameRequest):
    pass


class LegalMovesRequest(PlayerRequest):
    pass


class TimeoutRequest(PlayerRequest):
    pass


class ForfeitRequest(PlayerRequest):
    pass


class MoveRequest(PlayerRequest):
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not SQUARE_PATTERN.fullmatch(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a square. Expected row digit followed by column digit (0-7)."
            )
        return value


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: str
    players: dict[SideName, PlayerName]
    board: str
    turn: Optional[Side]
    status: Status
    winner: Optional[Side] = None
    forfeited_by: Optional[Side] = None
    turn_started_at: Optional[datetime] = None
    remaining_seconds: float
    chain_square: Optional[str] = None
    move_history: list[str]
    revision: int


class JoinGameResponse(BaseModel):
    seat: Seat
    game: GameResponse


class LegalMovesResponse(BaseModel):
    game_id: str
    player_name: str
    side: Side
    legal_moves: list[str]
