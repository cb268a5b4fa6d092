"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Type aliases to make GameModel easier to read
SideName = str
PlayerName = str


@dataclass
class GameModel:
    """Transport-safe representation of a game record used between API, Service, DB, and Game layers."""

    game_id: str
    board: str
    turn: Optional[SideName]
    status: str
    players: dict[SideName, PlayerName] = field(default_factory=dict)
    moves: list[str] = field(default_factory=list)
    winner: Optional[SideName] = None
    forfeited_by: Optional[SideName] = None
    turn_started_at: Optional[datetime] = None
    chain_square: Optional[str] = None
    revision: int = 0
