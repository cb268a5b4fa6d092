"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING = "waiting"
    ACTIVE = "active"
    WON = "won"
    FORFEITED = "forfeited"


# --- NOTE the domain layer has its own Side enum (src/checkers/pieces.py). These string versions are what crosses the layer boundaries.


class Side(StrEnum):
    RED = "red"
    BLACK = "black"


class Seat(StrEnum):
    """What a connecting identity ends up as after seat assignment."""

    RED = "red"
    BLACK = "black"
    SPECTATOR = "spectator"
