"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import Status

# Letters, digits, dashes, underscores only (validated at the API boundary)
GAME_ID_LENGTH = 64


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[str] = mapped_column(String(GAME_ID_LENGTH), primary_key=True)
    board: Mapped[str]
    turn: Mapped[Optional[str]]
    status: Mapped[str] = mapped_column(default=Status.WAITING)
    players: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    winner: Mapped[Optional[str]]
    forfeited_by: Mapped[Optional[str]]
    turn_started_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True)
    )
    chain_square: Mapped[Optional[str]]
    revision: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
