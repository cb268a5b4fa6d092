"""Turn clock: how much of the turn budget the side to move has left."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

# A side has a minute to make its move before the turn is skipped
DEFAULT_TURN_SECONDS = 60.0
# Viewers recompute the countdown once per second
DEFAULT_TICK_SECONDS = 1.0


@dataclass(frozen=True)
class TurnClock:
    """
    Derives the remaining time of the turn holder from the moment the turn started.

    Nothing is stored here besides the budget: every viewer recomputes the countdown on its own
    from `turn_started_at` in the game record, so a reconnecting viewer picks up where the turn actually is.
    """

    turn_seconds: float = DEFAULT_TURN_SECONDS
    tick_seconds: float = DEFAULT_TICK_SECONDS

    @property
    def budget(self) -> timedelta:
        return timedelta(seconds=self.turn_seconds)

    def deadline(self, turn_started_at: datetime) -> datetime:
        return turn_started_at + self.budget

    def elapsed(self, turn_started_at: datetime, now: datetime) -> float:
        return (now - turn_started_at).total_seconds()

    def remaining(self, turn_started_at: Optional[datetime], now: datetime) -> float:
        """turn budget - (now - turn started), clamped to zero. A turn that never started has its full budget."""
        if turn_started_at is None:
            return self.turn_seconds
        return max(0.0, self.turn_seconds - self.elapsed(turn_started_at, now))

    def is_expired(self, turn_started_at: Optional[datetime], now: datetime) -> bool:
        if turn_started_at is None:
            return False
        return self.remaining(turn_started_at, now) <= 0.0
