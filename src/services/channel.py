"""
Push channel: fan-out of the full (updated) game record to everyone watching a game.

Delivery is best effort. A viewer that misses an update can always re-read the record from the service.
"""

import logging
from collections import defaultdict
from typing import Callable, Protocol

from src.api.models import GameResponse

logger = logging.getLogger(__name__)

Subscriber = Callable[[GameResponse], None]
Unsubscribe = Callable[[], None]


class GameChannel(Protocol):
    """Subscription by game ID"""

    def subscribe(self, game_id: str, callback: Subscriber) -> Unsubscribe:
        """Register for updates of one game. Call the returned function to stop receiving them."""
        ...

    def publish(self, game_id: str, game: GameResponse) -> None:
        """Deliver the updated record to every subscriber of the game."""
        ...


class InProcessChannel:
    """Subscribers are called synchronously, in subscription order."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[str, list[Subscriber]] = defaultdict(list)

    def subscribe(self, game_id: str, callback: Subscriber) -> Unsubscribe:
        self._subscribers[game_id].append(callback)

        def _unsubscribe() -> None:
            subscribers = self._subscribers.get(game_id, [])
            if callback in subscribers:
                subscribers.remove(callback)
            if not subscribers:
                self._subscribers.pop(game_id, None)

        return _unsubscribe

    def publish(self, game_id: str, game: GameResponse) -> None:
        for callback in list(self._subscribers.get(game_id, [])):
            try:
                callback(game)
            except Exception:
                # one broken viewer should not keep the others from getting the update
                logger.warning("Subscriber of game %s failed", game_id, exc_info=True)

    def subscriber_count(self, game_id: str) -> int:
        return len(self._subscribers.get(game_id, []))

    def watched_games(self) -> set[str]:
        """IDs of the games with at least one subscriber."""
        return set(self._subscribers)
