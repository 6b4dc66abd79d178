import threading
from typing import Dict, Iterable, List, Optional, Set


class ConnectionRegistry:
    """Process-local table of connection token -> subscribed game ids.

    Tokens are the session ids assigned to connections at handshake. The
    live connection is addressed separately by its token when sending.
    Socket.IO handlers may run on OS threads, so one lock guards the whole
    table. No method performs I/O or blocks beyond that lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: Dict[str, Set[str]] = {}

    def register(self, token: str) -> None:
        with self._lock:
            self._subscriptions.setdefault(token, set())

    def subscribe(self, token: str, game_ids: Iterable[str]) -> Set[str]:
        with self._lock:
            subscribed = self._subscriptions.setdefault(token, set())
            subscribed.update(game_ids)
            return set(subscribed)

    def unsubscribe(self, token: str, game_ids: Iterable[str]) -> Optional[Set[str]]:
        """Drop the given ids; returns None if the token is not registered."""
        with self._lock:
            subscribed = self._subscriptions.get(token)
            if subscribed is None:
                return None
            subscribed.difference_update(game_ids)
            return set(subscribed)

    def is_subscribed(self, token: str, game_id: str) -> bool:
        with self._lock:
            return game_id in self._subscriptions.get(token, ())

    def subscribers_of(self, game_id: str) -> List[str]:
        with self._lock:
            return [token for token, subscribed in self._subscriptions.items() if game_id in subscribed]

    def remove(self, token: str) -> None:
        with self._lock:
            self._subscriptions.pop(token, None)

    def __contains__(self, token) -> bool:
        with self._lock:
            return token in self._subscriptions

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)
