"""Chat protocol spoken over the persistent connection.

Inbound messages are mappings with a string ``type``:

    {"type": "join",  "gameIds": ["G1", ...]}
    {"type": "leave", "gameIds": ["G1", ...]}
    {"type": "chat",  "gameId": "G1", "civName": "Rome", "message": "hi"}

Replies go to the sender only; chat payloads go to every connection
subscribed to the game id. Bad input is reported back as an ``error``
message and never closes the connection.
"""
import json
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List

from civrelay.registry import ConnectionRegistry

MALFORMED_MESSAGE = 'Malformed message'
UNKNOWN_MESSAGE_TYPE = 'Unknown message type'
INVALID_GAME_ID = 'Invalid or missing gameId'
NOT_SUBSCRIBED = 'You are not subscribed to this channel!'
SERVER_ERROR = 'server error'

Payload = Dict[str, Any]
SendFn = Callable[[str, Payload], None]

logger = logging.getLogger(__name__)


def error_message(message: str) -> Payload:
    return {'type': 'error', 'message': message}


def subscription_message(kind: str, game_ids: Iterable[str]) -> Payload:
    return {'type': kind, 'gameIds': sorted(game_ids)}


def chat_message(data: Payload, game_id: str) -> Payload:
    """Rebroadcast form of an inbound chat; absent fields stay absent."""
    payload = {'type': 'chat'}
    for key in ('civName', 'message'):
        if key in data:
            payload[key] = data[key]
    payload['gameId'] = game_id
    return payload


def _string_ids(data: Payload) -> List[str]:
    game_ids = data.get('gameIds')
    if not isinstance(game_ids, list):
        return []
    return [gid for gid in game_ids if isinstance(gid, str)]


class ChannelProtocol:
    def __init__(self, registry: ConnectionRegistry, send: SendFn, log: logging.Logger = None):
        self.registry = registry
        self.send = send
        self.logger = log or logger
        # Held for the whole of one message: lookup, mutation and broadcast
        self.message_lock = threading.Lock()
        self._handlers = {
            'join': self.handle_join,
            'leave': self.handle_leave,
            'chat': self.handle_chat,
        }

    def handle(self, token: str, data) -> None:
        """Interpret one inbound message from the connection ``token``.

        ``data`` is either raw JSON text or an already decoded mapping.
        Messages are handled one at a time across all connections.
        """
        with self.message_lock:
            self._dispatch(token, data)

    def _dispatch(self, token: str, data) -> None:
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except ValueError:
                data = None
        if not isinstance(data, dict) or not isinstance(data.get('type'), str):
            self.send(token, error_message(MALFORMED_MESSAGE))
            return

        handler = self._handlers.get(data['type'])
        if handler is None:
            self.send(token, error_message(UNKNOWN_MESSAGE_TYPE))
            return
        try:
            handler(token, data)
        except Exception:
            self.logger.exception(f"[chat] failed handling {data['type']!r} from {token}")
            self.send(token, error_message(SERVER_ERROR))

    def handle_join(self, token: str, data: Payload) -> None:
        subscribed = self.registry.subscribe(token, _string_ids(data))
        self.logger.debug(f"[chat-join] conn={token} games={sorted(subscribed)}")
        self.send(token, subscription_message('joinSuccess', subscribed))

    def handle_leave(self, token: str, data: Payload) -> None:
        subscribed = self.registry.unsubscribe(token, _string_ids(data))
        if subscribed is None:
            return
        self.logger.debug(f"[chat-leave] conn={token} games={sorted(subscribed)}")
        self.send(token, subscription_message('leaveSuccess', subscribed))

    def handle_chat(self, token: str, data: Payload) -> None:
        game_id = data.get('gameId')
        if not isinstance(game_id, str):
            self.send(token, error_message(INVALID_GAME_ID))
            return
        if not self.registry.is_subscribed(token, game_id):
            self.send(token, error_message(NOT_SUBSCRIBED))
            return
        self.broadcast(game_id, chat_message(data, game_id))

    def broadcast(self, game_id: str, payload: Payload) -> int:
        """Send ``payload`` to every subscriber of ``game_id``.

        A failed send is logged and skipped; the recipient's own disconnect
        handling evicts it later. Returns the number of successful sends.
        """
        delivered = 0
        for recipient in self.registry.subscribers_of(game_id):
            try:
                self.send(recipient, payload)
            except Exception as exc:
                self.logger.warning(f"[chat-deliver] game={game_id} conn={recipient} failed: {exc}")
                continue
            delivered += 1
        return delivered

    def drop(self, token: str) -> None:
        """Evict a closed connection once no message is in flight."""
        with self.message_lock:
            self.registry.remove(token)
