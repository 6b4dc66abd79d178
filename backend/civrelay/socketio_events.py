from flask import current_app, request
from flask_socketio import ConnectionRefusedError

from civrelay import socketio
from civrelay.auth import credentials_from


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _registry():
    return current_app.extensions['connection_registry']


def _protocol():
    return current_app.extensions['channel_protocol']


def handle_connect(auth=None):
    credentials = credentials_from(request)
    if credentials is None:
        raise ConnectionRefusedError('No authentication info found!')
    user_id, password = credentials
    if not current_app.extensions['auth_gate'].authorize(user_id, password):
        current_app.logger.info(f"[chat-connect] user={user_id} rejected")
        raise ConnectionRefusedError('Authentication failed!')
    _registry().register(_get_sid())
    current_app.logger.info(f"[chat-connect] user={user_id} conn={_get_sid()}")


def handle_disconnect(*args):
    _protocol().drop(_get_sid())
    current_app.logger.info(f"[chat-disconnect] conn={_get_sid()}")


def handle_message(data):
    _protocol().handle(_get_sid(), data)


def send_to(namespace: str):
    """Build the delivery callable used by the chat protocol."""
    def _send(token, payload):
        socketio.send(payload, json=True, to=token, namespace=namespace)
    return _send


def register_socketio_handlers(namespace: str = '/chat') -> None:
    """Register Socket.IO event handlers on the chat namespace.

    Text frames arrive as ``message`` events, JSON objects as ``json``;
    both are fed to the same protocol.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('message', handle_message, namespace=namespace)
    socketio.on_event('json', handle_message, namespace=namespace)
