"""Outbound events, pushed to every connection on the game namespace."""

from typing import Any, Dict, Optional

NAMESPACE = '/ws'


class SocketIOBroadcaster:
    """Broadcast gateway backed by a Flask-SocketIO server."""

    def __init__(self, socketio, namespace: str = NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def _emit(self, event: str, payload: Any, to: Optional[str] = None) -> None:
        # socketio.emit (not flask_socketio.emit) so timer threads can call it
        self.socketio.emit(event, payload, to=to, namespace=self.namespace)

    def sync(self, state: Dict[str, Any], to: Optional[str] = None) -> None:
        self._emit('sync', state, to=to)

    def new_number(self, number: int, voice: str) -> None:
        self._emit('new_number', {'number': number, 'voice': voice})

    def announce(self, text: str) -> None:
        self._emit('speak_announcement', {'text': text})

    def error(self, to: str, text: str) -> None:
        self._emit('error_msg', {'text': text}, to=to)
