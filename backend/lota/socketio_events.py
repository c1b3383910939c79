from collections.abc import Mapping

from flask import current_app, request
from flask_socketio import emit
from lota import socketio, get_session
from lota.broadcast import NAMESPACE


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _as_mapping(data):
    """Return the payload as a mapping, {} when absent, None when malformed."""
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return data
    current_app.logger.debug(f"[dropped] malformed payload sid={_get_sid()} type={type(data).__name__}")
    return None


def _is_approval(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'si', 'sí')
    if isinstance(value, int):
        return value == 1
    return False


def handle_connect():
    get_session().send_state(_get_sid())


def handle_disconnect(*args):
    get_session().leave(_get_sid())


def handle_join(data=None):
    data = _as_mapping(data)
    if data is None:
        return
    credential = data.get('password', data.get('credential'))
    get_session().join(
        _get_sid(),
        name=data.get('name'),
        role=data.get('role'),
        chips=data.get('chips'),
        credential=credential,
    )


def handle_start_game(data=None):
    payload = _as_mapping(data)
    if payload is None:
        return
    if isinstance(payload.get('config'), Mapping):
        payload = payload['config']
    get_session().start(_get_sid(), payload)


def handle_claim(*args):
    get_session().claim(_get_sid())


def handle_admin_verify(data=None):
    # The admin panel sends either {"approved": bool} or the bare bool
    approved = data.get('approved') if isinstance(data, Mapping) else data
    get_session().verify(_get_sid(), _is_approval(approved))


def handle_pause_game(*args):
    get_session().pause(_get_sid())


def handle_resume_game(*args):
    get_session().resume(_get_sid())


def handle_reset_game(*args):
    get_session().reset(_get_sid())


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join', handle_join, namespace=namespace)
    socketio.on_event('start_game', handle_start_game, namespace=namespace)
    socketio.on_event('claim', handle_claim, namespace=namespace)
    # Name used by the original browser client
    socketio.on_event('claim_lota', handle_claim, namespace=namespace)
    socketio.on_event('admin_verify', handle_admin_verify, namespace=namespace)
    socketio.on_event('pause_game', handle_pause_game, namespace=namespace)
    socketio.on_event('resume_game', handle_resume_game, namespace=namespace)
    socketio.on_event('reset_game', handle_reset_game, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
