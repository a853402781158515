from flask import current_app, request
from flask_socketio import emit
from typing import Optional

from app.models import Difficulty


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}

def _games():
    return current_app.extensions['games']

def _matchmaker():
    return current_app.extensions['matchmaker']

def _parse_size(data) -> Optional[int]:
    size = _payload(data).get('size', current_app.config.get('DEFAULT_BOARD_SIZE', 3))
    if isinstance(size, bool) or not isinstance(size, int):
        return None
    if size not in current_app.config.get('BOARD_SIZES', (3,)):
        return None
    return size

def _parse_difficulty(data) -> Optional[Difficulty]:
    value = _payload(data).get('difficulty', current_app.config.get('DEFAULT_DIFFICULTY', 'medium'))
    try:
        return Difficulty(value)
    except ValueError:
        return None


def handle_connect():
    emit('connected', {'message': 'Connected to game server'})


def handle_disconnect(*args):
    sid = _get_sid()
    _matchmaker().withdraw(sid)
    _games().disconnect(sid)


def handle_set_display_name(data=None):
    _games().set_display_name(_get_sid(), _payload(data).get('name'))


def handle_start_single_player(data=None):
    size = _parse_size(data)
    difficulty = _parse_difficulty(data)
    if size is None or difficulty is None:
        return
    sid = _get_sid()
    _matchmaker().withdraw(sid)
    _games().start_single_player(sid, size, difficulty)


def handle_find_multiplayer_game(data=None):
    size = _parse_size(data)
    if size is None:
        return
    sid = _get_sid()
    games = _games()
    games.leave(sid)
    _matchmaker().find_match(sid, size, games.registry.display_name(sid))


def handle_cancel_matchmaking(data=None):
    _matchmaker().cancel(_get_sid())


def handle_make_move(data=None):
    cell_index = _payload(data).get('cell_index')
    if isinstance(cell_index, bool) or not isinstance(cell_index, int):
        return
    _games().make_move(_get_sid(), cell_index)


def handle_vote_rematch(data=None):
    _games().vote_rematch(_get_sid())


def handle_post_chat(data=None):
    _games().post_chat(_get_sid(), _payload(data).get('text'))


def handle_leave_game(data=None):
    _games().leave(_get_sid())


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on the game namespace."""
    from app import socketio

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('set_display_name', handle_set_display_name, namespace=namespace)
    socketio.on_event('start_single_player', handle_start_single_player, namespace=namespace)
    socketio.on_event('find_multiplayer_game', handle_find_multiplayer_game, namespace=namespace)
    socketio.on_event('cancel_matchmaking', handle_cancel_matchmaking, namespace=namespace)
    socketio.on_event('make_move', handle_make_move, namespace=namespace)
    socketio.on_event('vote_rematch', handle_vote_rematch, namespace=namespace)
    socketio.on_event('post_chat', handle_post_chat, namespace=namespace)
    socketio.on_event('leave_game', handle_leave_game, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
