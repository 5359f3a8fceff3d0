from flask_socketio import join_room, leave_room, emit
from mathsprint.errors import ValidationError
from mathsprint.game import GameMode


def _room_for(data) -> str:
    """Room for a leaderboard watcher: all modes, or one mode when given."""
    game_mode = (data or {}).get('gameMode')
    if not game_mode:
        return 'leaderboard'
    return f"leaderboard:{GameMode.parse(game_mode).value}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_watch_leaderboard(data=None):
    try:
        room = _room_for(data)
    except ValidationError as exc:
        emit('error', {'message': exc.message})
        return
    join_room(room)
    emit('watching', {'room': room})


def handle_unwatch_leaderboard(data=None):
    try:
        room = _room_for(data)
    except ValidationError as exc:
        emit('error', {'message': exc.message})
        return
    leave_room(room)
    emit('unwatching', {'room': room})


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(socketio, testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('watch_leaderboard', handle_watch_leaderboard, namespace=namespace)
        socketio.on_event('unwatch_leaderboard', handle_unwatch_leaderboard, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
