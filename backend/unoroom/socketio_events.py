"""Socket.IO session router.

Every intent is resolved to a room and handled while holding that room's
lock, including the broadcasts it causes, so clients see state changes
in the order they were applied. Rejected intents are answered with an
``error`` event to the sender only.
"""

import functools

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from unoroom import rooms, socketio
from unoroom.services.games.errors import GameError, InvalidPlay, InvalidRequest
from unoroom.services.games.results import record_game_result

NAMESPACE = '/'


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _reports_errors(handler):
    @functools.wraps(handler)
    def wrapper(data=None):
        try:
            return handler(data if isinstance(data, dict) else {})
        except GameError as exc:
            current_app.logger.info(f"[rejected] sid={_get_sid()} intent={handler.__name__} error={exc.message}")
            emit('error', {'message': exc.message})
    return wrapper


def _player_name(data) -> str:
    name = data.get('playerName')
    if not isinstance(name, str) or not name.strip():
        raise InvalidRequest('playerName is required')
    limit = int(current_app.config.get('MAX_PLAYER_NAME_LENGTH', 64))
    if len(name.strip()) > limit:
        raise InvalidRequest(f'playerName must be at most {limit} characters')
    return name.strip()


def _room_id(data, required: bool) -> str:
    room_id = data.get('roomId')
    if room_id is None and not required:
        return ''
    if not isinstance(room_id, str):
        raise InvalidRequest('roomId must be a string')
    room_id = room_id.strip()
    if required and not room_id:
        raise InvalidRequest('roomId is required')
    limit = int(current_app.config.get('MAX_ROOM_ID_LENGTH', 16))
    if len(room_id) > limit:
        raise InvalidRequest(f'roomId must be at most {limit} characters')
    return room_id


def _broadcast_players(room) -> None:
    socketio.emit('players-updated', {'players': room.players_payload()}, to=room.id, namespace=NAMESPACE)


def _broadcast_game(room, game, event='game-updated') -> None:
    for player in room.players:
        socketio.emit(event, game.project_state(player.id), to=player.id, namespace=NAMESPACE)


def _active_game(room):
    if room.game is None or not room.game_in_progress:
        raise InvalidPlay('No game in progress')
    return room.game


def _leave(room, sid: str) -> None:
    with room.lock:
        outcome = rooms.remove_player(sid, room)
        if outcome is None:
            return
        _, destroyed = outcome
        leave_room(room.id, sid=sid, namespace=NAMESPACE)
        if destroyed:
            current_app.logger.info(f"[room-destroyed] room={room.id}")
            return
        current_app.logger.info(f"[player-left] room={room.id} player={sid}")
        socketio.emit('player-disconnected', {'playerId': sid, 'players': room.players_payload()},
                      to=room.id, namespace=NAMESPACE)


def _finish_game(room, game) -> None:
    winner = game.get_player(game.winner)
    socketio.emit('game-over', {'winnerId': winner.id, 'winnerName': winner.name}, to=room.id, namespace=NAMESPACE)
    rooms.finish_game(room.id)
    current_app.logger.info(f"[game-over] room={room.id} winner={winner.id} turns={game.turns_taken}")
    record_game_result(current_app._get_current_object(), game.summary())


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    room = rooms.room_for_session(sid)
    if room is not None:
        _leave(room, sid)


@_reports_errors
def handle_create_room(data):
    sid = _get_sid()
    player_name = _player_name(data)
    room_id = _room_id(data, required=False)

    previous = rooms.room_for_session(sid)
    room = rooms.create_room(sid, player_name, room_id)
    with rooms.locked(room.id) as room:
        join_room(room.id)
        emit('room-created', {'roomId': room.id, 'playerId': sid})
        _broadcast_players(room)
    current_app.logger.info(f"[room-created] room={room.id} player={sid}")
    if previous is not None and previous is not room:
        _leave(previous, sid)


@_reports_errors
def handle_join_room(data):
    sid = _get_sid()
    player_name = _player_name(data)
    room_id = _room_id(data, required=True)

    previous = rooms.room_for_session(sid)
    with rooms.locked(room_id) as room:
        rooms.join_room(room.id, sid, player_name)
        join_room(room.id)
        emit('room-joined', {'roomId': room.id, 'playerId': sid})
        _broadcast_players(room)
    current_app.logger.info(f"[room-joined] room={room.id} player={sid}")
    if previous is not None and previous is not room:
        _leave(previous, sid)


@_reports_errors
def handle_start_game(data):
    sid = _get_sid()
    with rooms.locked_for_session(sid) as room:
        game = rooms.start_game(room.id)
        _broadcast_game(room, game, event='game-started')
        current_app.logger.info(f"[game-started] room={room.id} players={len(game.players)} by={sid}")


@_reports_errors
def handle_play_card(data):
    sid = _get_sid()
    with rooms.locked_for_session(sid) as room:
        game = _active_game(room)
        result = game.play(sid, data.get('cardIndex'), data.get('chosenColor'))
        if not result.success:
            raise result.error
        _broadcast_game(room, game)
        if result.winner:
            _finish_game(room, game)


@_reports_errors
def handle_draw_card(data):
    sid = _get_sid()
    with rooms.locked_for_session(sid) as room:
        game = _active_game(room)
        result = game.take_draw_turn(sid)
        if not result.success:
            raise result.error
        _broadcast_game(room, game)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('create-room', handle_create_room, namespace=NAMESPACE)
    socketio.on_event('join-room', handle_join_room, namespace=NAMESPACE)
    socketio.on_event('start-game', handle_start_game, namespace=NAMESPACE)
    socketio.on_event('play-card', handle_play_card, namespace=NAMESPACE)
    socketio.on_event('draw-card', handle_draw_card, namespace=NAMESPACE)
