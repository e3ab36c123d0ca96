from typing import Callable

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from trivia import get_runtime, socketio
from trivia.errors import TriviaError
from trivia.services.rooms import HandlerResult


def _runtime():
    return get_runtime(current_app)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def room_channel(room_code: str) -> str:
    return f"room:{room_code}"


def _publish(result: HandlerResult) -> None:
    for event in result.events:
        if event.payload is None:
            emit(event.name, to=room_channel(event.room))
        else:
            emit(event.name, event.payload, to=room_channel(event.room))


def _dispatch(room_code, action: Callable[[str], HandlerResult]) -> None:
    """Run ``action`` under the room lock and broadcast its events in order."""
    registry = _runtime().registry
    try:
        with registry.locked(room_code) as room:
            _publish(action(room.code))
    except TriviaError as exc:
        current_app.logger.debug(f"[dispatch-skip] room={room_code!r} sid={_get_sid()} reason={exc.code}")


def _leave_current_room(sid: str) -> bool:
    runtime = _runtime()
    membership = runtime.connections.release(sid)
    if membership is None:
        return False
    try:
        with runtime.registry.locked(membership.room_code) as room:
            result = runtime.session.remove_player(room.code, membership.player_id)
            leave_room(room_channel(room.code))
            _publish(result)
    except TriviaError:
        # Room already gone
        return False
    return True


def _field(data, key):
    return data.get(key) if isinstance(data, dict) else None


def handle_connect(auth=None):
    emit('connected', {'connectionId': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    if _leave_current_room(sid):
        current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")


def handle_create_room(nickname=None):
    sid = _get_sid()
    runtime = _runtime()
    _leave_current_room(sid)
    try:
        result = runtime.registry.create_room(nickname, player_id=sid)
    except TriviaError as exc:
        return exc.to_dict()
    code = result.reply['roomCode']
    with runtime.registry.locked(code):
        runtime.connections.bind(sid, code, sid)
        join_room(room_channel(code))
        _publish(result)
    return result.reply


def handle_join_room(data=None):
    sid = _get_sid()
    runtime = _runtime()
    room_code = _field(data, 'roomCode')
    current = runtime.connections.lookup(sid)
    player_id = runtime.connections.player_id_for(sid)
    try:
        with runtime.registry.locked(room_code) as room:
            result = runtime.registry.join_room(room.code, _field(data, 'nickname'), player_id)
            join_room(room_channel(room.code))
            _publish(result)
    except TriviaError as exc:
        current_app.logger.info(f"[join-rejected] room={room_code!r} sid={sid} reason={exc.code}")
        return exc.to_dict()
    # The old room is only left once the new one has accepted the player
    code = result.reply['roomCode']
    if current is not None and current.room_code != code:
        _leave_current_room(sid)
    runtime.connections.bind(sid, code, player_id)
    return result.reply


def handle_leave_room(room_code=None):
    sid = _get_sid()
    runtime = _runtime()
    current = runtime.connections.lookup(sid)
    if current is None:
        return {'left': False}
    if room_code is not None:
        try:
            if runtime.registry.normalize(room_code) != current.room_code:
                return {'left': False}
        except TriviaError:
            return {'left': False}
    return {'left': _leave_current_room(sid)}


def handle_start_game(room_code=None):
    runtime = _runtime()
    player_id = runtime.connections.player_id_for(_get_sid())
    _dispatch(room_code, lambda code: runtime.session.start_game(code, player_id))


def handle_next_question(room_code=None):
    runtime = _runtime()
    player_id = runtime.connections.player_id_for(_get_sid())
    _dispatch(room_code, lambda code: runtime.session.next_question(code, player_id))


def handle_submit_answer(data=None):
    runtime = _runtime()
    player_id = runtime.connections.player_id_for(_get_sid())
    answer_index = _field(data, 'answerIndex')
    _dispatch(_field(data, 'roomCode'), lambda code: runtime.session.submit_answer(code, player_id, answer_index))


def handle_socket_error(exc):
    event = getattr(request, 'event', None) or {}
    current_app.logger.error(
        f"[socket-error] event={event.get('message')} sid={_get_sid()} error={exc!r}", exc_info=exc
    )


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('leaveRoom', handle_leave_room, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
    socketio.on_event('nextQuestion', handle_next_question, namespace=namespace)
    socketio.on_event('submitAnswer', handle_submit_answer, namespace=namespace)
    # A failing handler must not take other rooms down with it
    socketio.on_error_default(handle_socket_error)
