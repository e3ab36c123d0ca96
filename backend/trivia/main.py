from flask import Blueprint, current_app, jsonify

from trivia import get_runtime
from trivia.errors import InvalidRoomCode, RoomNotFound

main = Blueprint('main', __name__)


@main.route('/')
def index():
    registry = get_runtime(current_app).registry
    return jsonify({'message': 'Welcome to the trivia room server!', 'rooms': len(registry)})


@main.route('/api/rooms/<string:room_code>/state', methods=['GET'])
def get_room_state(room_code):
    """Public projection of a room: host, started flag and scores."""
    registry = get_runtime(current_app).registry
    try:
        state = registry.get_public_state(room_code)
    except InvalidRoomCode as exc:
        return jsonify(exc.to_dict()), 400
    except RoomNotFound as exc:
        return jsonify(exc.to_dict()), 404
    return jsonify(state)
