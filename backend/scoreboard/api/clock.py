from flask import Blueprint, current_app, jsonify

from scoreboard.api import payloads
from scoreboard.services.games import clock as game_clock
from scoreboard.services.games.errors import InvalidRequest
from scoreboard.socketio_events import broadcast_state


clock = Blueprint('clock', __name__)


@clock.route('/<int:game_id>/clock', methods=['GET'])
def get_clock(game_id):
    return jsonify(game_clock.get_clock(game_id).to_dict())


@clock.route('/<int:game_id>/clock/start', methods=['POST'])
def start_clock(game_id):
    game_clock.start_clock(game_id)
    broadcast_state(game_id)
    return '', 204


@clock.route('/<int:game_id>/clock/pause', methods=['POST'])
def pause_clock(game_id):
    game_clock.pause_clock(game_id)
    broadcast_state(game_id)
    return '', 204


@clock.route('/<int:game_id>/clock/reset', methods=['POST'])
def reset_clock(game_id):
    data = payloads.json_body(required=False)
    quarter_ms = payloads.optional_int(data, 'quarterMs')
    allowed = tuple(current_app.config.get('ALLOWED_QUARTER_MS', ()))
    if quarter_ms is not None and quarter_ms not in allowed:
        raise InvalidRequest(f'quarterMs must be one of {", ".join(str(v) for v in allowed)}')
    game_clock.reset_clock(game_id, quarter_ms)
    broadcast_state(game_id)
    return '', 204
