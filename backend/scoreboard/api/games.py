from flask import Blueprint, jsonify

from scoreboard.api import payloads
from scoreboard.services.games import fouls, lifecycle, scoring
from scoreboard.socketio_events import broadcast_state


games = Blueprint('games', __name__)


def _changed(game_id: int):
    broadcast_state(game_id)
    return '', 204


@games.route('', methods=['GET'])
def list_games():
    return jsonify([g.to_dict() for g in lifecycle.list_games()])


@games.route('', methods=['POST'])
def create_game():
    data = payloads.json_body(required=False)
    game, quarter_ms = lifecycle.create_game(
        payloads.team_name(data, 'home'),
        payloads.team_name(data, 'away'),
        payloads.optional_int(data, 'quarterMs'),
    )
    return jsonify({
        'gameId': game.id,
        'home': game.home_team,
        'away': game.away_team,
        'quarterMs': quarter_ms,
    }), 201


@games.route('/<int:game_id>', methods=['GET'])
def get_game(game_id):
    game, events = lifecycle.get_game_detail(game_id)
    return jsonify({
        'game': game.to_dict(),
        'events': [e.to_dict() for e in events],
    })


@games.route('/<int:game_id>/start', methods=['POST'])
def start_game(game_id):
    lifecycle.start_game(game_id)
    return _changed(game_id)


@games.route('/<int:game_id>/finish', methods=['POST'])
def finish_game(game_id):
    lifecycle.finish_game(game_id)
    return _changed(game_id)


@games.route('/<int:game_id>/advance-quarter', methods=['POST'])
def advance_quarter(game_id):
    lifecycle.advance_quarter(game_id)
    return _changed(game_id)


@games.route('/<int:game_id>/score', methods=['POST'])
def score(game_id):
    data = payloads.json_body()
    scoring.score(
        game_id,
        payloads.team(data),
        payloads.points(data),
        player_id=payloads.player_ref(data, 'playerId'),
        player_number=payloads.player_ref(data, 'playerNumber'),
    )
    return _changed(game_id)


@games.route('/<int:game_id>/foul', methods=['POST'])
def foul(game_id):
    data = payloads.json_body()
    scoring.foul(
        game_id,
        payloads.team(data),
        player_id=payloads.player_ref(data, 'playerId'),
        player_number=payloads.player_ref(data, 'playerNumber'),
    )
    return _changed(game_id)


@games.route('/<int:game_id>/remove-foul', methods=['POST'])
def remove_foul(game_id):
    data = payloads.json_body()
    scoring.remove_foul(game_id, payloads.team(data), player_id=payloads.player_ref(data, 'playerId'))
    return _changed(game_id)


@games.route('/<int:game_id>/remove-score', methods=['POST'])
def remove_score(game_id):
    data = payloads.json_body()
    scoring.remove_score(game_id, payloads.team(data))
    return _changed(game_id)


@games.route('/<int:game_id>/undo', methods=['POST'])
def undo(game_id):
    scoring.undo(game_id)
    return _changed(game_id)


@games.route('/<int:game_id>/fouls/summary', methods=['GET'])
def foul_summary(game_id):
    return jsonify(fouls.foul_summary(game_id))
