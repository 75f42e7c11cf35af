import pytest

from scoreboard import db
from scoreboard.models import EventType, Game, MatchEvent
from scoreboard.services.games import clock, lifecycle, scoring
from scoreboard.services.games.errors import GameNotFound, InvalidRequest, PreconditionFailed


@pytest.fixture()
def game_id(flask_app, fake_clock):
    game, _ = lifecycle.create_game('Suns', 'Nets', 720000)
    lifecycle.start_game(game.id)
    return game.id


def test_event_type_points():
    assert EventType.point(2) is EventType.POINT_2
    assert EventType.POINT_3.points == 3
    assert EventType.FOUL.points == 0
    assert not EventType.UNDO.is_point
    with pytest.raises(ValueError):
        EventType.point(4)


def test_status_never_moves_backwards(game_id):
    with pytest.raises(PreconditionFailed):
        lifecycle.start_game(game_id)
    lifecycle.finish_game(game_id)
    for action in (lifecycle.start_game, lifecycle.finish_game, lifecycle.advance_quarter):
        with pytest.raises(PreconditionFailed):
            action(game_id)
        db.session.rollback()
    assert db.session.get(Game, game_id).status == 'FINISHED'


def test_score_service_rejects_bad_input(game_id):
    with pytest.raises(InvalidRequest):
        scoring.score(game_id, 'HOME', 5)
    with pytest.raises(InvalidRequest):
        scoring.foul(game_id, 'BENCH')
    with pytest.raises(GameNotFound):
        scoring.score(game_id + 100, 'HOME', 2)


def test_scores_stay_non_negative_through_reversals(game_id):
    scoring.score(game_id, 'AWAY', 1)
    scoring.score(game_id, 'AWAY', 3)
    scoring.remove_score(game_id, 'AWAY')
    scoring.undo(game_id)
    with pytest.raises(PreconditionFailed):
        scoring.undo(game_id)
    game = db.session.get(Game, game_id)
    assert (game.home_score, game.away_score) == (0, 0)


def test_undo_keeps_quarter_of_reversed_event(game_id):
    scoring.foul(game_id, 'HOME', player_id=3)
    lifecycle.advance_quarter(game_id)
    undo_event = scoring.undo(game_id)
    assert undo_event.event_type is EventType.UNDO
    assert undo_event.quarter == 1
    assert db.session.get(Game, game_id).quarter == 2


def test_event_ids_keep_growing_after_deletes(game_id):
    first = scoring.score(game_id, 'HOME', 2).id
    compensation = scoring.undo(game_id)
    later = scoring.foul(game_id, 'AWAY').id
    assert first < compensation.id < later
    assert MatchEvent.query.filter_by(game_id=game_id).count() == 2


def test_finish_freezes_clock(game_id, fake_clock):
    fake_clock.advance(61000)
    lifecycle.finish_game(game_id)
    fake_clock.advance(10000)
    state = clock.get_clock(game_id)
    assert state.running is False
    assert state.remaining_ms == 659000
