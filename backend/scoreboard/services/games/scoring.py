from typing import Optional

from flask import current_app
from sqlalchemy import case, update

from scoreboard import db
from scoreboard.models import (
    POINT_EVENTS,
    UNDOABLE_EVENTS,
    EventType,
    Game,
    GameStatus,
    MatchEvent,
    Team,
)
from .errors import InvalidRequest, PreconditionFailed
from .lifecycle import require_game
from .queries import guarded, latest_event


def _check_team(team: str) -> None:
    if team not in Team.ALL:
        raise InvalidRequest('Team must be HOME or AWAY')


def _score_column(team: str):
    return Game.home_score if team == Team.HOME else Game.away_score


def _require_in_progress(game_id: int) -> Game:
    game = require_game(game_id)
    if game.status != GameStatus.IN_PROGRESS:
        raise PreconditionFailed(f'Game {game_id} is not {GameStatus.IN_PROGRESS}')
    return game


def _take_back_points(game_id: int, team: str, points: int) -> None:
    """Subtract points unless that would drive the score below zero."""
    column = _score_column(team)
    guarded(
        update(Game)
        .where(Game.id == game_id)
        .values({column: case((column >= points, column - points), else_=column)})
    )


def _replace_event(original: MatchEvent, compensation: MatchEvent) -> MatchEvent:
    db.session.delete(original)
    db.session.add(compensation)
    db.session.flush()
    return compensation


def score(game_id: int, team: str, points: int, player_id: Optional[int] = None,
          player_number: Optional[int] = None) -> MatchEvent:
    """Add points for a team and log a POINT event in one transaction."""
    _check_team(team)
    try:
        kind = EventType.point(points)
    except ValueError:
        raise InvalidRequest('Points must be 1, 2 or 3') from None
    game = _require_in_progress(game_id)
    column = _score_column(team)
    affected = guarded(
        update(Game)
        .where(Game.id == game_id, Game.status == GameStatus.IN_PROGRESS)
        .values({column: column + points})
    )
    if affected == 0:
        raise PreconditionFailed(f'Game {game_id} is not {GameStatus.IN_PROGRESS}')

    event = MatchEvent(game_id=game_id, quarter=game.quarter, team=team, event_type=kind,
                       player_id=player_id, player_number=player_number)
    db.session.add(event)
    db.session.commit()
    current_app.logger.info(f"[score] game={game_id} team={team} points={points} event={event.id}")
    return event


def foul(game_id: int, team: str, player_id: Optional[int] = None,
         player_number: Optional[int] = None) -> MatchEvent:
    _check_team(team)
    game = _require_in_progress(game_id)
    event = MatchEvent(game_id=game_id, quarter=game.quarter, team=team, event_type=EventType.FOUL,
                       player_id=player_id, player_number=player_number)
    db.session.add(event)
    db.session.commit()
    current_app.logger.info(f"[foul] game={game_id} team={team} player={player_id or player_number} event={event.id}")
    return event


def remove_foul(game_id: int, team: str, player_id: Optional[int] = None) -> MatchEvent:
    """Delete the team's latest foul (optionally for one player) and log REMOVE_FOUL."""
    _check_team(team)
    game = require_game(game_id)
    last = latest_event(game_id, (EventType.FOUL,), team=team, player_id=player_id)
    if last is None:
        raise PreconditionFailed('No foul found to remove')

    removed_id = last.id
    compensation = _replace_event(last, MatchEvent(
        game_id=game_id, quarter=game.quarter, team=team,
        event_type=EventType.REMOVE_FOUL, player_id=player_id,
    ))
    db.session.commit()
    current_app.logger.info(f"[remove-foul] game={game_id} team={team} removed={removed_id}")
    return compensation


def remove_score(game_id: int, team: str) -> MatchEvent:
    """Take back the team's latest basket and log REMOVE_SCORE."""
    _check_team(team)
    game = require_game(game_id)
    last = latest_event(game_id, POINT_EVENTS, team=team)
    if last is None:
        raise PreconditionFailed('No score found to remove')

    removed_id, points = last.id, last.event_type.points
    _take_back_points(game_id, team, points)
    compensation = _replace_event(last, MatchEvent(
        game_id=game_id, quarter=game.quarter, team=team, event_type=EventType.REMOVE_SCORE,
    ))
    db.session.commit()
    current_app.logger.info(f"[remove-score] game={game_id} team={team} points={points} removed={removed_id}")
    return compensation


def undo(game_id: int) -> MatchEvent:
    """Reverse the latest basket or foul of either team.

    Administrative entries (removals and earlier undos) are skipped. The
    UNDO record keeps the team and quarter of the event it reverses.
    """
    require_game(game_id)
    last = latest_event(game_id, UNDOABLE_EVENTS)
    if last is None:
        raise PreconditionFailed('No event to undo')

    removed_id, kind, team = last.id, last.event_type, last.team
    if kind.is_point:
        _take_back_points(game_id, team, kind.points)
    compensation = _replace_event(last, MatchEvent(
        game_id=game_id, quarter=last.quarter, team=team, event_type=EventType.UNDO,
    ))
    db.session.commit()
    current_app.logger.info(f"[undo] game={game_id} team={team} type={kind.value} removed={removed_id}")
    return compensation
