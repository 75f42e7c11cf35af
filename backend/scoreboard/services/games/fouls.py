"""Foul counts derived from the event log.

Bonus and foul-out are reported, never enforced: recording a sixth foul
for a player is allowed, the summary just flags them as fouled out.
"""

from flask import current_app
from sqlalchemy import func

from scoreboard import db
from scoreboard.models import EventType, MatchEvent
from .lifecycle import require_game


def foul_summary(game_id: int) -> dict:
    require_game(game_id)
    cfg = current_app.config
    bonus_at = int(cfg.get('TEAM_BONUS_FOULS', 5))
    limit = int(cfg.get('PLAYER_FOUL_LIMIT', 5))

    fouls = func.count(MatchEvent.id).label('fouls')
    team_rows = (
        db.session.query(MatchEvent.quarter, MatchEvent.team, fouls)
        .filter(MatchEvent.game_id == game_id, MatchEvent.event_type == EventType.FOUL)
        .group_by(MatchEvent.quarter, MatchEvent.team)
        .order_by(MatchEvent.quarter, MatchEvent.team)
        .all()
    )
    player_rows = (
        db.session.query(MatchEvent.team, MatchEvent.player_id, MatchEvent.player_number, fouls)
        .filter(
            MatchEvent.game_id == game_id,
            MatchEvent.event_type == EventType.FOUL,
            (MatchEvent.player_id.isnot(None)) | (MatchEvent.player_number.isnot(None)),
        )
        .group_by(MatchEvent.team, MatchEvent.player_id, MatchEvent.player_number)
        .order_by(MatchEvent.team, MatchEvent.player_id, MatchEvent.player_number)
        .all()
    )

    return {
        'gameId': game_id,
        'teams': [
            {'quarter': q, 'team': t, 'fouls': n, 'bonus': n >= bonus_at}
            for q, t, n in team_rows
        ],
        'players': [
            {'team': t, 'playerId': pid, 'playerNumber': num, 'fouls': n, 'fouledOut': n >= limit}
            for t, pid, num, n in player_rows
        ],
    }
