from typing import Iterable, Optional

from scoreboard import db
from scoreboard.models import EventType, MatchEvent


def guarded(stmt) -> int:
    """Execute a guarded UPDATE/DELETE and return how many rows it touched.

    Callers treat zero as "the precondition in the WHERE clause did not
    hold". The session is not synchronized; commit expires stale objects.
    """
    result = db.session.execute(stmt.execution_options(synchronize_session=False))
    return result.rowcount


def latest_event(game_id: int, kinds: Iterable[EventType], team: Optional[str] = None,
                 player_id: Optional[int] = None) -> Optional[MatchEvent]:
    """Most recent matching event by insertion order (highest id)."""
    query = MatchEvent.query.filter(
        MatchEvent.game_id == game_id,
        MatchEvent.event_type.in_(list(kinds)),
    )
    if team is not None:
        query = query.filter(MatchEvent.team == team)
    if player_id is not None:
        query = query.filter(MatchEvent.player_id == player_id)
    return query.order_by(MatchEvent.id.desc()).first()
