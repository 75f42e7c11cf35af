"""Server-authoritative game clock.

The stored row is a snapshot: ``remaining_ms`` as of ``started_at``. While
running, the live value is recomputed from wall-clock time on every read,
so readers never write and never drift apart.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from flask import current_app
from sqlalchemy import and_, case, update

from scoreboard import db
from scoreboard.models import Game, MatchTimer, isoformat_utc, utcnow
from .errors import GameNotFound, PreconditionFailed
from .queries import guarded


@dataclass(frozen=True)
class ClockState:
    game_id: int
    quarter: int
    quarter_ms: int
    running: bool
    remaining_ms: int
    updated_at: datetime

    def to_dict(self):
        return {
            'gameId': self.game_id,
            'quarter': self.quarter,
            'quarterMs': self.quarter_ms,
            'running': self.running,
            'remainingMs': self.remaining_ms,
            'updatedAt': isoformat_utc(self.updated_at),
        }


def elapsed_ms(started_at: datetime, now: datetime) -> int:
    return int((now - started_at).total_seconds() * 1000)


def live_remaining(timer: MatchTimer, now: datetime) -> Tuple[int, bool]:
    """Return (remaining_ms, running) as seen at ``now``.

    Expiry is only reflected in what is reported; the stored row keeps
    its running flag until someone pauses or resets it.
    """
    remaining = max(0, timer.remaining_ms)
    running = bool(timer.running) and remaining > 0
    if running and timer.started_at is not None:
        elapsed = elapsed_ms(timer.started_at, now)
        if elapsed > 0:
            remaining = max(0, remaining - elapsed)
        running = remaining > 0
    return remaining, running


def _default_quarter_ms() -> int:
    return int(current_app.config.get('DEFAULT_QUARTER_MS', 720000))


def ensure_timer(game_id: int, quarter_ms: Optional[int] = None) -> MatchTimer:
    """Return the timer row for a game, creating a stopped one if missing."""
    timer = db.session.get(MatchTimer, game_id)
    if timer is not None:
        return timer
    game = db.session.get(Game, game_id)
    if game is None:
        raise GameNotFound(game_id)
    qms = quarter_ms or _default_quarter_ms()
    timer = MatchTimer(
        game_id=game_id,
        quarter=game.quarter,
        quarter_ms=qms,
        remaining_ms=qms,
        running=False,
        started_at=None,
        updated_at=utcnow(),
    )
    db.session.add(timer)
    db.session.flush()
    current_app.logger.info(f"[clock-create] game={game_id} quarter_ms={qms}")
    return timer


def start_timer(game_id: int) -> None:
    ensure_timer(game_id)
    now = utcnow()
    already_running = and_(MatchTimer.running.is_(True), MatchTimer.started_at.isnot(None))
    guarded(
        update(MatchTimer)
        .where(MatchTimer.game_id == game_id)
        .values(
            remaining_ms=case((MatchTimer.remaining_ms <= 0, MatchTimer.quarter_ms), else_=MatchTimer.remaining_ms),
            running=True,
            # a second start keeps the original baseline
            started_at=case((already_running, MatchTimer.started_at), else_=now),
            updated_at=now,
        )
    )


def stop_timer(game_id: int) -> Optional[int]:
    """Fold elapsed running time into the snapshot and stop the clock.

    Returns the stored remaining time, or None when the game has no timer.
    """
    timer = db.session.get(MatchTimer, game_id)
    if timer is None:
        return None
    now = utcnow()
    remaining = timer.remaining_ms
    if timer.running and timer.started_at is not None:
        remaining = max(0, remaining - elapsed_ms(timer.started_at, now))
    affected = guarded(
        update(MatchTimer)
        .where(
            MatchTimer.game_id == game_id,
            MatchTimer.running == timer.running,
            MatchTimer.started_at == timer.started_at if timer.started_at is not None else MatchTimer.started_at.is_(None),
        )
        .values(remaining_ms=remaining, running=False, started_at=None, updated_at=now)
    )
    if affected == 0:
        raise PreconditionFailed('Clock changed while pausing; refresh and retry')
    return remaining


def rewind_timer(game_id: int, quarter: int, quarter_ms: Optional[int] = None) -> None:
    """Stop the clock and load a full period for ``quarter``.

    With ``quarter_ms`` the period length changes too; otherwise the
    stored length is reused.
    """
    ensure_timer(game_id, quarter_ms)
    values = {
        'quarter': quarter,
        'running': False,
        'started_at': None,
        'updated_at': utcnow(),
    }
    if quarter_ms is not None:
        values['quarter_ms'] = quarter_ms
        values['remaining_ms'] = quarter_ms
    else:
        values['remaining_ms'] = MatchTimer.quarter_ms
    guarded(update(MatchTimer).where(MatchTimer.game_id == game_id).values(**values))


def get_clock(game_id: int) -> ClockState:
    timer = db.session.get(MatchTimer, game_id)
    if timer is None:
        raise GameNotFound(game_id, 'Clock for game')
    remaining, running = live_remaining(timer, utcnow())
    return ClockState(
        game_id=timer.game_id,
        quarter=timer.quarter,
        quarter_ms=timer.quarter_ms,
        running=running,
        remaining_ms=remaining,
        updated_at=timer.updated_at,
    )


def start_clock(game_id: int) -> None:
    start_timer(game_id)
    db.session.commit()
    current_app.logger.info(f"[clock-start] game={game_id}")


def pause_clock(game_id: int) -> int:
    remaining = stop_timer(game_id)
    if remaining is None:
        raise GameNotFound(game_id, 'Clock for game')
    db.session.commit()
    current_app.logger.info(f"[clock-pause] game={game_id} remaining_ms={remaining}")
    return remaining


def reset_clock(game_id: int, quarter_ms: Optional[int] = None) -> None:
    timer = ensure_timer(game_id, quarter_ms)
    rewind_timer(game_id, timer.quarter, quarter_ms)
    db.session.commit()
    current_app.logger.info(f"[clock-reset] game={game_id} quarter_ms={quarter_ms or 'unchanged'}")
