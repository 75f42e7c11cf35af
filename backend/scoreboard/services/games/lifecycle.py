from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import update

from scoreboard import db
from scoreboard.models import Game, GameStatus, MatchEvent, MatchTimer, utcnow
from . import clock
from .errors import GameNotFound, PreconditionFailed
from .queries import guarded


def require_game(game_id: int) -> Game:
    game = db.session.get(Game, game_id)
    if game is None:
        raise GameNotFound(game_id)
    return game


def _transition(game_id: int, expected: str, target: str) -> None:
    """Compare-and-swap the status; exactly one concurrent caller wins."""
    affected = guarded(
        update(Game)
        .where(Game.id == game_id, Game.status == expected)
        .values(status=target)
    )
    if affected == 0:
        require_game(game_id)
        current_app.logger.warning(f"[transition-reject] game={game_id} {expected} -> {target}")
        raise PreconditionFailed(f'Game {game_id} is not {expected}')


def resolve_quarter_ms(requested: Optional[int]) -> int:
    """Map a requested period length onto the configured set of lengths."""
    cfg = current_app.config
    default = int(cfg.get('DEFAULT_QUARTER_MS', 720000))
    allowed = tuple(cfg.get('ALLOWED_QUARTER_MS', ()))
    if requested is None or requested not in allowed:
        return default
    return requested


def create_game(home: Optional[str], away: Optional[str], quarter_ms: Optional[int] = None) -> Tuple[Game, int]:
    home = (home or '').strip() or 'Home'
    away = (away or '').strip() or 'Away'
    qms = resolve_quarter_ms(quarter_ms)

    game = Game(home_team=home, away_team=away, home_score=0, away_score=0,
                quarter=1, status=GameStatus.SCHEDULED)
    db.session.add(game)
    db.session.flush()
    db.session.add(MatchTimer(
        game_id=game.id,
        quarter=1,
        quarter_ms=qms,
        remaining_ms=qms,
        running=False,
        started_at=None,
        updated_at=utcnow(),
    ))
    db.session.commit()
    current_app.logger.info(f"[game-create] game={game.id} home={home!r} away={away!r} quarter_ms={qms}")
    return game, qms


def list_games() -> List[Game]:
    limit = int(current_app.config.get('GAMES_LIST_LIMIT', 50))
    return Game.query.order_by(Game.id.desc()).limit(limit).all()


def get_game_detail(game_id: int) -> Tuple[Game, List[MatchEvent]]:
    game = require_game(game_id)
    limit = int(current_app.config.get('RECENT_EVENTS_LIMIT', 100))
    events = (
        MatchEvent.query.filter_by(game_id=game_id)
        .order_by(MatchEvent.id.desc())
        .limit(limit)
        .all()
    )
    return game, events


def start_game(game_id: int) -> None:
    _transition(game_id, GameStatus.SCHEDULED, GameStatus.IN_PROGRESS)
    clock.start_timer(game_id)
    db.session.commit()
    current_app.logger.info(f"[game-start] game={game_id}")


def finish_game(game_id: int) -> None:
    _transition(game_id, GameStatus.IN_PROGRESS, GameStatus.FINISHED)
    clock.stop_timer(game_id)
    db.session.commit()
    current_app.logger.info(f"[game-finish] game={game_id}")


def advance_quarter(game_id: int) -> int:
    """Move to the next period and load a stopped clock for it.

    Past regulation the game may only continue when tied; overtime
    periods use the configured overtime length.
    """
    cfg = current_app.config
    regulation = int(cfg.get('REGULATION_QUARTERS', 4))
    overtime_ms = int(cfg.get('OVERTIME_QUARTER_MS', 300000))

    game = require_game(game_id)
    if game.status != GameStatus.IN_PROGRESS:
        raise PreconditionFailed(f'Game {game_id} is not {GameStatus.IN_PROGRESS}')

    current = game.quarter
    after_regulation = current >= regulation
    if after_regulation and game.home_score != game.away_score:
        current_app.logger.warning(
            f"[advance-reject] game={game_id} quarter={current} score={game.home_score}-{game.away_score}"
        )
        raise PreconditionFailed('The game has a winner and must be finished')

    # the snapshot read above is the precondition; a concurrent score or advance loses the race
    affected = guarded(
        update(Game)
        .where(
            Game.id == game_id,
            Game.status == GameStatus.IN_PROGRESS,
            Game.quarter == current,
            Game.home_score == game.home_score,
            Game.away_score == game.away_score,
        )
        .values(quarter=current + 1)
    )
    if affected == 0:
        raise PreconditionFailed(f'Game {game_id} changed while advancing; refresh and retry')

    new_quarter = current + 1
    clock.rewind_timer(game_id, new_quarter, overtime_ms if after_regulation else None)
    db.session.commit()
    current_app.logger.info(
        f"[advance] game={game_id} quarter {current} -> {new_quarter}{' overtime' if after_regulation else ''}"
    )
    return new_quarter
