import enum
from datetime import datetime, timezone

from scoreboard import db


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so every stored value is naive."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value: datetime) -> str:
    """Stored values are naive UTC; emit them with an explicit offset."""
    return value.replace(tzinfo=timezone.utc).isoformat()


class GameStatus:
    SCHEDULED = 'SCHEDULED'
    IN_PROGRESS = 'IN_PROGRESS'
    FINISHED = 'FINISHED'


class Team:
    HOME = 'HOME'
    AWAY = 'AWAY'

    ALL = (HOME, AWAY)


class EventType(enum.Enum):
    """Kinds of log entries; scoring kinds carry their point value."""

    POINT_1 = 'POINT_1'
    POINT_2 = 'POINT_2'
    POINT_3 = 'POINT_3'
    FOUL = 'FOUL'
    REMOVE_FOUL = 'REMOVE_FOUL'
    REMOVE_SCORE = 'REMOVE_SCORE'
    UNDO = 'UNDO'

    @property
    def points(self) -> int:
        return _POINTS.get(self, 0)

    @property
    def is_point(self) -> bool:
        return self in _POINTS

    @classmethod
    def point(cls, points: int) -> 'EventType':
        for kind, value in _POINTS.items():
            if value == points:
                return kind
        raise ValueError(f'no scoring event worth {points} points')


_POINTS = {
    EventType.POINT_1: 1,
    EventType.POINT_2: 2,
    EventType.POINT_3: 3,
}

POINT_EVENTS = tuple(_POINTS)
UNDOABLE_EVENTS = POINT_EVENTS + (EventType.FOUL,)


class Game(db.Model):
    __tablename__ = 'game'
    __table_args__ = (
        db.CheckConstraint('home_score >= 0 AND away_score >= 0', name='ck_game_scores_non_negative'),
    )
    id = db.Column(db.Integer, primary_key=True)
    home_team = db.Column(db.String(100), nullable=False)
    away_team = db.Column(db.String(100), nullable=False)
    home_score = db.Column(db.Integer, nullable=False, default=0)
    away_score = db.Column(db.Integer, nullable=False, default=0)
    quarter = db.Column(db.Integer, nullable=False, default=1)  # 1-4 regulation, 5+ overtime
    status = db.Column(db.String(16), nullable=False, default=GameStatus.SCHEDULED, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'gameId': self.id,
            'homeTeam': self.home_team,
            'awayTeam': self.away_team,
            'homeScore': self.home_score,
            'awayScore': self.away_score,
            'quarter': self.quarter,
            'status': self.status,
            'createdAt': isoformat_utc(self.created_at) if self.created_at else None,
        }


class MatchTimer(db.Model):
    __tablename__ = 'match_timer'
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), primary_key=True)
    quarter = db.Column(db.Integer, nullable=False, default=1)
    quarter_ms = db.Column(db.Integer, nullable=False)
    remaining_ms = db.Column(db.Integer, nullable=False)
    running = db.Column(db.Boolean, nullable=False, default=False)
    started_at = db.Column(db.DateTime, nullable=True)  # set only while running
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)


class MatchEvent(db.Model):
    __tablename__ = 'match_event'
    # ids are the recency order and must never be reused
    __table_args__ = {'sqlite_autoincrement': True}
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    quarter = db.Column(db.Integer, nullable=False)
    team = db.Column(db.String(8), nullable=False)
    event_type = db.Column(db.Enum(EventType, native_enum=False, length=16), nullable=False)
    player_id = db.Column(db.Integer, nullable=True)
    player_number = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'eventId': self.id,
            'gameId': self.game_id,
            'quarter': self.quarter,
            'team': self.team,
            'eventType': self.event_type.value,
            'playerId': self.player_id,
            'playerNumber': self.player_number,
            'createdAt': isoformat_utc(self.created_at) if self.created_at else None,
        }
