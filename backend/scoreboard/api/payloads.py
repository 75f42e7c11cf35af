"""Request body parsing shared by the game and clock routes.

Everything here runs before a service is called, so a bad body never
reaches the database.
"""

from typing import Optional

from flask import request

from scoreboard.models import Team
from scoreboard.services.games.errors import InvalidRequest

# matches Game.home_team / Game.away_team
TEAM_NAME_MAX = 100


def json_body(required: bool = True) -> dict:
    data = request.get_json(silent=True)
    if data is None and not required:
        return {}
    if not isinstance(data, dict):
        raise InvalidRequest('A JSON object body is required')
    return data


def optional_int(data: dict, key: str) -> Optional[int]:
    value = data.get(key)
    if value is None or value == '':
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidRequest(f'{key} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f'{key} must be an integer') from None


def team(data: dict) -> str:
    value = str(data.get('team') or '').strip().upper()
    if value not in Team.ALL:
        raise InvalidRequest('Team must be HOME or AWAY')
    return value


def points(data: dict) -> int:
    value = optional_int(data, 'points')
    if value not in (1, 2, 3):
        raise InvalidRequest('Points must be 1, 2 or 3')
    return value


def player_ref(data: dict, key: str) -> Optional[int]:
    """playerId / playerNumber; jersey 0 exists, negatives do not."""
    value = optional_int(data, key)
    if value is not None and value < 0:
        raise InvalidRequest(f'{key} must not be negative')
    return value


def team_name(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidRequest(f'{key} must be a string')
    value = value.strip()
    if len(value) > TEAM_NAME_MAX:
        raise InvalidRequest(f'{key} must be at most {TEAM_NAME_MAX} characters')
    return value
