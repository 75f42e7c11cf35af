"""Failures raised by the game services.

Routes never inspect row counts themselves: a guarded statement that
touches zero rows is turned into one of these by the service that ran it.
"""


class GameError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class GameNotFound(GameError):
    status_code = 404

    def __init__(self, game_id: int, what: str = 'Game'):
        super().__init__(f'{what} {game_id} not found')
        self.game_id = game_id


class PreconditionFailed(GameError):
    """The game is not in a state that allows the requested transition."""


class InvalidRequest(GameError):
    """Malformed or out-of-range input, rejected before touching the database."""
