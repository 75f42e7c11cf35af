import os
import sys
from datetime import datetime, timedelta

import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from scoreboard import create_app, db, socketio


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DEFAULT_QUARTER_MS = 720000
    OVERTIME_QUARTER_MS = 300000
    ALLOWED_QUARTER_MS = (10000, 30000, 300000, 600000, 720000)
    REGULATION_QUARTERS = 4
    TEAM_BONUS_FOULS = 5
    PLAYER_FOUL_LIMIT = 5


class FakeClock:
    """Stands in for wall-clock time inside the clock service."""

    def __init__(self):
        self.now = datetime(2026, 1, 1, 20, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += timedelta(milliseconds=ms)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import scoreboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def fake_clock(monkeypatch):
    from scoreboard.services.games import clock as clock_service
    fake = FakeClock()
    monkeypatch.setattr(clock_service, 'utcnow', fake)
    return fake


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except RuntimeError:
        pass


@pytest.fixture()
def new_game(client):
    def _create(**body):
        res = client.post('/api/games', json=body)
        assert res.status_code == 201
        return res.get_json()['gameId']
    return _create


@pytest.fixture()
def live_game(client, new_game, fake_clock):
    game_id = new_game(home='Lakers', away='Celtics', quarterMs=720000)
    assert client.post(f'/api/games/{game_id}/start').status_code == 204
    return game_id
