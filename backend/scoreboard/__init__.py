from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api.games import games
    from scoreboard.api.clock import clock
    # Game actions and the clock sub-resource share the /api/games prefix
    flask_app.register_blueprint(games, url_prefix='/api/games')
    flask_app.register_blueprint(clock, url_prefix='/api/games')

    from scoreboard.services.games.errors import GameError

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        # a failed guard may follow writes made earlier in the same request
        db.session.rollback()
        return jsonify(exc.to_dict()), exc.status_code

    from scoreboard.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from scoreboard.services.games.lifecycle import create_game
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed a scheduled demo game with its stopped clock
            game, quarter_ms = create_game('Home', 'Away', flask_app.config.get('DEFAULT_QUARTER_MS'))
            print(f'Database has been reset and seeded! Demo game {game.id} ({quarter_ms} ms quarters)')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
