from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _cors_origins(config):
    origins = config.get('CORS_ORIGINS') or ['*']
    return '*' if '*' in origins else origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    origins = _cors_origins(flask_app.config)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # Game services shared by the game routes and timer callbacks
    from concentration.services.games import ScoreRecorder, create_scheduler
    from concentration.services.leaderboard import LocalLeaderboardCache, RemoteLeaderboardClient
    flask_app.extensions['concentration.scheduler'] = create_scheduler(flask_app)
    flask_app.extensions['concentration.cache'] = LocalLeaderboardCache(flask_app.config['LEADERBOARD_CACHE_PATH'])
    flask_app.extensions['concentration.recorder'] = ScoreRecorder(
        RemoteLeaderboardClient(
            flask_app.config['LEADERBOARD_URL'],
            timeout=flask_app.config.get('LEADERBOARD_TIMEOUT_SEC'),
        ),
        flask_app.extensions['concentration.cache'],
    )

    # Import and register blueprints here
    from concentration.main import main
    flask_app.register_blueprint(main)

    from concentration.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api')

    from concentration.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Register Socket.IO event handlers
    from concentration.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the leaderboard tables."""
        import concentration.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
