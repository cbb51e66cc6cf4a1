import os
import sys
import pytest

# Ensure the backend root (containing the `concentration` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from concentration import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PORT = 4000
    LEADERBOARD_URL = 'http://leaderboard.test'
    LEADERBOARD_TIMEOUT_SEC = 1.0
    LEADERBOARD_CACHE_PATH = 'leaderboard_cache.json'
    FLIP_MATCH_DELAY_MS = 600
    FLIP_MISMATCH_DELAY_MS = 800
    CORS_ORIGINS = ['*']


@pytest.fixture()
def cache_path(tmp_path):
    return str(tmp_path / 'leaderboard_cache.json')


@pytest.fixture()
def flask_app(cache_path):
    config = type('Config', (TestConfig,), {'LEADERBOARD_CACHE_PATH': cache_path})
    application = create_app(config)
    with application.app_context():
        # Ensure models are imported so tables are created
        import concentration.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
    from concentration.api.games import _sessions
    for session in list(_sessions.values()):
        session.close()
    _sessions.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def scheduler(flask_app):
    return flask_app.extensions['concentration.scheduler']


@pytest.fixture()
def recorder(flask_app):
    return flask_app.extensions['concentration.recorder']


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
    except Exception:
        pass
