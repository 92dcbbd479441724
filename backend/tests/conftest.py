import os
import sys
import pytest

# Ensure the backend root (containing the `coinchase` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from coinchase import create_app, socketio
from coinchase.models import PlayField


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    LOG_LEVEL = 'DEBUG'
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000']
    PLAY_FIELD_MIN_X = 10
    PLAY_FIELD_MIN_Y = 50
    PLAY_FIELD_MAX_X = 630
    PLAY_FIELD_MAX_Y = 470
    COLLECTIBLE_SIZE = 15
    COLLECTIBLE_SPRITE_VARIANTS = 3
    # Every collectible is worth exactly one point so scores are predictable
    COLLECTIBLE_VALUE_TIERS = ((1, 1.0),)
    WIN_SCORE = 3
    PLAYER_STATE_FIELDS = ('spriteState', 'dir')


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['coinchase.registry']


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients on /ws; all are disconnected on teardown."""
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def sio_client(connect):
    return connect()


@pytest.fixture()
def play_field():
    return PlayField(min_x=10, min_y=50, max_x=630, max_y=470)
