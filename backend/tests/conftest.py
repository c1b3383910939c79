import os
import sys
import pytest

# Ensure the backend root (containing the `lota` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from lota import create_app, get_session, socketio
from lota.services.games import DrawPool, DrawTimer, GameSession


ADMIN_PASSWORD = 'test-admin'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ADMIN_PASSWORD = ADMIN_PASSWORD
    ADMIN_PASSWORD_HASH = None
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = ['http://localhost:5173']
    DEFAULT_MAX_NUMBERS = 100
    DEFAULT_WINNERS_COUNT = 3
    DEFAULT_PRICE_PER_CHIP = 10.0
    DEFAULT_DRAW_INTERVAL_SEC = 4.0
    DEFAULT_VOICE = 'female'
    MAX_NUMBERS_LIMIT = 1000
    MIN_DRAW_INTERVAL_SEC = 0.5
    STRICT_INVARIANTS = None


class RecordingBroadcaster:
    """Collects outbound events instead of pushing them to sockets."""

    def __init__(self):
        self.events = []

    def sync(self, state, to=None):
        self.events.append(('sync', state, to))

    def new_number(self, number, voice):
        self.events.append(('new_number', {'number': number, 'voice': voice}, None))

    def announce(self, text):
        self.events.append(('speak_announcement', {'text': text}, None))

    def error(self, to, text):
        self.events.append(('error_msg', {'text': text}, to))

    def names(self):
        return [name for name, _, _ in self.events]

    def of(self, name):
        return [payload for n, payload, _ in self.events if n == name]

    def clear(self):
        self.events.clear()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def session(broadcaster):
    """A session with a manual timer: tests call tick() themselves."""
    return GameSession(
        broadcaster=broadcaster,
        check_credential=lambda credential: credential == ADMIN_PASSWORD,
        timer=DrawTimer(),
        pool=DrawPool(),
        settings=vars(TestConfig),
        strict=True,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        get_session(application).timer.cancel()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Build Socket.IO test clients connected to /ws; all are disconnected afterwards."""
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def app_factory():
    """Build apps from TestConfig with attribute overrides."""
    created = []

    def _make(**overrides):
        config_class = type('OverrideConfig', (TestConfig,), overrides)
        application = create_app(config_class)
        created.append(application)
        return application

    yield _make
    for application in created:
        get_session(application).timer.cancel()
