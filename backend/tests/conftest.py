import os
import random
import sys
import pytest

# Ensure the backend root (containing the `app` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app import create_app, socketio
from app.services.games import GameController, Matchmaker, SessionRegistry
from app.services.games.scheduler import ScheduledTask


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SOCKETIO_NAMESPACE = '/ws'
    BOARD_SIZES = (3, 4, 5, 6)
    DEFAULT_BOARD_SIZE = 3
    DEFAULT_DIFFICULTY = 'medium'
    TURN_DURATION_SEC = 35
    # No thinking time so socket tests see the bot reply promptly
    BOT_MOVE_DELAY_MIN_MS = 0
    BOT_MOVE_DELAY_MAX_MS = 0
    CHAT_MAX_LENGTH = 200
    DISPLAY_NAME_MAX_LENGTH = 24


class RecordingGateway:
    """Collects outbound events instead of sending them."""

    def __init__(self):
        self.sent = []
        self.connected = set()

    def emit(self, sid, event, payload=None):
        self.sent.append((sid, event, payload))

    def is_connected(self, sid):
        return sid in self.connected

    def events_for(self, sid, event=None):
        return [p for s, e, p in self.sent if s == sid and (event is None or e == event)]

    def names_for(self, sid):
        return [e for s, e, _ in self.sent if s == sid]

    def clear(self):
        self.sent.clear()


class ManualScheduler:
    """Holds delayed callbacks until the test fires them."""

    def __init__(self):
        self.pending = []

    def call_later(self, delay, callback, *args):
        task = ScheduledTask()
        self.pending.append((delay, callback, args, task))
        return task

    def live(self):
        return [entry for entry in self.pending if not entry[3].cancelled]

    def run_pending(self):
        tasks, self.pending = self.pending, []
        ran = 0
        for _, callback, args, task in tasks:
            if task.cancelled:
                continue
            callback(*args)
            ran += 1
        return ran

    def run_all(self, limit=50):
        for _ in range(limit):
            if not self.run_pending():
                return


@pytest.fixture()
def config():
    return {k: getattr(TestConfig, k) for k in dir(TestConfig) if k.isupper()}


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def registry():
    return SessionRegistry(rng=random.Random(7))


@pytest.fixture()
def controller(registry, gateway, scheduler, config):
    return GameController(registry, gateway, scheduler, config, rng=random.Random(42))


@pytest.fixture()
def matchmaker(controller, gateway):
    return Matchmaker(controller, gateway)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


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
