import os
import sys
import pytest

# Ensure the backend root (containing the `trivia` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from trivia import create_app, get_runtime, socketio
from trivia.models import Question
from trivia.questions import QuestionBank
from trivia.services.rooms import GameSession, RoomRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ROOM_CODE_LENGTH = 5
    ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
    ROOM_CODE_MAX_ATTEMPTS = 50
    CORRECT_ANSWER_POINTS = 100
    DEFAULT_NICKNAME = 'Affe'
    MAX_NICKNAME_LENGTH = 24
    QUESTION_BANK_PATH = None
    CORS_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


def make_bank(count=3):
    return QuestionBank(
        Question(category='Test', question=f'Question {i}?', options=['a', 'b', 'c', 'd'],
                 correct_index=i % 4, id=i)
        for i in range(1, count + 1)
    )


class SequenceCodes:
    """Deterministic room code factory for tests."""

    def __init__(self, *codes):
        self.codes = list(codes)

    def __call__(self):
        return self.codes.pop(0)


@pytest.fixture()
def bank():
    return make_bank()


@pytest.fixture()
def registry(bank):
    return RoomRegistry(bank)


@pytest.fixture()
def session(registry):
    return GameSession(registry)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def runtime(flask_app):
    return get_runtime(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Create connected Socket.IO test clients; all are disconnected at teardown."""
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        # Flush the 'connected' greeting
        test_client.get_received()
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
