import os
import sys

import pytest

# Ensure the backend root (containing the `krakel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from krakel.config import Config
from krakel.game.boards import BoardCatalog
from krakel.game.service import RoomRegistry
from krakel.game.words import WordPool
from krakel.server import create_app


TEST_WORDS = ['cat', 'dog', 'sun', 'ant', 'bee', 'owl', 'fox', 'elk', 'yak']
TEST_BOARDS = ['b1.png', 'b2.png', 'b3.png']


class FirstPicks:
    """Deterministic stand-in for random.Random: samples take the head of the
    population, choices walk the sequence round-robin."""

    def __init__(self):
        self._turn = 0

    def sample(self, population, k):
        return list(population)[:k]

    def choice(self, seq):
        item = seq[self._turn % len(seq)]
        self._turn += 1
        return item


@pytest.fixture()
def boards_dir(tmp_path):
    path = tmp_path / 'boards'
    path.mkdir()
    for name in TEST_BOARDS:
        (path / name).write_bytes(b'\x89PNG fake')
    (path / 'README.txt').write_text('not a board')
    return path


@pytest.fixture()
def registry(boards_dir):
    pool = WordPool(TEST_WORDS, rng=FirstPicks())
    boards = BoardCatalog(boards_dir, base_url='http://test', rng=FirstPicks())
    return RoomRegistry(pool, boards, clock=lambda: 1000)


@pytest.fixture()
def flask_app(tmp_path, boards_dir):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = 'test-secret'
        SOCKETIO_ASYNC_MODE = 'threading'
        TRUST_PROXY_HEADERS = False
        BACKEND_URL = 'http://test'
        BOARDS_DIR = str(boards_dir)
        UPLOADS_DIR = str(tmp_path / 'uploads')
        DEBUG_RESULTS = False
        WORD_POOL = WordPool(TEST_WORDS, rng=FirstPicks())

    application, _ = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    sio = flask_app.extensions['socketio']
    created = []

    def _make():
        test_client = sio.test_client(flask_app)
        created.append(test_client)
        return test_client

    yield _make

    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
