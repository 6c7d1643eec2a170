import os
import sys
import random
import pytest

# Ensure the src root (containing the `flappy_pushup` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SRC_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..', 'src'))
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from flappy_pushup.physics_engine import GameEngine
from flappy_pushup.ranking import RankingService
from flappy_pushup.server import create_app
from flappy_pushup.server_db import Database


class TestConfig:
    TESTING = True
    DATABASE_PATH = ':memory:'
    CORS_ORIGINS = '*'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application
    application.extensions['ranking'].db.close()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def service():
    db = Database(':memory:')
    yield RankingService(db)
    db.close()


@pytest.fixture()
def engine():
    return GameEngine(width=960, height=720, rng=random.Random(1234))
