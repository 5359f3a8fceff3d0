import os
import sys
from concurrent.futures import Executor, Future
from datetime import datetime
import pytest
import httpx

# Ensure the project root (containing the `mathsprint` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from mathsprint import create_app, db, socketio
from mathsprint.client.stores import HttpScoreStore
from mathsprint.errors import InternalError
from mathsprint.client.timers import ManualScheduler
from mathsprint.schemas import parse_score_submission
from mathsprint.services.scores.base import ScoreRecord, ScoreStore, rank


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LEADERBOARD_LIMIT = 10
    BEST_SCORE_PER_MODE = False


class InlineExecutor(Executor):
    """Runs submitted work immediately so session side effects are deterministic."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class MemoryScoreStore(ScoreStore):
    def __init__(self, leaderboard_limit=10):
        self.leaderboard_limit = leaderboard_limit
        self.records = []
        self.fail_saves = False

    def save(self, player_name, score, game_mode):
        if self.fail_saves:
            raise InternalError('disk on fire')
        sub = parse_score_submission({'player_name': player_name, 'score': score, 'game_mode': game_mode})
        record = ScoreRecord(len(self.records) + 1, sub.player_name, sub.score, sub.game_mode.value, datetime.now())
        self.records.append(record)
        return record

    def get_leaderboard(self, game_mode=None):
        return rank([r for r in self.records if not game_mode or r.game_mode == game_mode], self.leaderboard_limit)

    def get_player_best_score(self, player_name, game_mode):
        return max((r.score for r in self.records if r.player_name == player_name), default=0)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import mathsprint.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


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
    except Exception:
        pass


@pytest.fixture()
def http_store(flask_app):
    """HttpScoreStore wired to the in-process app instead of a real socket."""
    http_client = httpx.Client(transport=httpx.WSGITransport(app=flask_app), base_url='http://testserver')
    store = HttpScoreStore('http://testserver', client=http_client)
    yield store
    store.close()


@pytest.fixture()
def memory_store():
    return MemoryScoreStore()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def executor():
    return InlineExecutor()
