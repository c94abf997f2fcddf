import os
import sys
import mongomock
import pytest

# Ensure the server root (containing the `wordwar` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SERVER_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if SERVER_ROOT not in sys.path:
    sys.path.insert(0, SERVER_ROOT)

from wordwar import create_app
from wordwar.config import TestingConfig
from wordwar.engine.scheduling import ManualScheduler
from wordwar.services import initialize_services


@pytest.fixture()
def db():
    return mongomock.MongoClient().wordwar_test


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def game_service(db, scheduler):
    return initialize_services(db, TestingConfig, scheduler)


@pytest.fixture()
def flask_app(game_service):
    application, _ = create_app(TestingConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def signup(client):
    """Register and log in a player, returning (auth headers, user)."""
    def _signup(username, password='secret123'):
        res = client.post('/api/auth/register', json={'username': username, 'password': password})
        assert res.status_code == 201
        res = client.post('/api/auth/login', json={'username': username, 'password': password})
        assert res.status_code == 200
        data = res.get_json()
        return {'Authorization': f"Bearer {data['token']}"}, data['user']
    return _signup


@pytest.fixture()
def admin_headers(client):
    res = client.post('/api/admin/login', json={'password': TestingConfig.ADMIN_PASSWORD})
    assert res.status_code == 200
    return {'Authorization': f"Bearer {res.get_json()['token']}"}
