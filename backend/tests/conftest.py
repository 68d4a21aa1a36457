import os
import sys
import pytest

# Ensure the backend root (containing the `shaperun` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from shaperun import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    GAME_START_DELAY_SEC = 0
    GAME_ASSET_DIR = os.path.join(BACKEND_ROOT, 'shaperun', 'static', 'imgs')


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import shaperun.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def register(client, username='alice', password='secret', **extra):
    body = {'username': username, 'password': password}
    body.update(extra)
    return client.post('/register', json=body)


def login(client, username='alice', password='secret'):
    return client.post('/login', json={'username': username, 'password': password})


@pytest.fixture()
def logged_in_client(client):
    register(client, real_name='Alice Liddell', bio='Falling.')
    assert login(client).status_code == 200
    return client


@pytest.fixture()
def sio_client(flask_app, client):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=client,
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
