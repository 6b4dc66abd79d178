import base64
import os
import sys
import pytest

# Ensure the backend root (containing the `civrelay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from civrelay import create_app, db, socketio


CHAT_NS = '/chat'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MIN_PASSWORD_LENGTH = 6
    CHAT_NAMESPACE = CHAT_NS
    CORS_ORIGINS = ['*']
    LOG_LEVEL = 'DEBUG'


def basic_auth(user_id, password):
    token = base64.b64encode(f'{user_id}:{password}'.encode('utf-8')).decode('ascii')
    return {'Authorization': f'Basic {token}'}


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import civrelay.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['connection_registry']


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients authenticated as a given user."""
    opened = []

    def _connect(user_id='alice', password='', headers=None):
        if headers is None:
            headers = basic_auth(user_id, password)
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace=CHAT_NS,
            headers=headers,
        )
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected(CHAT_NS):
                test_client.disconnect(namespace=CHAT_NS)
        except Exception:
            pass
