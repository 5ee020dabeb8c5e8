import base64
import os
import sys
import pytest
from flask_bcrypt import generate_password_hash

# Ensure the repository root (containing `broker` and `config`) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from broker import create_app
from broker.services.registry import GameRegistry

CLIENT_TOKEN = 's3cr3t'
ADMIN_TOKEN = 'ag3nt'


def _hash(password):
    return generate_password_hash(password, rounds=4).decode('utf-8')


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    BCRYPT_LOG_ROUNDS = 4
    EXPIRY_WINDOW_SEC = 600
    CLEANUP_INTERVAL_SEC = 60
    GAME_ID_LENGTH = 8
    AUTH_SCHEME = 'token'
    DEFAULT_ROLE = 'guest'
    GUEST_ACTIONS = ''
    CLIENT_AUTH = CLIENT_TOKEN
    ADMIN_AUTH = ADMIN_TOKEN
    MAX_CONTENT_LENGTH = 1024
    ALLOWED_ORIGINS = ['*']


class BasicAuthConfig(TestConfig):
    AUTH_SCHEME = 'basic'
    CLIENT_AUTH = None
    ADMIN_AUTH = None
    CREDENTIALS = {
        'alice': {'password_hash': _hash('wonderland'), 'role': 'user'},
        'root': {'password_hash': _hash('hunter2'), 'role': 'admin'},
    }


class GuestReadConfig(TestConfig):
    GUEST_ACTIONS = 'readMove'


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def basic_auth(name, password):
    encoded = base64.b64encode(f'{name}:{password}'.encode('utf-8')).decode('ascii')
    return {'Authorization': f'Basic {encoded}'}


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def registry(clock):
    return GameRegistry(expiry_window=600, clock=clock)


@pytest.fixture()
def flask_app(registry):
    return create_app(TestConfig, registry=registry)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def basic_app(registry):
    return create_app(BasicAuthConfig, registry=registry)


@pytest.fixture()
def basic_client(basic_app):
    return basic_app.test_client()


@pytest.fixture()
def guest_client(registry):
    return create_app(GuestReadConfig, registry=registry).test_client()
