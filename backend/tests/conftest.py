import os
import sys
import pytest

# Ensure the backend root (containing the `unoroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from unoroom import create_app, db, socketio
from unoroom.services.games.cards import Card, SPECIAL_VALUES, WILD_VALUES


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MIN_PLAYERS = 2
    MAX_PLAYERS = 4
    HAND_SIZE = 7
    ROOM_CODE_LENGTH = 6
    LEADERBOARD_LIMIT = 10
    CORS_ORIGINS = '*'
    MAX_PLAYER_NAME_LENGTH = 64
    MAX_ROOM_ID_LENGTH = 16


def make_card(color, value):
    if value in WILD_VALUES:
        return Card('wild', value, 'wild')
    kind = 'special' if value in SPECIAL_VALUES else 'number'
    return Card(color, value, kind)


def stacked_deck(hands, top, draws=()):
    """Deck that deals ``hands`` in seat order, reveals ``top``, then yields ``draws``."""
    order = [card for hand in hands for card in hand] + [top] + list(draws)
    return list(reversed(order))


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import unoroom.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        if test_client.is_connected():
            test_client.disconnect()
