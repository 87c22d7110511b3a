"""
Pytest fixtures for the YelpCamp test suite.

Every app gets its own in-memory MongoDB (mongomock) seeded with one user,
and an explicit Settings instance instead of environment variables:
- app/client: Base test config (CSRF off, rate limiting off)
- csrf_app/csrf_client: CSRF enabled
- rate_limit_app/rate_limit_client: Rate limiting enabled
"""

import re

import mongomock
import pytest

from yelpcamp import create_app
from yelpcamp.config import CSRFTestConfig, RateLimitTestConfig, Settings, TestConfig
from yelpcamp.db import get_db
from yelpcamp.users.models import create_user

TEST_SETTINGS = Settings(
    db_url='mongodb://localhost:27017/yelp-camp-test',
    secret='test-secret-key',
    port=3000,
)

USERNAME = 'camper'
PASSWORD = 'SecureP@ss123!'
OTHER_USERNAME = 'hiker'
OTHER_PASSWORD = 'Tr@ilMix2024!'


def make_app(config_class):
    app = create_app(config_class, settings=TEST_SETTINGS, mongo_client=mongomock.MongoClient())
    with app.app_context():
        create_user(USERNAME, 'camper@example.com', PASSWORD)
        create_user(OTHER_USERNAME, 'hiker@example.com', OTHER_PASSWORD)
    return app


def login(client, username=USERNAME, password=PASSWORD, **kwargs):
    return client.post('/login', data={'username': username, 'password': password}, **kwargs)


def session_cookie(response):
    """Value of the session cookie set by ``response``, or None."""
    for header in response.headers.getlist('Set-Cookie'):
        match = re.match(r'session=([^;]*);', header)
        if match:
            return match.group(1)
    return None


@pytest.fixture
def app():
    """Create a Flask app with the base test configuration."""
    yield make_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    with app.app_context():
        return get_db()


@pytest.fixture
def csrf_app():
    yield make_app(CSRFTestConfig)


@pytest.fixture
def csrf_client(csrf_app):
    return csrf_app.test_client()


@pytest.fixture
def rate_limit_app():
    yield make_app(RateLimitTestConfig)


@pytest.fixture
def rate_limit_client(rate_limit_app):
    return rate_limit_app.test_client()


@pytest.fixture
def authenticated_client(client):
    """Test client that is already logged in as USERNAME."""
    login(client)
    return client


@pytest.fixture
def campground_id(app, db):
    """A campground authored by USERNAME."""
    from yelpcamp.campgrounds.models import create_campground

    author = db.users.find_one({'username': USERNAME})
    with app.app_context():
        return create_campground(
            {
                'title': 'Misty Pines',
                'location': 'Bend, Oregon',
                'price': 18.0,
                'description': 'Shaded sites under old pines.',
                'image': None,
            },
            author['_id'],
        )
