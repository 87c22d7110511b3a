"""
Application configuration — all thresholds in one place.

Two layers:
- ``Settings``: values derived from the process environment (database URL,
  signing secret, port). Built once at startup and passed explicitly to the
  components that need them.
- Config classes: static Flask settings per environment, loaded with
  ``app.config.from_object``.
"""

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from dotenv import load_dotenv


class ConfigurationError(RuntimeError):
    """Raised at startup when a required environment value is missing."""


@dataclass(frozen=True)
class Settings:
    """Environment-derived settings, immutable after process start."""

    db_url: str
    secret: str
    port: int = 3000
    # Secure-only session cookie; needs HTTPS end to end.
    cookie_secure: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """
        Build settings from the environment.

        Outside production a ``.env`` file is loaded first. Missing
        ``DB_URL`` or ``SECRET`` is fatal. ``COOKIE_SECURE=true`` marks the
        session cookie Secure.
        """
        if environ is None:
            if os.environ.get('APP_ENV') != 'production':
                load_dotenv()
            environ = os.environ

        missing = [name for name in ('DB_URL', 'SECRET') if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f'Missing required environment variable(s): {", ".join(missing)}'
            )

        port = environ.get('PORT') or '3000'
        try:
            port_number = int(port)
        except ValueError:
            raise ConfigurationError(f'PORT must be an integer, got {port!r}') from None

        return cls(
            db_url=environ['DB_URL'],
            secret=environ['SECRET'],
            port=port_number,
            cookie_secure=environ.get('COOKIE_SECURE', 'false').strip().lower() == 'true',
        )


class BaseConfig:
    """Shared configuration for all environments."""

    # Campground descriptions are free text; 64KB covers any real form post.
    MAX_CONTENT_LENGTH = 64 * 1024

    # --- Database ---
    # Used when DB_URL carries no database name.
    MONGO_DEFAULT_DB = 'yelp-camp'
    # Ping the server once at startup so connection problems show in the log.
    MONGO_PING_ON_STARTUP = True

    # --- Session (Mongo-backed, see session_store.py) ---
    SESSION_COLLECTION = 'sessions'
    # 7 days: cookie max-age and document expiry.
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    # Unchanged sessions are rewritten at most once per day.
    SESSION_TOUCH_AFTER = timedelta(hours=24)
    # Persist brand-new sessions even if nothing was written to them.
    SESSION_SAVE_UNINITIALIZED = True

    # --- Session Cookie Flags ---
    SESSION_COOKIE_NAME = 'session'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    # Replaced by Settings.cookie_secure in create_app().
    SESSION_COOKIE_SECURE = False

    # --- bcrypt ---
    # 12 rounds ≈ 250ms per hash.
    BCRYPT_LOG_ROUNDS = 12

    # --- Rate Limiting (flask-limiter) ---
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = 'memory://'
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_DEFAULT = '200/hour'
    LOGIN_RATE_LIMIT_IP = '10/minute'

    # --- Content-Security-Policy allow-lists ---
    # Any new external asset host has to be added here.
    CSP_SCRIPT_SOURCES = [
        'https://stackpath.bootstrapcdn.com/',
        'https://api.tiles.mapbox.com/',
        'https://api.mapbox.com/',
        'https://kit.fontawesome.com/',
        'https://cdnjs.cloudflare.com/',
        'https://cdn.jsdelivr.net',
    ]
    CSP_STYLE_SOURCES = [
        'https://kit-free.fontawesome.com/',
        'https://stackpath.bootstrapcdn.com/',
        'https://api.mapbox.com/',
        'https://api.tiles.mapbox.com/',
        'https://fonts.googleapis.com/',
        'https://use.fontawesome.com/',
        'https://cdn.jsdelivr.net',
    ]
    CSP_CONNECT_SOURCES = [
        'https://api.mapbox.com/',
        'https://a.tiles.mapbox.com/',
        'https://b.tiles.mapbox.com/',
        'https://events.mapbox.com/',
    ]
    CSP_FONT_SOURCES = []
    CSP_IMG_SOURCES = [
        'https://res.cloudinary.com/',
        'https://images.unsplash.com/',
    ]


class ProductionConfig(BaseConfig):
    """Production environment."""

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Development environment — plain HTTP on localhost."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Test environment — fast bcrypt, CSRF/rate-limiting off by default."""

    TESTING = True
    BCRYPT_LOG_ROUNDS = 4
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    MONGO_DEFAULT_DB = 'yelp-camp-test'
    # mongomock has no server to ping.
    MONGO_PING_ON_STARTUP = False


class RateLimitTestConfig(TestConfig):
    """Test config with rate limiting enabled."""

    RATELIMIT_ENABLED = True
    LOGIN_RATE_LIMIT_IP = '3/minute'


class CSRFTestConfig(TestConfig):
    """Test config with CSRF protection enabled."""

    WTF_CSRF_ENABLED = True
