"""
WSGI entry point for production deployment (gunicorn).

Usage:
    APP_ENV=production gunicorn -c gunicorn.conf.py wsgi:app

Creates the app with ProductionConfig. Missing DB_URL or SECRET stops the
process before any worker serves a request.
"""

import sys

from yelpcamp.config import ConfigurationError, ProductionConfig, Settings

try:
    settings = Settings.from_env()
except ConfigurationError as e:
    print(f'FATAL: {e}', file=sys.stderr)
    sys.exit(1)

from yelpcamp import create_app  # noqa: E402

app = create_app(config_class=ProductionConfig, settings=settings)
