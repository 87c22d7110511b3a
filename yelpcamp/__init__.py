"""
Flask application factory.

Creates the app from a config class and an explicit ``Settings`` instance,
connects MongoDB, installs the Mongo-backed session store, initializes the
extensions, and finally installs the request pipeline (see pipeline.py),
whose stage order is validated before anything is registered.

Each test can create an app with a different config class and an in-memory
MongoDB client.
"""

from typing import Iterable, Optional

from flask import Flask

from yelpcamp.config import DevelopmentConfig, Settings


def create_app(
    config_class=None,
    settings: Optional[Settings] = None,
    mongo_client=None,
    stages: Optional[Iterable] = None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to DevelopmentConfig.
        settings: Environment-derived settings. Read from the environment
                  when omitted; missing values abort startup.
        mongo_client: MongoClient to use instead of connecting to
                      ``settings.db_url`` (tests pass a mongomock client).
        stages: Pipeline stages; defaults to ``default_stages()``.

    Returns:
        Configured Flask application instance.
    """
    if config_class is None:
        config_class = DevelopmentConfig
    if settings is None:
        settings = Settings.from_env()

    app = Flask(
        __name__,
        static_folder='static',
        static_url_path='/static',
    )
    app.config.from_object(config_class)
    app.config['SECRET_KEY'] = settings.secret
    app.config['SESSION_COOKIE_SECURE'] = settings.cookie_secure
    app.extensions['yelpcamp.settings'] = settings

    # --- Logging ---
    from yelpcamp.logging_config import setup_logging
    setup_logging(app)

    # --- Database and session store ---
    from yelpcamp.db import init_db
    from yelpcamp.session_store import init_session_store

    db = init_db(app, settings, client=mongo_client)
    init_session_store(app, db)

    # --- Initialize Extensions ---
    from yelpcamp.extensions import bcrypt, csrf, limiter

    bcrypt.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    # Decorators stay in place; enforcement follows the config.
    limiter.enabled = app.config.get('RATELIMIT_ENABLED', True)

    # --- Request pipeline ---
    from yelpcamp.pipeline import Pipeline, default_stages

    Pipeline(stages if stages is not None else default_stages()).install(app)

    # --- CLI ---
    from yelpcamp.cli import register_commands
    register_commands(app)

    return app
