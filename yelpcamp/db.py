"""
MongoDB connection — one client per application.

``MongoClient`` keeps its own thread-safe connection pool, so the client is
created once in the app factory and shared by every request (unlike a
per-request SQL connection).
"""

import logging
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from flask import Flask, current_app
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from yelpcamp.config import Settings

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'yelpcamp.mongo'


def init_db(app: Flask, settings: Settings, client: Optional[MongoClient] = None) -> Database:
    """
    Connect to MongoDB and create the indexes the app relies on.

    Args:
        app: Flask application being configured.
        settings: Environment-derived settings (``db_url`` is used).
        client: Pre-built client; tests pass a ``mongomock.MongoClient``.

    Returns:
        The application database.
    """
    if client is None:
        client = MongoClient(settings.db_url)

    db = client.get_default_database(default=app.config['MONGO_DEFAULT_DB'])
    app.extensions[EXTENSION_KEY] = db

    if app.config.get('MONGO_PING_ON_STARTUP', True):
        try:
            client.admin.command('ping')
        except PyMongoError as e:
            logger.error('connection error: %s', e)
        else:
            logger.info('Database connected')

    # Usernames identify accounts at login.
    db.users.create_index([('username', ASCENDING)], unique=True)
    db.reviews.create_index([('campground', ASCENDING)])

    return db


def get_db() -> Database:
    """Return the database bound to the current application."""
    return current_app.extensions[EXTENSION_KEY]


def to_object_id(value) -> Optional[ObjectId]:
    """Parse a path or session value into an ObjectId, or None if malformed."""
    if isinstance(value, ObjectId):
        return value
    if value is None:
        # ObjectId(None) would mint a fresh id.
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
