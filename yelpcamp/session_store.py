"""
Server-side sessions persisted in MongoDB.

The cookie holds only a signed, random session id; the session data lives in
the ``sessions`` collection:

    {_id: <sid>, session: <tagged JSON>, expires: <datetime>, touched: <datetime>}

Write policy:
- new sessions are saved on their first response (SESSION_SAVE_UNINITIALIZED)
- modified sessions are rewritten in full
- unmodified sessions are only touched (expiry pushed forward) once the last
  touch is older than SESSION_TOUCH_AFTER; otherwise nothing is written

Expired documents are treated as absent even before the TTL index removes
them.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from flask import Flask
from flask.json.tag import TaggedJSONSerializer
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError
from werkzeug.datastructures import CallbackDict

logger = logging.getLogger(__name__)

# Key Flask-Login uses for the serialized identity reference.
USER_REF_KEY = '_user_id'
# Key flask.flash() appends (category, message) pairs to.
FLASHES_KEY = '_flashes'


def generate_sid() -> str:
    """256 bits from the OS CSPRNG, URL-safe."""
    return secrets.token_urlsafe(32)


def _utcnow() -> datetime:
    # BSON datetimes come back naive (UTC), so compare naive to naive.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MongoSession(CallbackDict, SessionMixin):
    """Session data plus the bookkeeping the store needs to decide what to write."""

    def __init__(
        self,
        initial=None,
        sid: Optional[str] = None,
        new: bool = False,
        touched_at: Optional[datetime] = None,
    ):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid or generate_sid()
        self.new = new
        self.modified = False
        self.touched_at = touched_at
        # Stored id to delete on save after rotate().
        self.rotated_from: Optional[str] = None

    @property
    def user_ref(self) -> Optional[str]:
        """Serialized identity of the logged-in user, if any."""
        return self.get(USER_REF_KEY)

    def rotate(self) -> None:
        """
        Move the session data to a fresh id.

        Called on login and logout so an id known before authentication can
        never carry an authenticated identity. The old record is deleted when
        the session is saved.
        """
        if self.rotated_from is None and not self.new:
            self.rotated_from = self.sid
        self.sid = generate_sid()
        self.modified = True


class MongoSessionInterface(SessionInterface):
    """Flask session interface backed by a MongoDB collection."""

    serializer = TaggedJSONSerializer()
    session_class = MongoSession
    salt = 'yelpcamp.session-id'

    def __init__(
        self,
        collection: Collection,
        touch_after: timedelta,
        save_uninitialized: bool = True,
    ):
        self.collection = collection
        self.touch_after = touch_after
        self.save_uninitialized = save_uninitialized

    def get_signer(self, app: Flask) -> Optional[Signer]:
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt, key_derivation='hmac')

    def open_session(self, app: Flask, request) -> Optional[MongoSession]:
        signer = self.get_signer(app)
        if signer is None:
            return None  # Flask falls back to a NullSession

        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return self.session_class(new=True)

        try:
            sid = signer.unsign(cookie).decode('utf-8')
        except BadSignature:
            return self.session_class(new=True)

        try:
            document = self.collection.find_one({'_id': sid})
            if document is not None and document['expires'] <= _utcnow():
                self.collection.delete_one({'_id': sid})
                document = None
        except PyMongoError as e:
            # Serve the request with a fresh session.
            logger.error('SESSION STORE ERROR %s', e)
            return self.session_class(new=True)

        if document is None:
            return self.session_class(new=True)

        data = self.serializer.loads(document['session'])
        return self.session_class(data, sid=sid, touched_at=document.get('touched'))

    def save_session(self, app: Flask, session: MongoSession, response) -> None:
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        try:
            if session.rotated_from is not None:
                self.collection.delete_one({'_id': session.rotated_from})
                session.rotated_from = None

            if session.new and not session.modified and not self.save_uninitialized:
                return

            now = _utcnow()
            lifetime = app.permanent_session_lifetime
            expires = now + lifetime

            if session.new or session.modified:
                self.collection.replace_one(
                    {'_id': session.sid},
                    {
                        'session': self.serializer.dumps(dict(session)),
                        'expires': expires,
                        'touched': now,
                    },
                    upsert=True,
                )
            elif session.touched_at is None or now - session.touched_at >= self.touch_after:
                self.collection.update_one(
                    {'_id': session.sid},
                    {'$set': {'expires': expires, 'touched': now}},
                )
            else:
                # Unchanged and recently touched: the stored record and the
                # cookie already carry a valid expiry.
                return
        except PyMongoError as e:
            logger.error('SESSION STORE ERROR %s', e)
            return

        session.touched_at = now
        response.vary.add('Cookie')
        response.set_cookie(
            name,
            self.get_signer(app).sign(session.sid).decode('utf-8'),
            max_age=int(lifetime.total_seconds()),
            expires=expires.replace(tzinfo=timezone.utc),
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )


def init_session_store(app: Flask, db: Database) -> MongoSessionInterface:
    """Install the Mongo session interface on ``app``."""
    collection = db[app.config['SESSION_COLLECTION']]
    # The server purges documents once ``expires`` has passed.
    collection.create_index([('expires', ASCENDING)], expireAfterSeconds=0)

    interface = MongoSessionInterface(
        collection,
        touch_after=app.config['SESSION_TOUCH_AFTER'],
        save_uninitialized=app.config.get('SESSION_SAVE_UNINITIALIZED', True),
    )
    app.session_interface = interface
    return interface
