"""
User accounts stored in the ``users`` collection.

Documents: {_id: ObjectId, username, email, password_hash}. ``username`` has
a unique index (see db.init_db).
"""

from typing import Optional

from flask_login import UserMixin
from pymongo.errors import DuplicateKeyError

from yelpcamp.db import get_db, to_object_id
from yelpcamp.extensions import bcrypt


class UsernameTaken(ValueError):
    """Registration attempted with a username that already exists."""


class User(UserMixin):
    """An authenticated identity, built from a ``users`` document."""

    def __init__(self, document: dict):
        self.id = document['_id']
        self.username = document['username']
        self.email = document.get('email')
        self.password_hash = document['password_hash']

    def get_id(self) -> str:
        # The only value written into the session.
        return str(self.id)

    def __repr__(self) -> str:
        return f'<User {self.username}>'


def get_user_by_username(username: str) -> Optional[User]:
    document = get_db().users.find_one({'username': username})
    return User(document) if document else None


def get_user_by_id(user_id) -> Optional[User]:
    """Look up a user by id; malformed ids resolve to None."""
    object_id = to_object_id(user_id)
    if object_id is None:
        return None
    document = get_db().users.find_one({'_id': object_id})
    return User(document) if document else None


def create_user(username: str, email: str, password: str) -> User:
    """
    Create an account with a bcrypt password hash.

    Raises:
        UsernameTaken: if the username is already registered.
    """
    users = get_db().users
    if users.find_one({'username': username}, {'_id': 1}) is not None:
        raise UsernameTaken('A user with the given username is already registered')

    document = {
        'username': username,
        'email': email,
        'password_hash': bcrypt.generate_password_hash(password).decode('utf-8'),
    }
    try:
        result = users.insert_one(document)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration.
        raise UsernameTaken('A user with the given username is already registered') from None

    document['_id'] = result.inserted_id
    return User(document)
