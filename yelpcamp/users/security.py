"""
Authentication — timing-safe credential verification, identity
(de)serialization for the session, and audit helpers.

Only the user's id is stored in the session (Flask-Login's ``_user_id``);
each request resolves it back to a full ``User``. A reference that no longer
resolves (deleted account, tampered value) yields an anonymous request
instead of an error.
"""

from typing import Optional

from flask import Flask, request
from flask_login import current_user

from yelpcamp.context import get_state
from yelpcamp.extensions import bcrypt, login_manager
from yelpcamp.logging_config import audit_log, sanitize_log_value
from yelpcamp.users.models import User, get_user_by_id, get_user_by_username


class AuthFailure(Exception):
    """Credentials did not verify. Deliberately says nothing about why."""


# Hash checked for unknown usernames so that every attempt costs one bcrypt
# comparison, whether or not the account exists.
DUMMY_HASH: Optional[str] = None


def init_dummy_hash(app) -> None:
    """Hash a throwaway password at the configured cost. Needs an app context."""
    global DUMMY_HASH
    DUMMY_HASH = bcrypt.generate_password_hash('dummy_password_for_timing').decode('utf-8')


def verify_credentials(username: str, password: str) -> User:
    """
    Return the user whose credentials match.

    Raises:
        AuthFailure: unknown username or wrong password (indistinguishable).
    """
    user = get_user_by_username(username)

    if user is None:
        bcrypt.check_password_hash(DUMMY_HASH, password)
        raise AuthFailure()

    if not bcrypt.check_password_hash(user.password_hash, password):
        raise AuthFailure()

    return user


def serialize_user(user: User) -> str:
    return user.get_id()


@login_manager.user_loader
def deserialize_user(user_id: str) -> Optional[User]:
    return get_user_by_id(user_id)


def init_authentication(app: Flask) -> None:
    """Bind Flask-Login to the app and resolve the user on every request."""
    login_manager.init_app(app)

    with app.app_context():
        init_dummy_hash(app)

    @app.before_request
    def resolve_current_user() -> None:
        state = get_state()
        if current_user.is_authenticated:
            state.current_user = current_user._get_current_object()
        state.completed.append('authentication')


# --- Audit helpers ---

def get_request_context() -> dict:
    """ip, user_agent (truncated) and request_id for audit entries."""
    return {
        'ip': request.remote_addr or 'unknown',
        'user_agent': sanitize_log_value(
            request.headers.get('User-Agent', 'unknown'),
            max_length=200,
        ),
        'request_id': get_state().request_id,
    }


def log_login_success(username: str) -> None:
    audit_log(
        event='login_success',
        message=f'Successful login for {sanitize_log_value(username)}',
        username=sanitize_log_value(username),
        **get_request_context(),
    )


def log_login_failed(username: str, reason: str = 'invalid_credentials') -> None:
    audit_log(
        event='login_failed',
        message=f'Failed login for {sanitize_log_value(username)}: {reason}',
        username=sanitize_log_value(username),
        reason=reason,
        **get_request_context(),
    )


def log_user_registered(username: str) -> None:
    audit_log(
        event='user_registered',
        message=f'New account {sanitize_log_value(username)}',
        username=sanitize_log_value(username),
        **get_request_context(),
    )


def log_logout(username: str) -> None:
    audit_log(
        event='logout',
        message=f'Logout for {sanitize_log_value(username)}',
        username=sanitize_log_value(username),
        **get_request_context(),
    )


def log_csrf_failure() -> None:
    audit_log(
        event='csrf_failure',
        message='CSRF token validation failed',
        **get_request_context(),
    )
