"""
User routes — register, login, logout.

Request flow (login POST):
1. Rate limiter (flask-limiter decorator)
2. CSRF validation (flask-wtf before_request hook)
3. Sanitization, session binding, user resolution (pipeline stages)
4. WTForms validation
5. Timing-safe credential verification
6. Session id rotation, then the identity is written to the session
"""

from flask import current_app, flash, redirect, render_template, session, url_for
from flask_login import current_user, login_user, logout_user

from yelpcamp.extensions import limiter
from yelpcamp.users import users_bp
from yelpcamp.users.forms import LoginForm, RegisterForm
from yelpcamp.users.models import UsernameTaken, create_user
from yelpcamp.users.security import (
    AuthFailure,
    log_login_failed,
    log_login_success,
    log_logout,
    log_user_registered,
    verify_credentials,
)


def _start_authenticated_session(user) -> None:
    # New id before the identity is stored: a session id handed out before
    # login can never become an authenticated one (fixation).
    session.rotate()
    login_user(user)


@users_bp.route('/register', methods=['GET', 'POST'])
def register():
    form = RegisterForm()

    if form.validate_on_submit():
        username = form.username.data.strip()
        try:
            user = create_user(username, form.email.data.strip().lower(), form.password.data)
        except UsernameTaken as e:
            flash(str(e), 'error')
            return redirect(url_for('users.register'))

        session.pop('return_to', None)
        _start_authenticated_session(user)
        log_user_registered(username)
        flash('Welcome to Yelp Camp!', 'success')
        return redirect(url_for('campgrounds.index'))

    return render_template('users/register.html', form=form)


@users_bp.route('/login', methods=['GET', 'POST'])
@limiter.limit(
    lambda: current_app.config.get('LOGIN_RATE_LIMIT_IP', '10/minute'),
    methods=['POST'],  # Only authentication attempts count
    error_message='Too many login attempts. Please wait a moment and try again.',
)
def login():
    """
    GET renders the form; POST authenticates.

    Failures always produce the same message, whether the username exists
    or not.
    """
    form = LoginForm()

    if form.validate_on_submit():
        username = form.username.data.strip()
        try:
            user = verify_credentials(username, form.password.data)
        except AuthFailure:
            log_login_failed(username)
            flash('Invalid username or password.', 'error')
            return redirect(url_for('users.login'))

        return_to = session.pop('return_to', None)
        _start_authenticated_session(user)
        log_login_success(username)
        flash('Welcome back!', 'success')
        return redirect(return_to or url_for('campgrounds.index'))

    return render_template('users/login.html', form=form)


@users_bp.route('/logout', methods=['POST'])
def logout():
    """
    POST-only so a cross-site <img src="/logout"> cannot log users out.

    The identity is removed and the session moves to a fresh id; the old
    session record is deleted when the response is saved.
    """
    username = current_user.username if current_user.is_authenticated else None

    logout_user()
    session.clear()
    session.rotate()

    if username:
        log_logout(username)

    flash('Goodbye!', 'success')
    return redirect(url_for('campgrounds.index'))
