"""
Access-control decorators for view functions.
"""

from functools import wraps

from flask import flash, redirect, request, session, url_for
from flask_login import current_user

from yelpcamp.db import to_object_id


def login_required(f):
    """
    Redirect anonymous users to the login page.

    For GET requests the requested path is remembered in the session so the
    login view can send the user back afterwards.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            if request.method == 'GET':
                session['return_to'] = request.full_path if request.query_string else request.path
            flash('You must be signed in first!', 'error')
            return redirect(url_for('users.login'))
        return f(*args, **kwargs)
    return decorated_function


def campground_author_required(f):
    """Only the campground's author may continue. Implies login_required."""
    @wraps(f)
    @login_required
    def decorated_function(campground_id, *args, **kwargs):
        from yelpcamp.campgrounds.models import get_campground  # Deferred import avoids circular dependency

        campground = get_campground(campground_id)
        if campground is None:
            flash('Cannot find that campground!', 'error')
            return redirect(url_for('campgrounds.index'))
        if campground['author'] != current_user.id:
            flash('You do not have permission to do that!', 'error')
            return redirect(url_for('campgrounds.show', campground_id=campground_id))
        return f(campground_id, *args, **kwargs)
    return decorated_function


def review_author_required(f):
    """Only the review's author may continue. Implies login_required."""
    @wraps(f)
    @login_required
    def decorated_function(campground_id, review_id, *args, **kwargs):
        from yelpcamp.reviews.models import get_review  # Deferred import avoids circular dependency

        review = get_review(review_id)
        if (
            review is None
            or review['author'] != current_user.id
            or review['campground'] != to_object_id(campground_id)
        ):
            flash('You do not have permission to do that!', 'error')
            return redirect(url_for('campgrounds.show', campground_id=campground_id))
        return f(campground_id, review_id, *args, **kwargs)
    return decorated_function
