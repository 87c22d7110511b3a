"""
Error types and the terminal error-rendering handlers.

Every error, whatever its origin, is rendered with the single ``error.html``
template, parameterized by status code and message. Stack traces never reach
the client; unexpected exceptions are logged server-side.
"""

import logging
from urllib.parse import urljoin, urlparse

from flask import Flask, flash, redirect, render_template, request, url_for
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException, NotFound

from yelpcamp.context import get_state
from yelpcamp.logging_config import audit_log

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = 'Oh No, Something Went Wrong!'
NOT_FOUND_MESSAGE = 'Page Not Found'


class AppError(Exception):
    """An error forwarded by a handler, carrying the status to respond with."""

    def __init__(self, message: str = '', status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def to_app_error(error: Exception) -> AppError:
    """Normalize any exception to an AppError with status and message set."""
    if isinstance(error, AppError):
        status_code, message = error.status_code, error.message
    elif isinstance(error, HTTPException):
        status_code, message = error.code, error.description
    else:
        status_code, message = None, None
    return AppError(message or DEFAULT_ERROR_MESSAGE, status_code or 500)


def render_error(error: Exception):
    err = to_app_error(error)
    return render_template('error.html', err=err), err.status_code


def _safe_referrer():
    """The Referer URL if it points back at this host, else None."""
    target = request.referrer
    if not target:
        return None
    ref_url = urlparse(request.host_url)
    test_url = urlparse(urljoin(request.host_url, target))
    if test_url.scheme in ('http', 'https') and ref_url.netloc == test_url.netloc:
        return target
    return None


def register_not_found(app: Flask) -> None:
    """Unmatched paths become a forwarded 'Page Not Found' error."""

    @app.errorhandler(404)
    def handle_not_found(e):
        # abort(404, message) keeps its message; routing misses get the default.
        message = e.description if e.description != NotFound.description else NOT_FOUND_MESSAGE
        return render_error(AppError(message, 404))


def register_error_handlers(app: Flask) -> None:
    """Terminal stage: convert anything raised during a request to a page."""
    from yelpcamp.users.security import log_csrf_failure

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        """Stale or missing CSRF token: send the user back to re-submit."""
        log_csrf_failure()
        flash('Your form session has expired. Please try again.', 'error')
        return redirect(_safe_referrer() or url_for('home'))

    @app.errorhandler(Exception)
    def handle_error(e):
        if not isinstance(e, (AppError, HTTPException)):
            logger.exception('Unhandled error on %s %s', request.method, request.path)
            audit_log(
                event='request_error',
                message=f'Unhandled {type(e).__name__}',
                path=request.path,
                request_id=get_state().request_id,
            )
        return render_error(e)
