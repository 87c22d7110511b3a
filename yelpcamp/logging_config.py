"""
Logging setup for YelpCamp.

Two streams, both to stderr:

- ``yelpcamp.*`` module loggers: plain text (database connection, session
  store failures, unhandled request errors).
- ``security.audit``: one JSON object per line for account and input events
  (login_success, login_failed, logout, user_registered, csrf_failure,
  input_sanitized, request_error).

Audit entries carry identifiers only. Passwords, session ids and request
bodies are never passed to ``audit_log``.
"""

import json
import logging
import re
import time

AUDIT_LOGGER = 'security.audit'

APP_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

# C0 control characters (CR and LF included) and DEL.
_UNPRINTABLE = re.compile(r'[\x00-\x1f\x7f]')

# Record attributes copied into the JSON entry when an event sets them.
_CONTEXT_FIELDS = ('ip', 'username', 'user_agent', 'request_id', 'reason', 'keys', 'path')


def sanitize_log_value(value, max_length: int = 256) -> str:
    """Drop unprintable characters so user input cannot start a fake log line."""
    return _UNPRINTABLE.sub('', str(value))[:max_length]


class SecurityAuditFormatter(logging.Formatter):
    """Render an audit record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': time.strftime('%Y-%m-%dT%H:%M:%S%z', time.gmtime(record.created)),
            'level': record.levelname,
            'event': getattr(record, 'event', 'unknown'),
            'message': record.getMessage(),
        }
        entry.update(
            (name, sanitize_log_value(getattr(record, name)))
            for name in _CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        )
        return json.dumps(entry)


def _attach_stderr(logger: logging.Logger, formatter: logging.Formatter) -> None:
    # create_app() runs once per test; one handler is enough.
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(app) -> logging.Logger:
    """Attach the text and audit handlers; returns the audit logger."""
    app_logger = logging.getLogger('yelpcamp')
    _attach_stderr(app_logger, logging.Formatter(APP_LOG_FORMAT))
    app_logger.setLevel(logging.DEBUG if app.debug else logging.INFO)

    audit_logger = logging.getLogger(AUDIT_LOGGER)
    _attach_stderr(audit_logger, SecurityAuditFormatter())
    audit_logger.setLevel(logging.INFO)
    return audit_logger


def audit_log(event: str, message: str, **context) -> None:
    """Write one audit event; ``context`` keys should come from _CONTEXT_FIELDS."""
    logging.getLogger(AUDIT_LOGGER).info(message, extra={'event': event, **context})
