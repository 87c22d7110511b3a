"""
Per-request state and the stages that fill it.

``RequestState`` lives on ``flask.g`` for the duration of one request. Each
pipeline stage records itself in ``completed`` and writes the fields it
owns, so handlers and templates read resolved values instead of poking at
the session directly.
"""

import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from flask import Flask, g, request, session
from flask_login import current_user

from yelpcamp.flashes import FlashQueue


@dataclass
class RequestState:
    request_id: str
    completed: List[str] = field(default_factory=list)
    sanitized_keys: List[str] = field(default_factory=list)
    session_new: bool = False
    current_user: Optional[object] = None
    flashes: Optional[FlashQueue] = None
    success: List[str] = field(default_factory=list)
    error: List[str] = field(default_factory=list)
    # Categories other than success/error (info, warning).
    messages: Dict[str, List[str]] = field(default_factory=dict)


def get_state() -> RequestState:
    """Return the state of the current request, creating it on first use."""
    if 'state' not in g:
        g.state = RequestState(request_id=str(uuid.uuid4())[:8])  # Short id for log correlation
    return g.state


def init_session_binding(app: Flask) -> None:
    @app.before_request
    def bind_session() -> None:
        state = get_state()
        state.session_new = session.new
        state.completed.append('session')


def init_flash(app: Flask) -> None:
    @app.before_request
    def bind_flash_queue() -> None:
        state = get_state()
        state.flashes = FlashQueue(session)
        state.completed.append('flash')


def init_request_locals(app: Flask) -> None:
    """
    Resolve ``current_user``, ``success`` and ``error`` for the request.

    Flash messages are drained here, once per request; anything flashed by a
    handler after this point is shown on the next request.
    """

    @app.before_request
    def set_request_locals() -> None:
        state = get_state()
        if request.endpoint != 'static':
            drained = state.flashes.drain_all()
            state.success = drained.pop('success', [])
            state.error = drained.pop('error', [])
            state.messages = drained
        state.completed.append('locals')

    @app.context_processor
    def inject_request_locals() -> dict:
        state = g.get('state')
        if state is None:
            # Errors raised before the pipeline ran (e.g. CSRF rejection).
            user = current_user if current_user.is_authenticated else None
            return {'current_user': user, 'success': [], 'error': [], 'messages': {}}
        return {
            'current_user': state.current_user,
            'success': state.success,
            'error': state.error,
            'messages': state.messages,
        }
