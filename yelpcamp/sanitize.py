"""
Request input sanitization against MongoDB operator injection.

A form field or query parameter named ``$where`` or ``profile.admin`` could
be passed straight into a query filter or update document and be read as an
operator or a dotted path. Before any handler runs, such keys are rewritten:
a leading ``$`` and every ``.`` become ``_``. Values are left untouched.
"""

import re
from typing import Any, List, Tuple

from flask import Flask, request
from werkzeug.datastructures import ImmutableMultiDict, MultiDict

from yelpcamp.context import get_state
from yelpcamp.logging_config import audit_log, sanitize_log_value

REPLACEMENT = '_'
_PROHIBITED = re.compile(r'^\$|\.')


def sanitize_key(key: str) -> str:
    return _PROHIBITED.sub(REPLACEMENT, key)


def sanitize_multidict(data: MultiDict) -> Tuple[ImmutableMultiDict, List[str]]:
    """Return a copy of ``data`` with rewritten keys, plus the keys changed."""
    changed = []
    items = []
    for key, value in data.items(multi=True):
        clean = sanitize_key(key)
        if clean != key:
            changed.append(key)
        items.append((clean, value))
    return ImmutableMultiDict(items), changed


def sanitize_in_place(obj: Any) -> List[str]:
    """Rewrite keys of a decoded JSON document in place, recursively."""
    changed = []
    if isinstance(obj, dict):
        for key in list(obj):
            value = obj[key]
            changed.extend(sanitize_in_place(value))
            clean = sanitize_key(key) if isinstance(key, str) else key
            if clean != key:
                del obj[key]
                obj[clean] = value
                changed.append(key)
    elif isinstance(obj, list):
        for item in obj:
            changed.extend(sanitize_in_place(item))
    return changed


def init_sanitizer(app: Flask) -> None:
    """Register the sanitization hook; it must precede every reader of user input."""

    @app.before_request
    def sanitize_request() -> None:
        state = get_state()
        changed = []

        if request.args:
            args, keys = sanitize_multidict(request.args)
            if keys:
                request.args = args
                changed.extend(keys)

        if request.form:
            form, keys = sanitize_multidict(request.form)
            if keys:
                request.form = form
                changed.extend(keys)

        if request.is_json:
            # get_json() caches the decoded body, so later callers see the
            # rewritten document.
            changed.extend(sanitize_in_place(request.get_json(silent=True)))

        if changed:
            state.sanitized_keys.extend(changed)
            audit_log(
                event='input_sanitized',
                message=f'Rewrote {len(changed)} prohibited key(s) on {request.path}',
                keys=sanitize_log_value(','.join(changed)),
                path=request.path,
                request_id=state.request_id,
            )

        state.completed.append('sanitize')
