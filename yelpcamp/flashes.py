"""
One-shot flash messages kept in the session.

Messages use the same storage layout as ``flask.flash`` (a list of
``(category, message)`` pairs under ``_flashes``), so handlers keep calling
``flash(message, category)`` and everything lands in one queue.

Unlike ``get_flashed_messages``, which caches the popped list for the rest of
the request, ``drain_all`` empties the queue every time it is called.
"""

from typing import Dict, List, MutableMapping

from yelpcamp.session_store import FLASHES_KEY


class FlashQueue:
    """Flash messages of one session, grouped by category."""

    def __init__(self, session: MutableMapping):
        self._session = session

    def push(self, category: str, message: str) -> None:
        flashes = self._session.get(FLASHES_KEY, [])
        flashes.append((category, message))
        self._session[FLASHES_KEY] = flashes

    def drain_all(self) -> Dict[str, List[str]]:
        """Return every pending message by category and clear the queue."""
        if FLASHES_KEY not in self._session:
            # Leave the session unmodified so it is not rewritten.
            return {}

        drained: Dict[str, List[str]] = {}
        for category, message in self._session.pop(FLASHES_KEY):
            drained.setdefault(category, []).append(message)
        return drained
