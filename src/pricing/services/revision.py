"""
Revision channel: a monotonically increasing counter observers subscribe to.

Each completed evaluation bumps the counter once; subscribers re-query the
labels they display. The value carries no ordering meaning beyond
"state changed".
"""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

RevisionCallback = Callable[[int], None]


class Revision:
    """Observable revision counter."""

    def __init__(self):
        self._value = 0
        self._subscribers: List[RevisionCallback] = []

    @property
    def value(self) -> int:
        return self._value

    def subscribe(self, callback: RevisionCallback) -> Callable[[], None]:
        """Register callback(new_value); returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def bump(self) -> int:
        """Increment once and notify subscribers. A failing subscriber does not stop the others."""
        self._value += 1
        for callback in list(self._subscribers):
            try:
                callback(self._value)
            except Exception:
                logger.exception("Revision subscriber %r failed", callback)
        return self._value
