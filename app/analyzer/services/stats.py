"""
Process-lifetime request statistics.
"""

import threading


class RequestCounter:
    """Monotonically increasing count of analyze calls since process start."""

    def __init__(self):
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        """Add one and return the new value (the request number)."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        return self._value


_request_counter: RequestCounter | None = None


def get_request_counter() -> RequestCounter:
    """Get or create the request counter singleton."""
    global _request_counter
    if _request_counter is None:
        _request_counter = RequestCounter()
    return _request_counter
