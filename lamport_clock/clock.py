import threading


class LogicalClock:
    """Thread-safe Lamport logical clock.

    A single lock guards the counter so that concurrent ``tick`` and
    ``merge`` calls serialize in one total order and no update is lost.
    """

    def __init__(self, start: int = 0) -> None:
        self._counter = int(start)
        self._lock = threading.Lock()

    @property
    def time(self) -> int:
        return self.get()

    def tick(self) -> int:
        """Advance the clock for a local event and return the new value."""
        with self._lock:
            self._counter += 1
            return self._counter

    def merge(self, received: int) -> int:
        """Merge a timestamp observed on a remote event and advance.

        The new value is ``max(counter, received) + 1``.
        """
        if isinstance(received, bool) or not isinstance(received, int):
            raise TypeError(f"received timestamp must be an int, got {type(received).__name__}")
        with self._lock:
            self._counter = max(self._counter, received) + 1
            return self._counter

    def get(self) -> int:
        """Return the current value without advancing the clock."""
        with self._lock:
            return self._counter

    def __repr__(self) -> str:
        return f"LogicalClock(counter={self.get()})"
