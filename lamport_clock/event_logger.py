import os
import time
import threading
from collections import deque


class EventLogger:
    """Thread-safe log of clock events.

    The most recent messages are kept in memory so they can be served via
    the API. When ``log_path`` is given every entry is also appended to
    that file.
    """

    def __init__(self, log_path: str | None = None, *, max_events: int = 1000) -> None:
        self.log_path = log_path
        self._lock = threading.Lock()
        self._events = deque(maxlen=max_events)
        self._fp = None
        if log_path:
            directory = os.path.dirname(log_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self._fp = open(log_path, "a", encoding="utf-8")

    def close(self) -> None:
        """Close the underlying log file, if any."""
        with self._lock:
            if self._fp is not None:
                self._fp.close()
                self._fp = None

    def log(self, message: str) -> None:
        """Record ``message`` with a wall-clock timestamp."""
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        entry = f"[{timestamp}] {message}"
        with self._lock:
            if self._fp is not None:
                self._fp.write(entry + "\n")
                self._fp.flush()
            self._events.append(entry)

    def get_events(self, offset: int = 0, limit: int | None = None) -> list[str]:
        """Return recent log entries stored in memory."""
        with self._lock:
            entries = list(self._events)
        if offset < 0:
            offset = 0
        if limit is not None and limit < 0:
            limit = 0
        end = offset + limit if limit is not None else None
        return entries[offset:end]
