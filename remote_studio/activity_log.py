"""
Activity Log

Bounded, newest-first list of timestamped messages shown in the sidebar.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


@dataclass(frozen=True)
class LogEntry:
    """One activity log line."""

    timestamp: str  # Local time of day, e.g. "14:03:27"
    message: str

    def render(self) -> str:
        return f"[{self.timestamp}] {self.message}"


class ActivityLog:
    """
    Append-only ring of log entries, newest first.

    Once the log holds ``capacity`` entries, each append drops the oldest one.
    Identical messages are kept as separate entries.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, clock: Callable[[], datetime] = datetime.now):
        if capacity < 1:
            raise ValueError(f"Log capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._clock = clock
        self._entries: List[LogEntry] = []

    def append(self, message: str) -> LogEntry:
        """Stamp a message with the current time and put it at the front."""
        entry = LogEntry(timestamp=self._clock().strftime("%H:%M:%S"), message=message)
        self._entries = [entry] + self._entries[: self.capacity - 1]
        logger.info(message)
        return entry

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def lines(self) -> List[str]:
        return [entry.render() for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))
