"""Append-only, newest-first operator event log."""

import logging
from typing import Callable

from ..models import LogEntry

logger = logging.getLogger(__name__)


class EventLog:
    """Human-readable record of what the session did.

    Entries are prepended, so ``entries[0]`` is always the most recent one.
    There is no capacity bound; the log lives as long as its session.
    Nothing in the control flow reads it back.
    """

    def __init__(self, on_append: Callable[[LogEntry], None] | None = None):
        self._entries: list[LogEntry] = []
        self._on_append = on_append

    def append(self, message: str) -> LogEntry:
        """Timestamp ``message`` now and record it as the newest entry."""
        entry = LogEntry(message)
        self._entries.insert(0, entry)
        logger.info(message)
        if self._on_append:
            self._on_append(entry)
        return entry

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def messages(self) -> list[str]:
        return [e.message for e in self._entries]

    def lines(self) -> list[str]:
        return [e.format() for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)
