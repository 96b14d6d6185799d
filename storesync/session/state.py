"""State container owned by one session."""

import logging
from typing import Any, Callable, Iterable

from ..models import LogEntry, Store
from .event_log import EventLog
from .gate import BusyGate

logger = logging.getLogger(__name__)

Listener = Callable[["SessionState"], None]


class SessionState:
    """Stores snapshot, event log and busy flag for a single session.

    The stores snapshot is only ever swapped as a whole, so a listener
    always sees the list from exactly one authority response.
    """

    def __init__(self):
        self._stores: tuple[Store, ...] = ()
        self._listeners: list[Listener] = []
        self.event_log = EventLog(on_append=self._on_log_append)
        self.gate = BusyGate()

    @property
    def stores(self) -> tuple[Store, ...]:
        return self._stores

    @property
    def logs(self) -> tuple[LogEntry, ...]:
        return self.event_log.entries

    @property
    def busy(self) -> bool:
        return self.gate.busy

    def replace_stores(self, stores: Iterable[Store]) -> None:
        """Discard the current snapshot and install ``stores`` in its place."""
        self._stores = tuple(stores)
        self._notify()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a change callback.

        Returns:
            A function that unregisters the listener.
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _on_log_append(self, entry: LogEntry) -> None:
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stores": [s.to_dict() for s in self._stores],
            "logs": [e.to_dict() for e in self.event_log.entries],
            "busy": self.busy,
        }
