"""Client-side session: store snapshot, polling, guarded actions and event log."""

from .dispatcher import ActionDispatcher, ActionOutcome, ActionResult, DeleteProposal
from .event_log import EventLog
from .gate import BusyGate
from .poller import POLL_INTERVAL_SECONDS, Poller
from .reconciler import Reconciler
from .session import Session
from .state import SessionState

__all__ = [
    "ActionDispatcher",
    "ActionOutcome",
    "ActionResult",
    "BusyGate",
    "DeleteProposal",
    "EventLog",
    "POLL_INTERVAL_SECONDS",
    "Poller",
    "Reconciler",
    "Session",
    "SessionState",
]
