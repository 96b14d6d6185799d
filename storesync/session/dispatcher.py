"""Create and delete actions against the authority.

Both actions narrate themselves in the event log, raise an alert when the
authority refuses, and refresh the snapshot once after a successful call.
Create is single-flight through the session's BusyGate; delete is not
serialized at all but needs an explicit confirmation first.
"""

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from ..client import DEFAULT_ENGINE, AuthorityClient, AuthorityError
from .reconciler import Reconciler
from .state import SessionState

logger = logging.getLogger(__name__)

Alerter = Callable[[str], None]
Confirmer = Callable[[str], bool | Awaitable[bool]]


class ActionOutcome(Enum):
    """How an action ended."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"  # Dropped because a create was already in flight
    DECLINED = "declined"  # Operator said no at the confirmation step


@dataclass
class ActionResult:
    """Result of a create or delete action."""

    outcome: ActionOutcome
    error: str | None = None
    alert: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == ActionOutcome.SUCCEEDED


@dataclass(frozen=True)
class DeleteProposal:
    """First phase of a delete: what would happen, awaiting a yes or no."""

    name: str

    @property
    def prompt(self) -> str:
        return f"Are you sure you want to purge {self.name} and all its resources?"


def log_alert(message: str) -> None:
    """Default alerter: nobody is watching, so make it loud in the logs."""
    logger.error(f"ALERT: {message}")


class ActionDispatcher:
    """Issues mutating requests on behalf of the operator."""

    def __init__(
        self,
        client: AuthorityClient,
        state: SessionState,
        reconciler: Reconciler,
        alert: Alerter | None = None,
        engine: str = DEFAULT_ENGINE,
    ):
        self.client = client
        self.state = state
        self.reconciler = reconciler
        self.alert = alert or log_alert
        self.engine = engine

    def _raise_alert(self, message: str) -> None:
        try:
            self.alert(message)
        except Exception as e:
            logger.error(f"Alerter failed for {message!r}: {e}", exc_info=True)

    async def create(self) -> ActionResult:
        """Provision one new store, unless a create is already in flight."""
        if not self.state.gate.try_acquire():
            logger.debug("Create ignored, another create is in flight")
            return ActionResult(ActionOutcome.SKIPPED)

        log = self.state.event_log
        try:
            log.append("Initiating multi-tenant provisioning...")
            try:
                await self.client.provision(self.engine)
            except AuthorityError as e:
                logger.error(f"Provisioning failed: {e}")
                log.append("ERROR: Provisioning failed. Check backend logs.")
                alert = "Provisioning failed"
                self._raise_alert(alert)
                return ActionResult(ActionOutcome.FAILED, error=str(e), alert=alert)
            log.append("Provisioning command successfully dispatched to Kubernetes.")
        finally:
            self.state.gate.release()

        await self.reconciler.refresh()
        return ActionResult(ActionOutcome.SUCCEEDED)

    def propose_delete(self, name: str) -> DeleteProposal:
        """Prepare a delete for confirmation. Has no side effects.

        Raises:
            ValueError: ``name`` is empty.
        """
        if not name:
            raise ValueError("Store name must not be empty")
        return DeleteProposal(name)

    async def execute_delete(self, proposal: DeleteProposal, confirmed: bool) -> ActionResult:
        """Second phase of a delete: act on the operator's answer."""
        if not confirmed:
            logger.debug(f"Delete of {proposal.name} declined")
            return ActionResult(ActionOutcome.DECLINED)

        name = proposal.name
        log = self.state.event_log
        log.append(f"Initiating teardown for {name}...")
        try:
            await self.client.delete_store(name)
        except AuthorityError as e:
            logger.error(f"Delete of {name} failed: {e}")
            log.append(f"ERROR: Failed to delete {name}.")
            alert = "Delete failed"
            self._raise_alert(alert)
            return ActionResult(ActionOutcome.FAILED, error=str(e), alert=alert)

        log.append(f"Cleanup complete: {name} removed.")
        await self.reconciler.refresh()
        return ActionResult(ActionOutcome.SUCCEEDED)

    async def delete(self, name: str, confirm: Confirmer) -> ActionResult:
        """Ask ``confirm`` about deleting ``name``, then do it if it agrees.

        Args:
            name: Store to delete.
            confirm: Called with the confirmation prompt; may be sync or
                async and returns True to go ahead.
        """
        proposal = self.propose_delete(name)
        answer = confirm(proposal.prompt)
        if inspect.isawaitable(answer):
            answer = await answer
        return await self.execute_delete(proposal, bool(answer))
