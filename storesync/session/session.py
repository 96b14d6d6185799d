"""One operator session: state, polling and actions with a clear lifecycle."""

import logging
from typing import Any

from ..client import AuthorityClient
from ..config import Config
from .dispatcher import ActionDispatcher, ActionResult, Alerter, Confirmer, DeleteProposal
from .poller import POLL_INTERVAL_SECONDS, Poller
from .reconciler import Reconciler
from .state import SessionState

logger = logging.getLogger(__name__)


class Session:
    """Owns everything that lives for one operator session.

    ``start()`` begins polling; ``dispose()`` cancels the poll schedule and
    closes the HTTP client if the session created it. Also usable as an
    async context manager.
    """

    def __init__(
        self,
        config: Config | None = None,
        client: AuthorityClient | None = None,
        alert: Alerter | None = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ):
        self.config = config or Config()
        self._owns_client = client is None
        self.client = client or AuthorityClient(
            self.config.authority.base_url,
            timeout=self.config.authority.timeout_seconds,
        )
        self.state = SessionState()
        self.reconciler = Reconciler(self.client, self.state)
        self.dispatcher = ActionDispatcher(
            self.client, self.state, self.reconciler, alert=alert
        )
        self.poller = Poller(self.reconciler, interval_seconds=poll_interval)
        self._disposed = False

    async def __aenter__(self) -> "Session":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.dispose()

    async def start(self) -> None:
        if self._disposed:
            raise RuntimeError("Session already disposed")
        logger.info(f"Session started against {self.client.base_url}")
        await self.poller.start()

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        await self.poller.stop()
        if self._owns_client:
            await self.client.close()
        logger.info("Session disposed")

    @property
    def stores(self):
        return self.state.stores

    @property
    def logs(self):
        return self.state.logs

    @property
    def busy(self) -> bool:
        return self.state.busy

    async def refresh(self) -> bool:
        return await self.reconciler.refresh()

    async def create(self) -> ActionResult:
        return await self.dispatcher.create()

    def propose_delete(self, name: str) -> DeleteProposal:
        return self.dispatcher.propose_delete(name)

    async def execute_delete(self, proposal: DeleteProposal, confirmed: bool) -> ActionResult:
        return await self.dispatcher.execute_delete(proposal, confirmed)

    async def delete(self, name: str, confirm: Confirmer) -> ActionResult:
        return await self.dispatcher.delete(name, confirm)

    def storefront_url(self) -> str:
        return self.config.storefront.url

    def get_status(self) -> dict[str, Any]:
        """Summary of the session's sync health."""
        last = self.reconciler.last_refresh
        return {
            "authority_url": self.client.base_url,
            "polling": self.poller.running,
            "poll_interval_seconds": self.poller.interval_seconds,
            "last_refresh": last.isoformat() if last else None,
            "consecutive_failures": self.reconciler.consecutive_failures,
            "refreshing": self.reconciler.refreshing,
            "skipped_ticks": self.poller.skipped_ticks,
            "store_count": len(self.state.stores),
            "busy": self.state.busy,
        }
