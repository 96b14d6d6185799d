"""Background task that drives the reconciler on a fixed period."""

import asyncio
import logging

from .reconciler import Reconciler

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5.0


class Poller:
    """Recurring timer that refreshes the store snapshot.

    Ticks once on start and then every ``interval_seconds``. A tick that
    fires while the previous poll refresh is still in flight is skipped, so
    polling never stacks up fetches. Refreshes started elsewhere (after an
    action) are not tracked here.
    """

    def __init__(self, reconciler: Reconciler, interval_seconds: float = POLL_INTERVAL_SECONDS):
        self._reconciler = reconciler
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None
        self._pending: asyncio.Task | None = None
        self._running = False
        self.skipped_ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval_seconds(self) -> float:
        return self._interval

    async def start(self) -> None:
        """Start polling as a background task."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Poller started (interval={self._interval}s)")

    async def stop(self) -> None:
        """Cancel the schedule and let an in-flight refresh settle.

        Safe to call more than once, and without a prior start().
        """
        if not self._running and self._task is None:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._pending and not self._pending.done():
            await self._pending
        self._pending = None
        logger.info("Poller stopped")

    async def _run_loop(self) -> None:
        while self._running:
            self._tick()
            await asyncio.sleep(self._interval)

    def _tick(self) -> None:
        if self._pending and not self._pending.done():
            self.skipped_ticks += 1
            logger.debug("Previous refresh still in flight, skipping tick")
            return

        self._pending = asyncio.create_task(self._poll())

    async def _poll(self) -> None:
        try:
            await self._reconciler.refresh()
        except Exception as e:
            logger.error(f"Poll refresh crashed: {e}", exc_info=True)
