"""Full-replace reconciliation of the local store snapshot."""

import logging
from datetime import datetime

from ..client import AuthorityClient, AuthorityError
from .state import SessionState

logger = logging.getLogger(__name__)


class Reconciler:
    """Replaces the local snapshot with the authority's current store list.

    There is no diffing: a store missing from one response is gone from the
    snapshot, whether the authority deleted it or merely left it out. A
    failed fetch leaves the previous snapshot in place and is reported only
    through the logger, never the event log.
    """

    def __init__(self, client: AuthorityClient, state: SessionState):
        self.client = client
        self.state = state
        self._in_flight = 0
        self._last_refresh: datetime | None = None
        self._consecutive_failures = 0

    @property
    def refreshing(self) -> bool:
        return self._in_flight > 0

    @property
    def last_refresh(self) -> datetime | None:
        """Timestamp of the last successful refresh."""
        return self._last_refresh

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    async def refresh(self) -> bool:
        """Fetch the store list and install it as the new snapshot.

        Returns:
            True if the snapshot was replaced, False if the fetch failed.
        """
        self._in_flight += 1
        try:
            stores = await self.client.list_stores()
        except AuthorityError as e:
            self._consecutive_failures += 1
            logger.warning(
                f"Store refresh failed, keeping previous snapshot "
                f"({self._consecutive_failures} in a row): {e}"
            )
            return False
        finally:
            self._in_flight -= 1

        self.state.replace_stores(stores)
        self._consecutive_failures = 0
        self._last_refresh = datetime.now()
        logger.debug(f"Snapshot replaced with {len(stores)} stores")
        return True
