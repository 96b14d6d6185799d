"""HTTP client for the provisioning authority's REST API."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .models import Store

logger = logging.getLogger(__name__)

# Engine selector sent with every provision request
DEFAULT_ENGINE = "woocommerce"


class AuthorityError(Exception):
    """A request to the authority failed.

    Transport errors, non-2xx responses and malformed bodies all end up
    here; ``status_code`` is set when the authority answered at all.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthorityClient:
    """Client for the store provisioning authority.

    Wraps the three calls the authority exposes:
    - ``GET /stores``: list all stores
    - ``POST /provision``: ask for a new store
    - ``DELETE /stores/{name}``: tear a store down

    No call is ever retried.
    """

    def __init__(self, base_url: str = "http://localhost:5000", timeout: float = 30.0):
        """Initialize the authority client.

        Args:
            base_url: Base URL of the authority.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, json_data: Any = None) -> httpx.Response:
        try:
            client = await self._get_client()
            if json_data is None:
                response = await client.request(method, path)
            else:
                response = await client.request(method, path, json=json_data)
        except httpx.HTTPError as e:
            raise AuthorityError(f"{method} {path} failed: {e}") from e
        except Exception as e:
            # Bad URLs and ports surface from the transport as plain errors
            logger.error(f"{method} {path} raised {type(e).__name__}: {e}")
            raise AuthorityError(f"{method} {path} failed: {type(e).__name__}: {e}") from e

        if not response.is_success:
            raise AuthorityError(
                f"{method} {path} returned HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response

    async def list_stores(self) -> list[Store]:
        """Fetch the authoritative store list, in server order.

        Raises:
            AuthorityError: The request failed or the body is not a list of
                well-formed, uniquely named stores.
        """
        response = await self._request("GET", "/stores")

        try:
            data = response.json()
        except ValueError as e:
            raise AuthorityError(f"GET /stores returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise AuthorityError(
                f"GET /stores returned {type(data).__name__}, expected a list"
            )

        stores = []
        seen: set[str] = set()
        for item in data:
            try:
                store = Store.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                raise AuthorityError(f"GET /stores returned a malformed store: {item!r}") from e
            if store.name in seen:
                raise AuthorityError(f"GET /stores listed {store.name!r} more than once")
            seen.add(store.name)
            stores.append(store)

        logger.debug(f"Fetched {len(stores)} stores")
        return stores

    async def provision(self, engine: str = DEFAULT_ENGINE) -> None:
        """Ask the authority to provision a new store."""
        await self._request("POST", "/provision", {"engine": engine})
        logger.debug(f"Provision request accepted (engine={engine})")

    async def delete_store(self, name: str) -> None:
        """Ask the authority to delete the store called ``name``."""
        await self._request("DELETE", f"/stores/{quote(name, safe='')}")
        logger.debug(f"Delete request accepted for {name}")

    async def health_check(self) -> bool:
        """Check the authority answers ``GET /stores``.

        Returns:
            True if reachable and well-formed, False otherwise.
        """
        try:
            await self.list_stores()
            return True
        except AuthorityError as e:
            logger.debug(f"Health check failed: {e}")
            return False
