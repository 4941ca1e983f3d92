"""GraphQL index client — paginated users and active markets."""
from __future__ import annotations

import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import FetcherConfig
from ..errors import SourceFetchError
from ..models import UserPage

logger = logging.getLogger(__name__)

USERS_QUERY = """query GetAccounts($first: Int, $lastId: ID) {
  accounts(
    first: $first
    where: { id_gt: $lastId }
    orderBy: id
    orderDirection: asc
  ) {
    id
    address
  }
}"""

MARKETS_QUERY = """query GetMarkets {
  markets(first: 1000, where: { isActive: true }) {
    address
  }
}"""


class GraphFetcher:
    """Fetch users and markets from a subgraph.

    Pages are keyed by the last account id seen; a short page means the end.
    """

    def __init__(self, config: FetcherConfig) -> None:
        self.graph_url = config.graph_url
        self.page_size = config.page_size
        self.timeout = config.timeout

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        payload = {"query": query, "variables": variables}
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.post(
                    self.graph_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        raise SourceFetchError(
                            f"Graph query failed: HTTP {response.status}"
                        )
                    body = await response.json()
        except SourceFetchError:
            raise
        except Exception as e:
            raise SourceFetchError(f"Graph query failed: {e}") from e

        if body.get("errors"):
            raise SourceFetchError(f"Graph errors: {body['errors']}")
        data = body.get("data")
        if not data:
            raise SourceFetchError("Unknown graph error: empty data")
        return data

    async def fetch_page(self, cursor: str = "") -> UserPage:
        data = await self._query(
            USERS_QUERY, {"lastId": cursor, "first": self.page_size}
        )
        accounts = data.get("accounts")
        if not isinstance(accounts, list):
            raise SourceFetchError("Malformed page: missing accounts")

        try:
            users = tuple(a["address"].lower() for a in accounts)
            next_cursor = accounts[-1]["id"] if accounts else ""
        except (KeyError, TypeError, AttributeError) as e:
            raise SourceFetchError(f"Malformed account entry: {e}") from e

        logger.debug("Fetched %d accounts after %r", len(users), cursor)
        return UserPage(
            users=users,
            next_cursor=next_cursor,
            has_more=len(accounts) == self.page_size,
        )

    async def fetch_active_markets(self) -> list[str]:
        data = await self._query(MARKETS_QUERY, {})
        markets = data.get("markets")
        if not isinstance(markets, list):
            raise SourceFetchError("Malformed markets response")
        try:
            return [m["address"].lower() for m in markets]
        except (KeyError, TypeError, AttributeError) as e:
            raise SourceFetchError(f"Malformed market entry: {e}") from e
