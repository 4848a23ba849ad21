"""
Indexer plugin client.

The indexer answers output queries page by page. Each page carries a list of
output IDs and, unless it is the last one, a cursor to request the next page.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass

from notarizer.clients.base import RestClient
from notarizer.clients.node import NodeClient
from notarizer.errors import FetchError, NodeError
from notarizer.ledger.models import output_id_from_hex

INDEXER_ROUTE = "indexer/v1"
INDEXER_API = "api/indexer/v1"

# Polling interval while waiting for the indexer plugin to register
AVAILABILITY_POLL_INTERVAL = 1.0


@dataclass
class IndexerPage:
    ledger_index: int
    items: list[bytes]
    cursor: str | None = None


class IndexerClient(RestClient):
    def __init__(self, node: NodeClient, poll_interval: float = AVAILABILITY_POLL_INTERVAL, **kwargs):
        kwargs.setdefault("client", node.client)
        super().__init__(node.base_url, **kwargs)
        self.node = node
        self.poll_interval = poll_interval

    async def is_available(self) -> bool:
        try:
            routes = await self.node.routes()
        except NodeError as e:
            self.log.debug(f"Node routes not reachable yet: {e}")
            return False
        return INDEXER_ROUTE in routes

    async def wait_available(self) -> None:
        """
        Block until the node advertises the indexer route.

        Does not time out by itself; callers bound it with a deadline.
        """
        while not await self.is_available():
            self.log.debug("Waiting for indexer plugin...")
            await asyncio.sleep(self.poll_interval)

    async def basic_outputs(self, address: str, page_size: int = 1000) -> AsyncIterator[IndexerPage]:
        """
        Iterate over the pages of unspent basic outputs owned by address.

        Raises:
            FetchError: If any page cannot be fetched or parsed
        """
        cursor: str | None = None

        while True:
            params: dict[str, str | int] = {"address": address, "pageSize": page_size}
            if cursor:
                params["cursor"] = cursor

            try:
                data = await self._api_call("GET", f"{INDEXER_API}/outputs/basic", params=params)
                page = IndexerPage(
                    ledger_index=int(data.get("ledgerIndex", 0)),
                    items=[output_id_from_hex(item) for item in data.get("items", [])],
                    cursor=data.get("cursor") or None,
                )
            except NodeError as e:
                raise FetchError(f"Failed to fetch outputs from indexer: {e}") from e
            except (AttributeError, TypeError, ValueError) as e:
                raise FetchError(f"Malformed indexer page: {e}") from e

            yield page

            if page.cursor is None:
                return
            cursor = page.cursor
