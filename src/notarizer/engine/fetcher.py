"""
UTXO fetcher: every unspent output currently owned by an address.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

from notarizer.errors import FetchError, IndexerTimeoutError, IndexerUnavailableError, NodeError
from notarizer.ledger.models import UnspentOutput, output_id_to_hex

if TYPE_CHECKING:
    from loguru import Logger

    from notarizer.clients.indexer import IndexerClient
    from notarizer.clients.node import NodeClient

# The indexer runs as a sidecar plugin and may need time to start
INDEXER_AVAILABLE_TIMEOUT = 30.0
REQUEST_TIMEOUT = 5.0


class UTXOFetcher:
    """
    Drains the indexer result stream for an address.

    Two deadlines apply: one for the indexer to become available and one for
    the query itself, covering every page and every output lookup. A failure
    anywhere aborts the whole fetch; a partial set is never returned.
    """

    def __init__(
        self,
        indexer: IndexerClient,
        node: NodeClient,
        *,
        indexer_available_timeout: float = INDEXER_AVAILABLE_TIMEOUT,
        request_timeout: float = REQUEST_TIMEOUT,
        page_size: int = 1000,
        log: Logger | None = None,
    ):
        self.indexer = indexer
        self.node = node
        self.indexer_available_timeout = indexer_available_timeout
        self.request_timeout = request_timeout
        self.page_size = page_size
        self.log = (log or logger).bind(component="fetcher")

    async def fetch(self, address: str) -> list[UnspentOutput]:
        """
        Raises:
            IndexerUnavailableError: The indexer did not come up in time
            IndexerTimeoutError: The query did not finish in time
            FetchError: A page or an output lookup failed
        """
        try:
            async with asyncio.timeout(self.indexer_available_timeout):
                await self.indexer.wait_available()
        except TimeoutError as e:
            raise IndexerUnavailableError(
                f"Indexer not available after {self.indexer_available_timeout}s"
            ) from e

        self.log.debug(f"Fetching UTXO outputs for address: {address}")

        try:
            async with asyncio.timeout(self.request_timeout):
                outputs = await self._drain(address)
        except TimeoutError as e:
            raise IndexerTimeoutError(
                f"Fetching outputs for {address} timed out after {self.request_timeout}s"
            ) from e

        self.log.debug(f"Fetched {len(outputs)} unspent outputs for {address}")
        return outputs

    async def _drain(self, address: str) -> list[UnspentOutput]:
        outputs: list[UnspentOutput] = []
        pages = 0

        async for page in self.indexer.basic_outputs(address, page_size=self.page_size):
            pages += 1
            for output_id in page.items:
                try:
                    output, _metadata = await self.node.output(output_id)
                except NodeError as e:
                    raise FetchError(
                        f"Failed to resolve output {output_id_to_hex(output_id)}: {e}"
                    ) from e
                outputs.append(UnspentOutput(output_id=output_id, output=output, address=address))

        self.log.debug(f"Drained {pages} indexer page(s)")
        return outputs
