"""
Notarizer service: one notarization or verification per call.

Nothing is cached between calls. Every notarization reloads the seed phrase,
re-derives the wallet and re-queries the unspent outputs; only the HTTP client
handles are shared.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from loguru import logger

from notarizer.clients.indexer import IndexerClient
from notarizer.clients.node import NodeClient
from notarizer.config import Settings
from notarizer.engine.assembler import TransactionAssembler
from notarizer.engine.fetcher import UTXOFetcher
from notarizer.engine.filters import filter_outputs
from notarizer.engine.submitter import BlockSubmitter
from notarizer.engine.verifier import Verifier
from notarizer.ledger.params import ProtocolParameters
from notarizer.wallet.hdwallet import WalletIdentity, derive_wallet, load_seed_phrase

if TYPE_CHECKING:
    from loguru import Logger


class Notarizer:
    def __init__(
        self,
        settings: Settings,
        node: NodeClient | None = None,
        indexer: IndexerClient | None = None,
        environ: Mapping[str, str] | None = None,
        log: Logger | None = None,
    ):
        self.settings = settings
        self.environ = environ
        self.log = (log or logger).bind(component="notarizer")

        self.node = node or NodeClient(settings.node_url, timeout=settings.node_timeout, log=log)
        self.indexer = indexer or IndexerClient(self.node, log=log)

        self.fetcher = UTXOFetcher(
            self.indexer,
            self.node,
            indexer_available_timeout=settings.indexer_available_timeout,
            request_timeout=settings.request_timeout,
            page_size=settings.indexer_page_size,
            log=log,
        )
        self.assembler = TransactionAssembler(log=log)
        self.submitter = BlockSubmitter(self.node, log=log)
        self.verifier = Verifier(self.node, log=log)

    async def protocol_parameters(self) -> ProtocolParameters:
        params = await self.node.protocol_parameters()
        self.log.debug(f"Protocol parameters: {params}")
        return params

    def prepare_wallet(self, params: ProtocolParameters) -> WalletIdentity:
        seed_phrase = load_seed_phrase(self.settings.mnemonic_env_var, self.environ)
        self.log.debug("Mnemonic loaded successfully")

        return derive_wallet(
            seed_phrase,
            self.settings.mnemonic_passphrase,
            self.settings.account_index,
            hrp=params.bech32_hrp,
            coin_type=self.settings.coin_type,
            address_index=self.settings.address_index,
            log=self.log,
        )

    async def address(self) -> str:
        params = await self.protocol_parameters()
        return self.prepare_wallet(params).bech32_address

    async def create(self, hash_value: str) -> str:
        """Notarize hash_value. Returns the hex ID of the submitted block."""
        self.log.debug(f"Notarization hash: {hash_value}")

        params = await self.protocol_parameters()
        wallet = self.prepare_wallet(params)

        unspent = await self.fetcher.fetch(wallet.bech32_address)
        eligible = filter_outputs(unspent, log=self.log)
        self.log.debug(f"{len(eligible)} of {len(unspent)} outputs eligible as inputs")

        transaction = self.assembler.assemble(
            eligible, wallet.address, wallet.signer, params, hash_value
        )
        return await self.submitter.submit(transaction, params)

    async def verify(self, hash_value: str, output_id: str) -> bool:
        return await self.verifier.verify(hash_value, output_id)

    async def close(self) -> None:
        # The indexer shares the node's HTTP client
        await self.node.close()
        if self.indexer.client is not self.node.client:
            await self.indexer.close()
