"""
Block submitter: attach a signed transaction to the current tips.

Stages and their errors:
- tips:   TipFetchError      (nothing was sent)
- build:  BlockBuildError    (nothing was sent)
- submit: BlockSubmitError   (the block may have reached the node)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from notarizer.errors import (
    BlockBuildError,
    BlockSubmitError,
    NodeError,
    SerializationError,
    TipFetchError,
)
from notarizer.ledger.models import MAX_PARENTS_COUNT, Block, Transaction
from notarizer.ledger.params import ProtocolParameters
from notarizer.ledger.serialization import serialize_block

if TYPE_CHECKING:
    from loguru import Logger

    from notarizer.clients.node import NodeClient


def build_block(params: ProtocolParameters, tips: list[bytes], transaction: Transaction) -> Block:
    """
    Build a block carrying transaction, with tips as parents.

    The nonce is left at zero; the node performs proof of work if required.
    """
    parents = tuple(sorted(set(tips)))
    if not parents:
        raise BlockBuildError("No tips available to attach to")
    if len(parents) > MAX_PARENTS_COUNT:
        raise BlockBuildError(f"{len(parents)} tips exceed the maximum of {MAX_PARENTS_COUNT}")

    return Block(protocol_version=params.version, parents=parents, payload=transaction)


class BlockSubmitter:
    def __init__(self, node: NodeClient, log: Logger | None = None):
        self.node = node
        self.log = (log or logger).bind(component="submitter")

    async def submit(self, transaction: Transaction, params: ProtocolParameters) -> str:
        """Submit transaction in a new block. Returns the hex block ID."""
        self.log.debug(f"Transaction ID: {transaction.id_hex()}")

        try:
            tips = await self.node.tips()
        except NodeError as e:
            raise TipFetchError(f"Failed to fetch tips: {e}") from e

        try:
            block = build_block(params, tips, transaction)
            block_bytes = serialize_block(block)
        except SerializationError as e:
            raise BlockBuildError(f"Failed to build block: {e}") from e

        self.log.debug(f"Built block with {len(block.parents)} parents, {len(block_bytes)} bytes")

        try:
            block_id = await self.node.submit_block(block_bytes)
        except NodeError as e:
            raise BlockSubmitError(f"Failed to submit block: {e}") from e

        self.log.info(f"Block attached with ID: {block_id}")
        return block_id
