"""
Verifier: does an output carry a claimed hash in its metadata?
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from notarizer.errors import InvalidOutputIdError, NodeError, UnexpectedOutputTypeError
from notarizer.ledger.models import BasicOutput, output_id_from_hex

if TYPE_CHECKING:
    from loguru import Logger

    from notarizer.clients.node import NodeClient


def metadata_matches(output: BasicOutput, hash_value: str) -> bool:
    """True if any metadata feature holds exactly the UTF-8 bytes of hash_value."""
    claimed = hash_value.encode("utf-8")
    return any(feature.data == claimed for feature in output.metadata_features())


class Verifier:
    def __init__(self, node: NodeClient, log: Logger | None = None):
        self.node = node
        self.log = (log or logger).bind(component="verifier")

    async def verify(self, hash_value: str, output_id_hex: str) -> bool:
        """
        A missing output is a negative result, not an error: it is evidence
        that no notarization exists under that identifier.

        Raises:
            InvalidOutputIdError: output_id_hex is not a valid output ID
            UnexpectedOutputTypeError: The output exists but is not a basic output
        """
        try:
            output_id = output_id_from_hex(output_id_hex)
        except ValueError as e:
            raise InvalidOutputIdError(f"Invalid output ID {output_id_hex!r}: {e}") from e

        try:
            output, _metadata = await self.node.output(output_id)
        except NodeError as e:
            self.log.debug(f"No output found with ID {output_id_hex}: {e}")
            return False

        if not isinstance(output, BasicOutput):
            raise UnexpectedOutputTypeError(
                f"Output {output_id_hex} is a {type(output).__name__}, expected BasicOutput"
            )

        if metadata_matches(output, hash_value):
            self.log.debug(f"Matching hash found in output {output_id_hex}")
            return True

        self.log.debug(f"No matching metadata feature in output {output_id_hex}")
        return False
