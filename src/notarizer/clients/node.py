"""
Ledger node core API client.

Endpoints used:
- GET  /api/routes                  registered plugin routes
- GET  /api/core/v2/info            node info incl. protocol parameters
- GET  /api/core/v2/tips            current tips to attach new blocks to
- POST /api/core/v2/blocks          submit a serialized block
- GET  /api/core/v2/outputs/{id}    output and its ledger metadata
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from notarizer.clients.base import RestClient
from notarizer.errors import NodeError, OutputNotFoundError, SerializationError
from notarizer.ledger.decode import output_from_json, output_metadata_from_json
from notarizer.ledger.models import BLOCK_ID_LENGTH, OutputMetadata, from_hex, output_id_to_hex
from notarizer.ledger.params import ProtocolParameters

CORE_API = "api/core/v2"
BLOCK_MIME_TYPE = "application/vnd.iota.serializer-v1"


class NodeClient(RestClient):
    async def routes(self) -> list[str]:
        data = await self._api_call("GET", "api/routes")
        return list((data or {}).get("routes", []))

    async def info(self) -> dict[str, Any]:
        return await self._api_call("GET", f"{CORE_API}/info")

    async def protocol_parameters(self) -> ProtocolParameters:
        info = await self.info()
        try:
            return ProtocolParameters.model_validate(info["protocol"])
        except (KeyError, TypeError, ValidationError) as e:
            raise NodeError(f"Invalid protocol parameters in node info: {e}") from e

    async def tips(self) -> list[bytes]:
        data = await self._api_call("GET", f"{CORE_API}/tips")
        try:
            tips = [from_hex(tip) for tip in data["tips"]]
        except (KeyError, TypeError, ValueError) as e:
            raise NodeError(f"Failed to parse tips from response: {e}") from e

        for tip in tips:
            if len(tip) != BLOCK_ID_LENGTH:
                raise NodeError(f"Invalid tip length: {len(tip)}")
        return tips

    async def submit_block(self, block_bytes: bytes) -> str:
        """Submit a serialized block. Returns the block ID assigned by the node."""
        data = await self._api_call(
            "POST",
            f"{CORE_API}/blocks",
            content=block_bytes,
            headers={"Content-Type": BLOCK_MIME_TYPE},
        )
        try:
            return str(data["blockId"])
        except (KeyError, TypeError) as e:
            raise NodeError(f"Block submission response carries no block ID: {data}") from e

    async def output(self, output_id: bytes) -> tuple[Any, OutputMetadata]:
        """
        Fetch an output by ID.

        Raises:
            OutputNotFoundError: If the node does not know the output
            NodeError: On any other failure, including undecodable outputs
        """
        hex_id = output_id_to_hex(output_id)
        try:
            data = await self._api_call("GET", f"{CORE_API}/outputs/{hex_id}")
        except NodeError as e:
            if e.status_code == 404:
                raise OutputNotFoundError(f"Output {hex_id} not found", status_code=404) from e
            raise

        try:
            output = output_from_json(data["output"])
            metadata = output_metadata_from_json(data.get("metadata") or {})
        except (KeyError, TypeError, ValueError, SerializationError) as e:
            raise NodeError(f"Failed to decode output {hex_id}: {e}") from e

        return output, metadata
