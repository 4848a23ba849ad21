"""
Protocol parameters as published by the node ``info`` endpoint.
"""

from __future__ import annotations

import hashlib

from pydantic import BaseModel, ConfigDict, Field


class RentStructure(BaseModel):
    """Byte cost and weighting factors of the storage deposit (rent) formula."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    v_byte_cost: int = Field(..., ge=0, alias="vByteCost")
    v_byte_factor_data: int = Field(..., ge=0, alias="vByteFactorData")
    v_byte_factor_key: int = Field(..., ge=0, alias="vByteFactorKey")


class ProtocolParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: int = Field(..., ge=0, le=255)
    network_name: str = Field(..., min_length=1, alias="networkName")
    bech32_hrp: str = Field(..., min_length=1, alias="bech32Hrp")
    min_pow_score: int = Field(default=0, ge=0, alias="minPowScore")
    below_max_depth: int = Field(default=15, ge=0, alias="belowMaxDepth")
    rent_structure: RentStructure = Field(..., alias="rentStructure")
    # The API encodes the supply as a decimal string
    token_supply: int = Field(..., ge=0, alias="tokenSupply")

    def network_id(self) -> int:
        """First 8 bytes of BLAKE2b-256(network name), little-endian."""
        digest = hashlib.blake2b(self.network_name.encode("utf-8"), digest_size=32).digest()
        return int.from_bytes(digest[:8], "little")
