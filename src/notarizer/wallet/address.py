"""
Bech32 encoding of ledger addresses.

Unlike segwit addresses there is no witness version: the data part is the
address type byte followed by the 32-byte address hash, regrouped into
5-bit words.
"""

from __future__ import annotations

import bech32

from notarizer.ledger.models import (
    ADDRESS_HASH_LENGTH,
    AddressType,
    AliasAddress,
    Ed25519Address,
    NFTAddress,
)

_ADDRESS_CLASSES = {
    AddressType.ED25519: Ed25519Address,
    AddressType.ALIAS: AliasAddress,
    AddressType.NFT: NFTAddress,
}


def address_to_bech32(address, hrp: str) -> str:
    """Encode an address with the network's human-readable part (e.g. "tst")."""
    payload = bytes([address.type]) + address.raw
    data = bech32.convertbits(payload, 8, 5)
    if data is None:
        raise ValueError(f"Failed to convert address bits: {payload.hex()}")
    return bech32.bech32_encode(hrp, data)


def bech32_to_address(value: str, hrp: str | None = None):
    """
    Decode a bech32 address string.

    Args:
        value: Bech32 address
        hrp: Expected human-readable part, checked when given

    Raises:
        ValueError: If the string is not a valid address
    """
    decoded_hrp, data = bech32.bech32_decode(value)
    if decoded_hrp is None or data is None:
        raise ValueError(f"Invalid bech32 address: {value}")
    if hrp is not None and decoded_hrp != hrp:
        raise ValueError(f"Address prefix {decoded_hrp!r} does not match {hrp!r}")

    payload = bech32.convertbits(data, 5, 8, False)
    if payload is None or len(payload) != 1 + ADDRESS_HASH_LENGTH:
        raise ValueError(f"Invalid address payload: {value}")

    try:
        cls = _ADDRESS_CLASSES[AddressType(payload[0])]
    except ValueError as e:
        raise ValueError(f"Unknown address type {payload[0]} in {value}") from e

    return cls(bytes(payload[1:]))
