"""
Binary serialization of ledger objects.

Follows the Stardust wire format: little-endian integers, one-byte type
prefixes for addresses, unlock conditions, features and outputs, and a
four-byte type prefix for payloads. The serialized forms feed the rent
calculation, the essence signature, the transaction ID and block submission.
"""

from __future__ import annotations

import hashlib
import struct

from notarizer.errors import SerializationError
from notarizer.ledger.models import (
    ADDRESS_HASH_LENGTH,
    BLOCK_ID_LENGTH,
    MAX_PARENTS_COUNT,
    NATIVE_TOKEN_ID_LENGTH,
    AddressUnlockCondition,
    BasicOutput,
    Block,
    Ed25519Signature,
    ExpirationUnlockCondition,
    GovernorAddressUnlockCondition,
    ImmutableAliasAddressUnlockCondition,
    IssuerFeature,
    MetadataFeature,
    NativeToken,
    ReferenceUnlock,
    SenderFeature,
    SignatureUnlock,
    StateControllerAddressUnlockCondition,
    StorageDepositReturnUnlockCondition,
    TagFeature,
    TimelockUnlockCondition,
    Transaction,
    TransactionEssence,
    UTXOInput,
)

TRANSACTION_ESSENCE_TYPE = 1
TRANSACTION_PAYLOAD_TYPE = 6
UTXO_INPUT_TYPE = 0
ED25519_SIGNATURE_TYPE = 0


def blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def serialize_address(address) -> bytes:
    raw = address.raw
    if len(raw) != ADDRESS_HASH_LENGTH:
        raise SerializationError(f"Invalid address length: {len(raw)}")
    return struct.pack("<B", address.type) + raw


def serialize_unlock_condition(condition) -> bytes:
    result = struct.pack("<B", condition.type)

    if isinstance(
        condition,
        (
            AddressUnlockCondition,
            StateControllerAddressUnlockCondition,
            GovernorAddressUnlockCondition,
            ImmutableAliasAddressUnlockCondition,
        ),
    ):
        return result + serialize_address(condition.address)
    if isinstance(condition, StorageDepositReturnUnlockCondition):
        return result + serialize_address(condition.return_address) + struct.pack(
            "<Q", condition.amount
        )
    if isinstance(condition, TimelockUnlockCondition):
        return result + struct.pack("<I", condition.unix_time)
    if isinstance(condition, ExpirationUnlockCondition):
        return result + serialize_address(condition.return_address) + struct.pack(
            "<I", condition.unix_time
        )

    raise SerializationError(f"Unsupported unlock condition: {type(condition).__name__}")


def serialize_feature(feature) -> bytes:
    result = struct.pack("<B", feature.type)

    if isinstance(feature, (SenderFeature, IssuerFeature)):
        return result + serialize_address(feature.address)
    if isinstance(feature, MetadataFeature):
        if not 1 <= len(feature.data) <= 0xFFFF:
            raise SerializationError(f"Invalid metadata length: {len(feature.data)}")
        return result + struct.pack("<H", len(feature.data)) + feature.data
    if isinstance(feature, TagFeature):
        if not 1 <= len(feature.tag) <= 0xFF:
            raise SerializationError(f"Invalid tag length: {len(feature.tag)}")
        return result + struct.pack("<B", len(feature.tag)) + feature.tag

    raise SerializationError(f"Unsupported feature: {type(feature).__name__}")


def serialize_native_token(token: NativeToken) -> bytes:
    if len(token.token_id) != NATIVE_TOKEN_ID_LENGTH:
        raise SerializationError(f"Invalid native token ID length: {len(token.token_id)}")
    # uint256 amount
    return token.token_id + token.amount.to_bytes(32, "little")


def serialize_output(output) -> bytes:
    """Serialize an output. Only basic outputs are ever built by this service."""
    if not isinstance(output, BasicOutput):
        raise SerializationError(f"Unsupported output type: {type(output).__name__}")

    try:
        result = struct.pack("<BQ", output.type, output.amount)
    except struct.error as e:
        raise SerializationError(f"Invalid output amount {output.amount}: {e}") from e

    result += struct.pack("<B", len(output.native_tokens))
    for token in output.native_tokens:
        result += serialize_native_token(token)

    result += struct.pack("<B", len(output.unlock_conditions))
    for condition in output.unlock_conditions:
        result += serialize_unlock_condition(condition)

    result += struct.pack("<B", len(output.features))
    for feature in output.features:
        result += serialize_feature(feature)

    return result


def serialize_utxo_input(inp: UTXOInput) -> bytes:
    return struct.pack("<B", UTXO_INPUT_TYPE) + inp.transaction_id + struct.pack(
        "<H", inp.output_index
    )


def inputs_commitment(consumed_outputs) -> bytes:
    """BLAKE2b-256 over the concatenated BLAKE2b-256 hashes of the consumed outputs."""
    hashes = b"".join(blake2b_256(serialize_output(output)) for output in consumed_outputs)
    return blake2b_256(hashes)


def serialize_essence(essence: TransactionEssence) -> bytes:
    result = struct.pack("<BQ", TRANSACTION_ESSENCE_TYPE, essence.network_id)

    result += struct.pack("<H", len(essence.inputs))
    for inp in essence.inputs:
        result += serialize_utxo_input(inp)

    result += essence.inputs_commitment

    result += struct.pack("<H", len(essence.outputs))
    for output in essence.outputs:
        result += serialize_output(output)

    # No tagged data payload inside the essence
    result += struct.pack("<I", 0)
    return result


def essence_signing_message(essence: TransactionEssence) -> bytes:
    """The message every unlock signature commits to."""
    return blake2b_256(serialize_essence(essence))


def serialize_signature(signature: Ed25519Signature) -> bytes:
    if len(signature.public_key) != 32 or len(signature.signature) != 64:
        raise SerializationError("Invalid Ed25519 signature encoding")
    return struct.pack("<B", ED25519_SIGNATURE_TYPE) + signature.public_key + signature.signature


def serialize_unlock(unlock) -> bytes:
    if isinstance(unlock, SignatureUnlock):
        return struct.pack("<B", unlock.type) + serialize_signature(unlock.signature)
    if isinstance(unlock, ReferenceUnlock):
        return struct.pack("<BH", unlock.type, unlock.reference)
    raise SerializationError(f"Unsupported unlock: {type(unlock).__name__}")


def serialize_transaction(transaction: Transaction) -> bytes:
    result = struct.pack("<I", TRANSACTION_PAYLOAD_TYPE)
    result += serialize_essence(transaction.essence)
    result += struct.pack("<H", len(transaction.unlocks))
    for unlock in transaction.unlocks:
        result += serialize_unlock(unlock)
    return result


def transaction_id(transaction: Transaction) -> bytes:
    return blake2b_256(serialize_transaction(transaction))


def serialize_block(block: Block) -> bytes:
    """Serialize a block; parents must already be sorted and unique."""
    if not 1 <= len(block.parents) <= MAX_PARENTS_COUNT:
        raise SerializationError(f"Block must have 1-{MAX_PARENTS_COUNT} parents")
    if list(block.parents) != sorted(set(block.parents)):
        raise SerializationError("Block parents must be sorted and unique")

    result = struct.pack("<BB", block.protocol_version, len(block.parents))
    for parent in block.parents:
        if len(parent) != BLOCK_ID_LENGTH:
            raise SerializationError(f"Invalid parent block ID length: {len(parent)}")
        result += parent

    payload = serialize_transaction(block.payload) if block.payload is not None else b""
    result += struct.pack("<I", len(payload)) + payload
    result += struct.pack("<Q", block.nonce)
    return result
