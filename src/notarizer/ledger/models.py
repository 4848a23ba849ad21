"""
Ledger data model for Stardust-style UTXO ledgers.

Outputs, unlock conditions and features mirror the protocol objects one to
one so that the binary codec in ``notarizer.ledger.serialization`` can
serialize them without further context.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Union

OUTPUT_ID_LENGTH = 34
TRANSACTION_ID_LENGTH = 32
BLOCK_ID_LENGTH = 32
ADDRESS_HASH_LENGTH = 32
NATIVE_TOKEN_ID_LENGTH = 38

MAX_INPUTS_COUNT = 128
MAX_OUTPUTS_COUNT = 128
MAX_METADATA_LENGTH = 8192
MAX_PARENTS_COUNT = 8

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


class AddressType(IntEnum):
    ED25519 = 0
    ALIAS = 8
    NFT = 16


class OutputType(IntEnum):
    BASIC = 3
    ALIAS = 4
    FOUNDRY = 5
    NFT = 6


class UnlockConditionType(IntEnum):
    ADDRESS = 0
    STORAGE_DEPOSIT_RETURN = 1
    TIMELOCK = 2
    EXPIRATION = 3
    STATE_CONTROLLER_ADDRESS = 4
    GOVERNOR_ADDRESS = 5
    IMMUTABLE_ALIAS_ADDRESS = 6


class FeatureType(IntEnum):
    SENDER = 0
    ISSUER = 1
    METADATA = 2
    TAG = 3


class UnlockType(IntEnum):
    SIGNATURE = 0
    REFERENCE = 1


def to_hex(data: bytes) -> str:
    """Encode bytes the way the node API does (0x-prefixed, lowercase)."""
    return "0x" + data.hex()


def from_hex(value: str) -> bytes:
    """Decode a hex string, with or without the 0x prefix."""
    if value.startswith(("0x", "0X")):
        value = value[2:]
    # bytes.fromhex tolerates whitespace between bytes
    if not _HEX_RE.fullmatch(value):
        raise ValueError(f"not a hex string: {value!r}")
    return bytes.fromhex(value)


# Addresses


@dataclass(frozen=True)
class Ed25519Address:
    pub_key_hash: bytes

    type: ClassVar[AddressType] = AddressType.ED25519

    @classmethod
    def from_public_key(cls, public_key: bytes) -> Ed25519Address:
        """Address of an Ed25519 public key: BLAKE2b-256 of the key bytes."""
        from notarizer.ledger.serialization import blake2b_256

        return cls(blake2b_256(public_key))

    @property
    def raw(self) -> bytes:
        return self.pub_key_hash


@dataclass(frozen=True)
class AliasAddress:
    alias_id: bytes

    type: ClassVar[AddressType] = AddressType.ALIAS

    @property
    def raw(self) -> bytes:
        return self.alias_id


@dataclass(frozen=True)
class NFTAddress:
    nft_id: bytes

    type: ClassVar[AddressType] = AddressType.NFT

    @property
    def raw(self) -> bytes:
        return self.nft_id


Address = Union[Ed25519Address, AliasAddress, NFTAddress]


# Unlock conditions


@dataclass(frozen=True)
class AddressUnlockCondition:
    address: Address

    type: ClassVar[UnlockConditionType] = UnlockConditionType.ADDRESS


@dataclass(frozen=True)
class StorageDepositReturnUnlockCondition:
    return_address: Address
    amount: int

    type: ClassVar[UnlockConditionType] = UnlockConditionType.STORAGE_DEPOSIT_RETURN


@dataclass(frozen=True)
class TimelockUnlockCondition:
    unix_time: int

    type: ClassVar[UnlockConditionType] = UnlockConditionType.TIMELOCK


@dataclass(frozen=True)
class ExpirationUnlockCondition:
    return_address: Address
    unix_time: int

    type: ClassVar[UnlockConditionType] = UnlockConditionType.EXPIRATION


@dataclass(frozen=True)
class StateControllerAddressUnlockCondition:
    address: Address

    type: ClassVar[UnlockConditionType] = UnlockConditionType.STATE_CONTROLLER_ADDRESS


@dataclass(frozen=True)
class GovernorAddressUnlockCondition:
    address: Address

    type: ClassVar[UnlockConditionType] = UnlockConditionType.GOVERNOR_ADDRESS


@dataclass(frozen=True)
class ImmutableAliasAddressUnlockCondition:
    address: Address

    type: ClassVar[UnlockConditionType] = UnlockConditionType.IMMUTABLE_ALIAS_ADDRESS


UnlockCondition = Union[
    AddressUnlockCondition,
    StorageDepositReturnUnlockCondition,
    TimelockUnlockCondition,
    ExpirationUnlockCondition,
    StateControllerAddressUnlockCondition,
    GovernorAddressUnlockCondition,
    ImmutableAliasAddressUnlockCondition,
]


# Features


@dataclass(frozen=True)
class SenderFeature:
    address: Address

    type: ClassVar[FeatureType] = FeatureType.SENDER


@dataclass(frozen=True)
class IssuerFeature:
    address: Address

    type: ClassVar[FeatureType] = FeatureType.ISSUER


@dataclass(frozen=True)
class MetadataFeature:
    """Arbitrary opaque bytes attached to an output."""

    data: bytes

    type: ClassVar[FeatureType] = FeatureType.METADATA


@dataclass(frozen=True)
class TagFeature:
    tag: bytes

    type: ClassVar[FeatureType] = FeatureType.TAG


Feature = Union[SenderFeature, IssuerFeature, MetadataFeature, TagFeature]


@dataclass(frozen=True)
class NativeToken:
    token_id: bytes
    amount: int


# Outputs


@dataclass(frozen=True)
class BasicOutput:
    """
    The simplest output kind: an amount, unlock conditions and optional features.
    """

    amount: int
    unlock_conditions: tuple[UnlockCondition, ...] = ()
    features: tuple[Feature, ...] = ()
    native_tokens: tuple[NativeToken, ...] = ()

    type: ClassVar[OutputType] = OutputType.BASIC

    def metadata_features(self) -> list[MetadataFeature]:
        return [f for f in self.features if isinstance(f, MetadataFeature)]

    def metadata_feature(self) -> MetadataFeature | None:
        found = self.metadata_features()
        return found[0] if found else None

    def address_unlock_condition(self) -> AddressUnlockCondition | None:
        for condition in self.unlock_conditions:
            if isinstance(condition, AddressUnlockCondition):
                return condition
        return None

    def with_amount(self, amount: int) -> BasicOutput:
        return BasicOutput(
            amount=amount,
            unlock_conditions=self.unlock_conditions,
            features=self.features,
            native_tokens=self.native_tokens,
        )


@dataclass(frozen=True)
class AliasOutput:
    amount: int
    alias_id: bytes = bytes(32)
    state_index: int = 0
    foundry_counter: int = 0
    unlock_conditions: tuple[UnlockCondition, ...] = ()
    features: tuple[Feature, ...] = ()
    immutable_features: tuple[Feature, ...] = ()
    native_tokens: tuple[NativeToken, ...] = ()

    type: ClassVar[OutputType] = OutputType.ALIAS


@dataclass(frozen=True)
class FoundryOutput:
    amount: int
    serial_number: int = 0
    unlock_conditions: tuple[UnlockCondition, ...] = ()
    features: tuple[Feature, ...] = ()
    immutable_features: tuple[Feature, ...] = ()
    native_tokens: tuple[NativeToken, ...] = ()

    type: ClassVar[OutputType] = OutputType.FOUNDRY


@dataclass(frozen=True)
class NFTOutput:
    amount: int
    nft_id: bytes = bytes(32)
    unlock_conditions: tuple[UnlockCondition, ...] = ()
    features: tuple[Feature, ...] = ()
    immutable_features: tuple[Feature, ...] = ()
    native_tokens: tuple[NativeToken, ...] = ()

    type: ClassVar[OutputType] = OutputType.NFT


Output = Union[BasicOutput, AliasOutput, FoundryOutput, NFTOutput]


# Output identifiers


def output_id_from_hex(value: str) -> bytes:
    """Parse a 0x-prefixed output ID. Raises ValueError when malformed."""
    raw = from_hex(value)
    if len(raw) != OUTPUT_ID_LENGTH:
        raise ValueError(f"output ID must be {OUTPUT_ID_LENGTH} bytes, got {len(raw)}")
    return raw


def output_id_to_hex(output_id: bytes) -> str:
    return to_hex(output_id)


def make_output_id(transaction_id: bytes, index: int) -> bytes:
    return transaction_id + index.to_bytes(2, "little")


@dataclass(frozen=True)
class UTXOInput:
    transaction_id: bytes
    output_index: int

    @classmethod
    def from_output_id(cls, output_id: bytes) -> UTXOInput:
        if len(output_id) != OUTPUT_ID_LENGTH:
            raise ValueError(f"output ID must be {OUTPUT_ID_LENGTH} bytes, got {len(output_id)}")
        return cls(
            transaction_id=output_id[:TRANSACTION_ID_LENGTH],
            output_index=int.from_bytes(output_id[TRANSACTION_ID_LENGTH:], "little"),
        )

    @property
    def output_id(self) -> bytes:
        return make_output_id(self.transaction_id, self.output_index)


@dataclass(frozen=True)
class UnspentOutput:
    """An unspent output as returned by the indexer, with its owner."""

    output_id: bytes
    output: Output
    address: str


@dataclass(frozen=True)
class EligibleOutput:
    """A basic, metadata-free output that may be spent by a notarization."""

    output_id: bytes
    output: BasicOutput


# Transactions and blocks


@dataclass(frozen=True)
class Ed25519Signature:
    public_key: bytes
    signature: bytes


@dataclass(frozen=True)
class SignatureUnlock:
    signature: Ed25519Signature

    type: ClassVar[UnlockType] = UnlockType.SIGNATURE


@dataclass(frozen=True)
class ReferenceUnlock:
    reference: int

    type: ClassVar[UnlockType] = UnlockType.REFERENCE


Unlock = Union[SignatureUnlock, ReferenceUnlock]


@dataclass(frozen=True)
class TransactionEssence:
    network_id: int
    inputs: tuple[UTXOInput, ...]
    inputs_commitment: bytes
    outputs: tuple[BasicOutput, ...]


@dataclass(frozen=True)
class Transaction:
    """Signed transaction payload: an essence plus one unlock per input."""

    essence: TransactionEssence
    unlocks: tuple[Unlock, ...]

    def id(self) -> bytes:
        from notarizer.ledger.serialization import transaction_id

        return transaction_id(self)

    def id_hex(self) -> str:
        return to_hex(self.id())


@dataclass(frozen=True)
class Block:
    protocol_version: int
    parents: tuple[bytes, ...]
    payload: Transaction | None = None
    nonce: int = 0


@dataclass
class OutputMetadata:
    """Ledger metadata the node returns alongside an output."""

    block_id: str = ""
    transaction_id: str = ""
    output_index: int = 0
    is_spent: bool = False
    ledger_index: int = 0
    extra: dict = field(default_factory=dict)
