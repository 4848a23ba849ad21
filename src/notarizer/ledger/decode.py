"""
Decoding of ledger objects from the node's JSON representation.
"""

from __future__ import annotations

from typing import Any

from notarizer.errors import SerializationError
from notarizer.ledger.models import (
    AddressType,
    AddressUnlockCondition,
    AliasAddress,
    AliasOutput,
    BasicOutput,
    Ed25519Address,
    ExpirationUnlockCondition,
    FeatureType,
    FoundryOutput,
    GovernorAddressUnlockCondition,
    ImmutableAliasAddressUnlockCondition,
    IssuerFeature,
    MetadataFeature,
    NativeToken,
    NFTAddress,
    NFTOutput,
    OutputMetadata,
    OutputType,
    SenderFeature,
    StateControllerAddressUnlockCondition,
    StorageDepositReturnUnlockCondition,
    TagFeature,
    TimelockUnlockCondition,
    UnlockConditionType,
    from_hex,
)


def address_from_json(data: dict[str, Any]):
    kind = data["type"]
    if kind == AddressType.ED25519:
        return Ed25519Address(from_hex(data["pubKeyHash"]))
    if kind == AddressType.ALIAS:
        return AliasAddress(from_hex(data["aliasId"]))
    if kind == AddressType.NFT:
        return NFTAddress(from_hex(data["nftId"]))
    raise SerializationError(f"Unknown address type: {kind}")


def unlock_condition_from_json(data: dict[str, Any]):
    kind = data["type"]
    if kind == UnlockConditionType.ADDRESS:
        return AddressUnlockCondition(address_from_json(data["address"]))
    if kind == UnlockConditionType.STORAGE_DEPOSIT_RETURN:
        return StorageDepositReturnUnlockCondition(
            return_address=address_from_json(data["returnAddress"]),
            amount=int(data["amount"]),
        )
    if kind == UnlockConditionType.TIMELOCK:
        return TimelockUnlockCondition(unix_time=int(data["unixTime"]))
    if kind == UnlockConditionType.EXPIRATION:
        return ExpirationUnlockCondition(
            return_address=address_from_json(data["returnAddress"]),
            unix_time=int(data["unixTime"]),
        )
    if kind == UnlockConditionType.STATE_CONTROLLER_ADDRESS:
        return StateControllerAddressUnlockCondition(address_from_json(data["address"]))
    if kind == UnlockConditionType.GOVERNOR_ADDRESS:
        return GovernorAddressUnlockCondition(address_from_json(data["address"]))
    if kind == UnlockConditionType.IMMUTABLE_ALIAS_ADDRESS:
        return ImmutableAliasAddressUnlockCondition(address_from_json(data["address"]))
    raise SerializationError(f"Unknown unlock condition type: {kind}")


def feature_from_json(data: dict[str, Any]):
    kind = data["type"]
    if kind == FeatureType.SENDER:
        return SenderFeature(address_from_json(data["address"]))
    if kind == FeatureType.ISSUER:
        return IssuerFeature(address_from_json(data["address"]))
    if kind == FeatureType.METADATA:
        return MetadataFeature(from_hex(data["data"]))
    if kind == FeatureType.TAG:
        return TagFeature(from_hex(data["tag"]))
    raise SerializationError(f"Unknown feature type: {kind}")


def native_token_from_json(data: dict[str, Any]) -> NativeToken:
    # Amounts are hex-encoded uint256 values
    return NativeToken(token_id=from_hex(data["id"]), amount=int(data["amount"], 16))


def output_from_json(data: dict[str, Any]):
    """
    Decode an output object as returned by ``GET /api/core/v2/outputs/{id}``.

    Raises:
        SerializationError: If the object is malformed or of an unknown type
    """
    try:
        kind = data["type"]
        amount = int(data["amount"])
        conditions = tuple(unlock_condition_from_json(c) for c in data.get("unlockConditions", []))
        features = tuple(feature_from_json(f) for f in data.get("features", []))
        immutable = tuple(feature_from_json(f) for f in data.get("immutableFeatures", []))
        tokens = tuple(native_token_from_json(t) for t in data.get("nativeTokens", []))

        if kind == OutputType.BASIC:
            return BasicOutput(
                amount=amount,
                unlock_conditions=conditions,
                features=features,
                native_tokens=tokens,
            )
        if kind == OutputType.ALIAS:
            return AliasOutput(
                amount=amount,
                alias_id=from_hex(data["aliasId"]),
                state_index=int(data.get("stateIndex", 0)),
                foundry_counter=int(data.get("foundryCounter", 0)),
                unlock_conditions=conditions,
                features=features,
                immutable_features=immutable,
                native_tokens=tokens,
            )
        if kind == OutputType.FOUNDRY:
            return FoundryOutput(
                amount=amount,
                serial_number=int(data.get("serialNumber", 0)),
                unlock_conditions=conditions,
                features=features,
                immutable_features=immutable,
                native_tokens=tokens,
            )
        if kind == OutputType.NFT:
            return NFTOutput(
                amount=amount,
                nft_id=from_hex(data["nftId"]),
                unlock_conditions=conditions,
                features=features,
                immutable_features=immutable,
                native_tokens=tokens,
            )
    except SerializationError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise SerializationError(f"Malformed output: {e}") from e

    raise SerializationError(f"Unknown output type: {kind}")


def output_metadata_from_json(data: dict[str, Any]) -> OutputMetadata:
    return OutputMetadata(
        block_id=data.get("blockId", ""),
        transaction_id=data.get("transactionId", ""),
        output_index=int(data.get("outputIndex", 0)),
        is_spent=bool(data.get("isSpent", False)),
        ledger_index=int(data.get("ledgerIndex", 0)),
        extra={
            k: v
            for k, v in data.items()
            if k not in ("blockId", "transactionId", "outputIndex", "isSpent", "ledgerIndex")
        },
    )
