"""
Ledger model, protocol parameters, binary codec and rent calculation.
"""

from notarizer.ledger.models import (
    AddressUnlockCondition,
    AliasOutput,
    BasicOutput,
    Block,
    Ed25519Address,
    EligibleOutput,
    FoundryOutput,
    MetadataFeature,
    NFTOutput,
    Transaction,
    TransactionEssence,
    UnspentOutput,
    UTXOInput,
    output_id_from_hex,
    output_id_to_hex,
)
from notarizer.ledger.params import ProtocolParameters, RentStructure
from notarizer.ledger.rent import min_deposit

__all__ = [
    "AddressUnlockCondition",
    "AliasOutput",
    "BasicOutput",
    "Block",
    "Ed25519Address",
    "EligibleOutput",
    "FoundryOutput",
    "MetadataFeature",
    "NFTOutput",
    "ProtocolParameters",
    "RentStructure",
    "Transaction",
    "TransactionEssence",
    "UTXOInput",
    "UnspentOutput",
    "min_deposit",
    "output_id_from_hex",
    "output_id_to_hex",
]
