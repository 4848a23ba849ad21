"""
Transaction assembler for notarization transactions.

Builds a balanced transaction from the eligible inputs:
- Output 0: notarization output holding the hash as metadata, with exactly
  the minimum storage deposit
- Output 1: remainder back to the sender, only if anything is left over

sum(inputs) == sum(outputs) always holds; there are no fees on this ledger,
so any surplus has to appear in the remainder output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from loguru import logger

from notarizer.errors import (
    InsufficientFundsError,
    SerializationError,
    SigningError,
    TransactionBuildError,
)
from notarizer.ledger.models import (
    MAX_INPUTS_COUNT,
    MAX_METADATA_LENGTH,
    AddressUnlockCondition,
    BasicOutput,
    Ed25519Address,
    Ed25519Signature,
    EligibleOutput,
    MetadataFeature,
    ReferenceUnlock,
    SignatureUnlock,
    Transaction,
    TransactionEssence,
    UTXOInput,
)
from notarizer.ledger.params import ProtocolParameters
from notarizer.ledger.rent import min_deposit
from notarizer.ledger.serialization import essence_signing_message, inputs_commitment

if TYPE_CHECKING:
    from loguru import Logger


class AddressSigner(Protocol):
    def sign(self, address: Ed25519Address, message: bytes) -> Ed25519Signature: ...


def build_notarization_output(address: Ed25519Address, hash_value: str) -> BasicOutput:
    """Draft notarization output; the amount is set once the deposit is known."""
    data = hash_value.encode("utf-8")
    if not data:
        raise TransactionBuildError("Notarization hash must not be empty")
    if len(data) > MAX_METADATA_LENGTH:
        raise TransactionBuildError(
            f"Notarization hash is {len(data)} bytes, maximum is {MAX_METADATA_LENGTH}"
        )
    return BasicOutput(
        amount=0,
        unlock_conditions=(AddressUnlockCondition(address),),
        features=(MetadataFeature(data),),
    )


def build_remainder_output(address: Ed25519Address, amount: int) -> BasicOutput:
    return BasicOutput(amount=amount, unlock_conditions=(AddressUnlockCondition(address),))


class TransactionAssembler:
    def __init__(self, log: Logger | None = None):
        self.log = (log or logger).bind(component="assembler")

    def assemble(
        self,
        inputs: list[EligibleOutput],
        address: Ed25519Address,
        signer: AddressSigner,
        params: ProtocolParameters,
        hash_value: str,
    ) -> Transaction:
        """
        Build and sign the notarization transaction.

        Raises:
            InsufficientFundsError: Inputs cannot cover the required deposits
            TransactionBuildError: Too many inputs or an unusable hash
            SigningError: The signer cannot unlock the inputs
        """
        if len(inputs) > MAX_INPUTS_COUNT:
            raise TransactionBuildError(
                f"{len(inputs)} inputs exceed the maximum of {MAX_INPUTS_COUNT}"
            )

        network_id = params.network_id()
        self.log.debug(f"Building transaction with network ID: {network_id}")

        total_deposit = sum(inp.output.amount for inp in inputs)

        try:
            notarization_output = build_notarization_output(address, hash_value)
            deposit = min_deposit(params.rent_structure, notarization_output)
        except SerializationError as e:
            raise TransactionBuildError(f"Failed to price notarization output: {e}") from e
        notarization_output = notarization_output.with_amount(deposit)

        if total_deposit < deposit:
            raise InsufficientFundsError(available=total_deposit, required=deposit)

        outputs = [notarization_output]
        remainder = total_deposit - deposit
        if remainder > 0:
            remainder_output = build_remainder_output(address, remainder)
            remainder_deposit = min_deposit(params.rent_structure, remainder_output)
            if remainder < remainder_deposit:
                raise InsufficientFundsError(
                    available=total_deposit,
                    required=deposit + remainder_deposit,
                    reason="remainder below its storage deposit",
                )
            outputs.append(remainder_output)

        self.log.debug(
            f"Inputs: {len(inputs)} ({total_deposit}), notarization deposit: {deposit}, "
            f"remainder: {remainder}"
        )

        try:
            essence = TransactionEssence(
                network_id=network_id,
                inputs=tuple(UTXOInput.from_output_id(inp.output_id) for inp in inputs),
                inputs_commitment=inputs_commitment([inp.output for inp in inputs]),
                outputs=tuple(outputs),
            )
            message = essence_signing_message(essence)
        except (SerializationError, ValueError) as e:
            raise TransactionBuildError(f"Failed to build transaction essence: {e}") from e

        unlocks = self._unlock_inputs(inputs, address, signer, message)
        transaction = Transaction(essence=essence, unlocks=tuple(unlocks))

        self.log.debug(f"Transaction ID: {transaction.id_hex()}")
        return transaction

    def _unlock_inputs(
        self,
        inputs: list[EligibleOutput],
        address: Ed25519Address,
        signer: AddressSigner,
        message: bytes,
    ) -> list[SignatureUnlock | ReferenceUnlock]:
        """First input of an address gets a signature, later ones reference it."""
        unlocks: list[SignatureUnlock | ReferenceUnlock] = []
        signature_index: dict[Ed25519Address, int] = {}

        for index, inp in enumerate(inputs):
            condition = inp.output.address_unlock_condition()
            unlock_address = condition.address if condition is not None else address
            if not isinstance(unlock_address, Ed25519Address):
                raise SigningError(f"Input {index} is not locked to an Ed25519 address")

            if unlock_address in signature_index:
                unlocks.append(ReferenceUnlock(signature_index[unlock_address]))
                continue

            signature = signer.sign(unlock_address, message)
            signature_index[unlock_address] = index
            unlocks.append(SignatureUnlock(signature))

        return unlocks
