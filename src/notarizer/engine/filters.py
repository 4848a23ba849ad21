"""
Output filter: which unspent outputs a notarization may consume.

Conservative allow-list. An output qualifies only if it is a basic output
locked by a single address unlock condition and carries no metadata feature.
A basic output with metadata is taken to be an earlier notarization record;
spending it would destroy that record. Everything else is skipped silently.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from notarizer.ledger.models import (
    AddressUnlockCondition,
    BasicOutput,
    EligibleOutput,
    UnspentOutput,
    output_id_to_hex,
)

if TYPE_CHECKING:
    from loguru import Logger


def is_eligible(output) -> bool:
    if not isinstance(output, BasicOutput):
        return False
    if len(output.unlock_conditions) != 1:
        return False
    if not isinstance(output.unlock_conditions[0], AddressUnlockCondition):
        return False
    # Native tokens would have to be carried over to the outputs
    if output.native_tokens:
        return False
    return output.metadata_feature() is None


def filter_outputs(
    unspent_outputs: list[UnspentOutput], log: Logger | None = None
) -> list[EligibleOutput]:
    log = (log or logger).bind(component="filter")
    suitable: list[EligibleOutput] = []

    for unspent in unspent_outputs:
        if is_eligible(unspent.output):
            suitable.append(EligibleOutput(output_id=unspent.output_id, output=unspent.output))
        else:
            log.debug(
                f"Skipping output {output_id_to_hex(unspent.output_id)} "
                f"({type(unspent.output).__name__})"
            )

    return suitable
