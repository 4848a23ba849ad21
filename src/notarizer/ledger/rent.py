"""
Storage deposit (rent) calculation.

Every output must hold at least ``vByteCost * vbytes`` tokens, where the
virtual byte size weighs the serialized output as data bytes and adds a fixed
offset for the ledger bookkeeping stored with it: the output ID is indexed
(key bytes), the including block ID, milestone index and milestone timestamp
are plain data.
"""

from __future__ import annotations

from notarizer.ledger.models import BLOCK_ID_LENGTH, OUTPUT_ID_LENGTH
from notarizer.ledger.params import RentStructure
from notarizer.ledger.serialization import serialize_output

# Block ID + milestone index (uint32) + milestone timestamp (uint32)
OUTPUT_OFFSET_DATA_BYTES = BLOCK_ID_LENGTH + 4 + 4
OUTPUT_OFFSET_KEY_BYTES = OUTPUT_ID_LENGTH


def output_offset_vbytes(rent: RentStructure) -> int:
    return (
        rent.v_byte_factor_key * OUTPUT_OFFSET_KEY_BYTES
        + rent.v_byte_factor_data * OUTPUT_OFFSET_DATA_BYTES
    )


def output_vbytes(rent: RentStructure, output) -> int:
    return output_offset_vbytes(rent) + rent.v_byte_factor_data * len(serialize_output(output))


def min_deposit(rent: RentStructure, output) -> int:
    """
    Minimum token deposit an output must carry to be valid on the ledger.

    The output's own amount does not influence the result (it is a fixed
    eight-byte field), so a draft output with amount 0 can be priced before
    its amount is set.
    """
    return rent.v_byte_cost * output_vbytes(rent, output)
