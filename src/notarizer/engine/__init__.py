"""
Notarization transaction engine and verification engine.
"""

from notarizer.engine.assembler import TransactionAssembler
from notarizer.engine.fetcher import UTXOFetcher
from notarizer.engine.filters import filter_outputs
from notarizer.engine.service import Notarizer
from notarizer.engine.submitter import BlockSubmitter
from notarizer.engine.verifier import Verifier

__all__ = [
    "BlockSubmitter",
    "Notarizer",
    "TransactionAssembler",
    "UTXOFetcher",
    "Verifier",
    "filter_outputs",
]
