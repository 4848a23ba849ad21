"""
notarizer - Anchor hashes in a UTXO ledger and verify them

Builds transactions whose output metadata carries a hash, submits them to a
ledger node, and checks existing outputs against claimed hashes.
"""

__version__ = "0.1.0"

from notarizer.engine.service import Notarizer
from notarizer.errors import NotarizerError

__all__ = ["Notarizer", "NotarizerError", "__version__"]
