"""
REST clients for the ledger node and its indexer plugin.
"""

from notarizer.clients.base import RestClient
from notarizer.clients.indexer import IndexerClient, IndexerPage
from notarizer.clients.node import NodeClient

__all__ = [
    "IndexerClient",
    "IndexerPage",
    "NodeClient",
    "RestClient",
]
