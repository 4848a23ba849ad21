"""
E2E test configuration and fixtures.

These tests need a running ledger node with the indexer plugin and a funded
seed phrase in the MNEMONIC environment variable. They are excluded by
default; run them with ``pytest -m docker``.
"""

from __future__ import annotations

import os
import socket
from collections.abc import AsyncGenerator
from urllib.parse import urlparse

import pytest
import pytest_asyncio

from notarizer.config import Settings
from notarizer.engine.service import Notarizer


def is_reachable(url: str) -> bool:
    parsed = urlparse(url)
    try:
        with socket.create_connection((parsed.hostname, parsed.port or 80), timeout=2):
            return True
    except OSError:
        return False


@pytest.fixture(scope="session")
def node_url(request: pytest.FixtureRequest) -> str:
    url = request.config.getoption("--node-url")
    if not is_reachable(url):
        pytest.skip(f"Ledger node not reachable at {url}")
    if not os.environ.get("MNEMONIC"):
        pytest.skip("MNEMONIC not set")
    return url


@pytest_asyncio.fixture
async def notarizer(node_url: str) -> AsyncGenerator[Notarizer, None]:
    service = Notarizer(Settings(node_url=node_url))
    yield service
    await service.close()
