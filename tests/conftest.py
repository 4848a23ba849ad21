"""
Test fixtures and configuration.
"""

from __future__ import annotations

import os

import pytest

from notarizer.ledger.models import AddressUnlockCondition, BasicOutput, Ed25519Address
from notarizer.ledger.params import ProtocolParameters, RentStructure
from notarizer.wallet.hdwallet import WalletIdentity, derive_wallet


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom pytest options for e2e tests."""
    parser.addoption(
        "--node-url",
        action="store",
        default=os.environ.get("NODE_URL", "http://127.0.0.1:14265"),
        help="Ledger node API URL",
    )


TEST_MNEMONIC = (
    "pass improve fitness dress range orphan mass story tree meat evidence ostrich "
    "render shock ancient minute hip feature split rigid way figure wasp property"
)


@pytest.fixture
def mnemonic_words() -> list[str]:
    """Test mnemonic (not for production use!)."""
    return TEST_MNEMONIC.split()


@pytest.fixture
def protocol_params() -> ProtocolParameters:
    return ProtocolParameters(
        version=2,
        network_name="private_tangle1",
        bech32_hrp="tst",
        min_pow_score=0,
        below_max_depth=15,
        rent_structure=RentStructure(v_byte_cost=500, v_byte_factor_data=1, v_byte_factor_key=10),
        token_supply=2779530283277761,
    )


@pytest.fixture
def protocol_info_json() -> dict:
    """The ``protocol`` object of the node info response."""
    return {
        "version": 2,
        "networkName": "private_tangle1",
        "bech32Hrp": "tst",
        "minPowScore": 0,
        "belowMaxDepth": 15,
        "rentStructure": {"vByteCost": 500, "vByteFactorData": 1, "vByteFactorKey": 10},
        "tokenSupply": "2779530283277761",
    }


@pytest.fixture
def wallet(mnemonic_words: list[str]) -> WalletIdentity:
    return derive_wallet(mnemonic_words, "", 0, hrp="tst")


@pytest.fixture
def other_address() -> Ed25519Address:
    return Ed25519Address(bytes(32))


def basic_output(amount: int, address: Ed25519Address, features: tuple = ()) -> BasicOutput:
    return BasicOutput(
        amount=amount,
        unlock_conditions=(AddressUnlockCondition(address),),
        features=features,
    )


def output_id(seed: int, index: int = 0) -> bytes:
    return bytes([seed]) * 32 + index.to_bytes(2, "little")


@pytest.fixture
def make_output():
    """Factory for basic outputs locked to an address."""
    return basic_output


@pytest.fixture
def make_output_id():
    """Factory for output IDs with a repeated transaction ID byte."""
    return output_id
