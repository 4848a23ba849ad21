"""
HD wallet for the notarization address.

Implements SLIP-10 Ed25519 derivation (hardened only) from a BIP39 seed on the
path m/44'/{coin_type}'/{account}'/0'/{address}'. Keys and signatures come
from libnacl.
"""

from __future__ import annotations

import hashlib
import hmac
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import libnacl
from loguru import logger

from notarizer.errors import DerivationError, SeedPhraseNotSetError, SigningError
from notarizer.ledger.models import Ed25519Address, Ed25519Signature
from notarizer.wallet.address import address_to_bech32

if TYPE_CHECKING:
    from loguru import Logger

HARDENED_OFFSET = 0x80000000

COIN_TYPE_IOTA = 4218
COIN_TYPE_SHIMMER = 4219

VALID_WORD_COUNTS = (12, 15, 18, 21, 24)


class HDKey:
    """
    SLIP-10 Ed25519 extended private key.
    Only hardened children exist for this curve.
    """

    def __init__(self, key: bytes, chain_code: bytes, depth: int = 0):
        self._key = key
        self.chain_code = chain_code
        self.depth = depth
        self._public_key, self._secret_key = libnacl.crypto_sign_seed_keypair(key)

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @classmethod
    def from_seed(cls, seed: bytes) -> HDKey:
        """Create master key from seed"""
        hmac_result = hmac.new(b"ed25519 seed", seed, hashlib.sha512).digest()
        return cls(hmac_result[:32], hmac_result[32:], depth=0)

    def derive(self, path: str) -> HDKey:
        """
        Derive child key from path notation (e.g. "m/44'/4218'/0'/0'/0'").
        Every segment must be hardened.
        """
        if not path.startswith("m"):
            raise ValueError("Path must start with 'm'")

        key = self
        for part in path.split("/")[1:]:
            if not part:
                continue
            if not (part.endswith("'") or part.endswith("h")):
                raise ValueError(f"Ed25519 derivation requires hardened segments: {part}")
            index = int(part.rstrip("'h")) + HARDENED_OFFSET
            key = key._derive_child(index)

        return key

    def _derive_child(self, index: int) -> HDKey:
        data = b"\x00" + self._key + index.to_bytes(4, "big")
        hmac_result = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        return HDKey(hmac_result[:32], hmac_result[32:], depth=self.depth + 1)

    def address(self) -> Ed25519Address:
        return Ed25519Address.from_public_key(self._public_key)

    def sign(self, message: bytes) -> bytes:
        """Detached Ed25519 signature over message."""
        return libnacl.crypto_sign_detached(message, self._secret_key)


class Ed25519Signer:
    """Signs essence messages for the addresses whose keys it holds."""

    def __init__(self, keys: list[HDKey]):
        self._keys = {key.address(): key for key in keys}

    def addresses(self) -> list[Ed25519Address]:
        return list(self._keys)

    def sign(self, address: Ed25519Address, message: bytes) -> Ed25519Signature:
        key = self._keys.get(address)
        if key is None:
            raise SigningError(f"No key held for address {address.pub_key_hash.hex()}")
        return Ed25519Signature(public_key=key.public_key, signature=key.sign(message))


@dataclass
class WalletIdentity:
    """Spending address of a request, in both encodings, plus its signer."""

    bech32_address: str
    address: Ed25519Address
    signer: Ed25519Signer


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """Convert BIP39 mnemonic to seed."""
    mnemonic_bytes = mnemonic.encode("utf-8")
    salt = ("mnemonic" + passphrase).encode("utf-8")
    return hashlib.pbkdf2_hmac("sha512", mnemonic_bytes, salt, 2048, dklen=64)


def validate_mnemonic(words: list[str]) -> None:
    if len(words) not in VALID_WORD_COUNTS:
        raise DerivationError(
            f"Invalid mnemonic: expected {', '.join(map(str, VALID_WORD_COUNTS))} words, "
            f"got {len(words)}"
        )
    for position, word in enumerate(words, start=1):
        if not word.isalpha() or not word.islower():
            raise DerivationError(f"Invalid mnemonic: malformed word at position {position}")


def derivation_path(coin_type: int, account_index: int, address_index: int) -> str:
    return f"m/44'/{coin_type}'/{account_index}'/0'/{address_index}'"


def load_seed_phrase(variable_name: str, environ: Mapping[str, str] | None = None) -> list[str]:
    """
    Load the seed phrase words from an environment variable.

    Raises:
        SeedPhraseNotSetError: If the variable is missing or empty
    """
    env = os.environ if environ is None else environ
    value = env.get(variable_name, "")
    if not value.strip():
        raise SeedPhraseNotSetError(variable_name)
    return value.split()


def derive_wallet(
    seed_phrase: list[str],
    passphrase: str,
    account_index: int,
    *,
    hrp: str,
    coin_type: int = COIN_TYPE_IOTA,
    address_index: int = 0,
    log: Logger | None = None,
) -> WalletIdentity:
    """
    Derive the spending address and signer for an account.

    Raises:
        DerivationError: If the seed phrase is malformed or derivation fails
    """
    validate_mnemonic(seed_phrase)

    try:
        seed = mnemonic_to_seed(" ".join(seed_phrase), passphrase)
        master_key = HDKey.from_seed(seed)
        key = master_key.derive(derivation_path(coin_type, account_index, address_index))
    except ValueError as e:
        raise DerivationError(f"Deriving ed25519 address and signer failed: {e}") from e

    address = key.address()
    bech32_address = address_to_bech32(address, hrp)
    log = (log or logger).bind(component="wallet")
    log.debug(f"Derived address {bech32_address} (account {account_index})")

    return WalletIdentity(
        bech32_address=bech32_address,
        address=address,
        signer=Ed25519Signer([key]),
    )
