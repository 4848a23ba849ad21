"""
Wallet: seed phrase loading, HD key derivation and address encoding.
"""

from notarizer.wallet.address import address_to_bech32, bech32_to_address
from notarizer.wallet.hdwallet import (
    Ed25519Signer,
    HDKey,
    WalletIdentity,
    derive_wallet,
    load_seed_phrase,
    mnemonic_to_seed,
)

__all__ = [
    "Ed25519Signer",
    "HDKey",
    "WalletIdentity",
    "address_to_bech32",
    "bech32_to_address",
    "derive_wallet",
    "load_seed_phrase",
    "mnemonic_to_seed",
]
