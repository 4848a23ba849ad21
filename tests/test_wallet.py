"""
Tests for seed phrase loading, key derivation and address encoding.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import libnacl
import pytest

from notarizer.errors import DerivationError, SeedPhraseNotSetError, SigningError
from notarizer.ledger.models import AliasAddress, Ed25519Address
from notarizer.wallet.address import address_to_bech32, bech32_to_address
from notarizer.wallet.hdwallet import (
    HDKey,
    derivation_path,
    derive_wallet,
    load_seed_phrase,
    mnemonic_to_seed,
)


class TestLoadSeedPhrase:
    def test_missing_variable(self):
        with pytest.raises(SeedPhraseNotSetError) as exc_info:
            load_seed_phrase("MNEMONIC", environ={})
        assert str(exc_info.value) == "environment variable 'MNEMONIC' not set"

    def test_empty_variable(self):
        with pytest.raises(SeedPhraseNotSetError):
            load_seed_phrase("MNEMONIC", environ={"MNEMONIC": "   "})

    def test_custom_variable_name_in_message(self):
        with pytest.raises(SeedPhraseNotSetError, match="'NOTARY_SEED'"):
            load_seed_phrase("NOTARY_SEED", environ={"MNEMONIC": "abandon"})

    def test_splits_on_whitespace(self):
        words = load_seed_phrase("MNEMONIC", environ={"MNEMONIC": " one  two\nthree "})
        assert words == ["one", "two", "three"]

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("NOTARIZER_TEST_SEED", "alpha beta")
        assert load_seed_phrase("NOTARIZER_TEST_SEED") == ["alpha", "beta"]


class TestDerivation:
    def test_known_address(self, mnemonic_words):
        """Address for the test mnemonic on the default path."""
        wallet = derive_wallet(mnemonic_words, "", 0, hrp="tst")
        assert wallet.bech32_address == (
            "tst1qzguhtxyuhgp4aklfkyd5ek3wtnta649pqvccrep95kesjf5kxuzvexrv6n"
        )

    def test_deterministic(self, mnemonic_words):
        first = derive_wallet(mnemonic_words, "", 0, hrp="tst")
        second = derive_wallet(mnemonic_words, "", 0, hrp="tst")
        assert first.address == second.address
        assert first.bech32_address == second.bech32_address

    def test_logs_through_injected_logger(self, mnemonic_words):
        log = MagicMock()
        wallet = derive_wallet(mnemonic_words, "", 0, hrp="tst", log=log)

        log.bind.assert_called_once_with(component="wallet")
        log.bind.return_value.debug.assert_called_once()
        assert wallet.bech32_address in log.bind.return_value.debug.call_args.args[0]

    def test_account_index_changes_address(self, mnemonic_words):
        account0 = derive_wallet(mnemonic_words, "", 0, hrp="tst")
        account1 = derive_wallet(mnemonic_words, "", 1, hrp="tst")
        assert account0.address != account1.address

    def test_passphrase_changes_address(self, mnemonic_words):
        plain = derive_wallet(mnemonic_words, "", 0, hrp="tst")
        protected = derive_wallet(mnemonic_words, "secret", 0, hrp="tst")
        assert plain.address != protected.address

    def test_hrp_only_changes_prefix(self, mnemonic_words):
        tst = derive_wallet(mnemonic_words, "", 0, hrp="tst")
        smr = derive_wallet(mnemonic_words, "", 0, hrp="smr")
        assert tst.address == smr.address
        assert smr.bech32_address.startswith("smr1")

    def test_wrong_word_count(self, mnemonic_words):
        with pytest.raises(DerivationError, match="expected"):
            derive_wallet(mnemonic_words[:11], "", 0, hrp="tst")

    def test_malformed_word(self, mnemonic_words):
        words = list(mnemonic_words)
        words[3] = "dr3ss"
        with pytest.raises(DerivationError, match="position 4"):
            derive_wallet(words, "", 0, hrp="tst")

    def test_derivation_path(self):
        assert derivation_path(4218, 2, 0) == "m/44'/4218'/2'/0'/0'"

    def test_non_hardened_segment_rejected(self):
        master = HDKey.from_seed(mnemonic_to_seed("abandon " * 11 + "about"))
        with pytest.raises(ValueError, match="hardened"):
            master.derive("m/44'/4218'/0'/0/0'")

    def test_derive_depth(self):
        master = HDKey.from_seed(bytes(64))
        child = master.derive("m/44'/4218'/0'")
        assert child.depth == 3
        assert len(child.public_key) == 32


class TestSigner:
    def test_signature_verifies(self, wallet):
        message = b"\x01" * 32
        signature = wallet.signer.sign(wallet.address, message)

        assert Ed25519Address.from_public_key(signature.public_key) == wallet.address
        # Raises ValueError on a bad signature
        libnacl.crypto_sign_verify_detached(signature.signature, message, signature.public_key)

    def test_unknown_address(self, wallet, other_address):
        with pytest.raises(SigningError):
            wallet.signer.sign(other_address, b"\x00" * 32)

    def test_addresses(self, wallet):
        assert wallet.signer.addresses() == [wallet.address]


class TestBech32:
    def test_roundtrip(self, wallet):
        decoded = bech32_to_address(wallet.bech32_address, hrp="tst")
        assert decoded == wallet.address

    def test_alias_address_prefix_char(self):
        encoded = address_to_bech32(AliasAddress(bytes(32)), "tst")
        # Type byte 8 puts "p" as first data character
        assert encoded.startswith("tst1p")
        assert bech32_to_address(encoded) == AliasAddress(bytes(32))

    def test_wrong_hrp(self, wallet):
        with pytest.raises(ValueError, match="does not match"):
            bech32_to_address(wallet.bech32_address, hrp="smr")

    def test_invalid_checksum(self, wallet):
        broken = wallet.bech32_address[:-1] + ("q" if wallet.bech32_address[-1] != "q" else "p")
        with pytest.raises(ValueError):
            bech32_to_address(broken)
