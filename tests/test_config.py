"""
Tests for settings and the command-line interface.
"""

from __future__ import annotations

import os
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from notarizer.cli import app
from notarizer.config import Settings, load_environment
from notarizer.errors import SeedPhraseNotSetError
from notarizer.wallet.hdwallet import load_seed_phrase

runner = CliRunner()


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("HTTP_PORT", "NODE_URL", "MNEMONIC_ENV_VAR", "REQUEST_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.http_port == 9687
        assert settings.node_url == "http://localhost:14265"
        assert settings.mnemonic_env_var == "MNEMONIC"
        assert settings.indexer_available_timeout == 30.0
        assert settings.request_timeout == 5.0
        assert settings.coin_type == 4218

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "8080")
        monkeypatch.setenv("node_url", "http://hornet:14265")

        settings = Settings(_env_file=None)

        assert settings.http_port == 8080
        assert settings.node_url == "http://hornet:14265"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("HTTP_PORT=9000\nACCOUNT_INDEX=3\n")

        settings = Settings(_env_file=env_file)

        assert settings.http_port == 9000
        assert settings.account_index == 3

    def test_invalid_port(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, http_port=70000)

    def test_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, request_timeout=0)


class TestLoadEnvironment:
    def test_seed_phrase_from_env_file(self, tmp_path, mnemonic_words):
        """A MNEMONIC kept in .env reaches the per-request seed phrase lookup."""
        env_file = tmp_path / ".env"
        env_file.write_text(f'MNEMONIC="{" ".join(mnemonic_words)}"\nNODE_URL=http://node.test\n')

        with patch.dict(os.environ):
            os.environ.pop("MNEMONIC", None)
            os.environ.pop("NODE_URL", None)

            load_environment(env_file)

            assert load_seed_phrase("MNEMONIC") == mnemonic_words
            assert Settings(_env_file=None).node_url == "http://node.test"

    def test_environment_wins_over_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("MNEMONIC=from file\n")

        with patch.dict(os.environ, {"MNEMONIC": "from environment"}):
            load_environment(env_file)

            assert os.environ["MNEMONIC"] == "from environment"

    def test_missing_env_file(self, tmp_path):
        with patch.dict(os.environ):
            os.environ.pop("MNEMONIC", None)

            load_environment(tmp_path / "absent.env")

            with pytest.raises(SeedPhraseNotSetError):
                load_seed_phrase("MNEMONIC")


class TestCli:
    @pytest.fixture(autouse=True)
    def setup_logging(self):
        with patch("notarizer.cli.setup_logging") as setup_logging:
            yield setup_logging

    def test_create(self):
        with patch("notarizer.cli.Notarizer") as notarizer_cls:
            notarizer = notarizer_cls.return_value
            notarizer.create = AsyncMock(return_value="0x" + "aa" * 32)
            notarizer.close = AsyncMock()

            result = runner.invoke(app, ["create", "abcd1234"])

        assert result.exit_code == 0
        assert "0x" + "aa" * 32 in result.output
        notarizer.create.assert_awaited_once_with("abcd1234")
        notarizer.close.assert_awaited_once()

    def test_create_failure(self):
        with patch("notarizer.cli.Notarizer") as notarizer_cls:
            notarizer = notarizer_cls.return_value
            notarizer.create = AsyncMock(side_effect=SeedPhraseNotSetError("MNEMONIC"))
            notarizer.close = AsyncMock()

            result = runner.invoke(app, ["create", "abcd1234"])

        assert result.exit_code == 1
        notarizer.close.assert_awaited_once()

    def test_verify_match(self):
        with patch("notarizer.cli.Notarizer") as notarizer_cls:
            notarizer = notarizer_cls.return_value
            notarizer.verify = AsyncMock(return_value=True)
            notarizer.close = AsyncMock()

            result = runner.invoke(app, ["verify", "abcd1234", "0x" + "ab" * 34])

        assert result.exit_code == 0
        assert "match" in result.output

    def test_verify_mismatch_exit_code(self):
        with patch("notarizer.cli.Notarizer") as notarizer_cls:
            notarizer = notarizer_cls.return_value
            notarizer.verify = AsyncMock(return_value=False)
            notarizer.close = AsyncMock()

            result = runner.invoke(app, ["verify", "abcd1234", "0x" + "ab" * 34])

        assert result.exit_code == 2
        assert "no match" in result.output

    def test_address(self):
        with patch("notarizer.cli.Notarizer") as notarizer_cls:
            notarizer = notarizer_cls.return_value
            notarizer.address = AsyncMock(return_value="tst1qexample")
            notarizer.close = AsyncMock()

            result = runner.invoke(app, ["address"])

        assert result.exit_code == 0
        assert result.output.strip() == "tst1qexample"

    def test_reads_seed_phrase_from_env_file(self, tmp_path, monkeypatch, mnemonic_words):
        (tmp_path / ".env").write_text(f'MNEMONIC="{" ".join(mnemonic_words)}"\n')
        monkeypatch.chdir(tmp_path)

        with patch.dict(os.environ), patch("notarizer.cli.Notarizer") as notarizer_cls:
            os.environ.pop("MNEMONIC", None)
            notarizer = notarizer_cls.return_value
            notarizer.address = AsyncMock(
                side_effect=lambda: " ".join(load_seed_phrase("MNEMONIC")[:2])
            )
            notarizer.close = AsyncMock()

            result = runner.invoke(app, ["address"])

        assert result.exit_code == 0
        assert result.output.strip() == " ".join(mnemonic_words[:2])

    def test_log_level_from_environment(self, monkeypatch, setup_logging):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        with patch("notarizer.cli.Notarizer") as notarizer_cls:
            notarizer_cls.return_value.address = AsyncMock(return_value="tst1qexample")
            notarizer_cls.return_value.close = AsyncMock()

            result = runner.invoke(app, ["address"])

        assert result.exit_code == 0
        setup_logging.assert_called_once_with("DEBUG")

    def test_log_level_option_overrides_environment(self, monkeypatch, setup_logging):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        with patch("notarizer.cli.Notarizer") as notarizer_cls:
            notarizer_cls.return_value.address = AsyncMock(return_value="tst1qexample")
            notarizer_cls.return_value.close = AsyncMock()

            result = runner.invoke(app, ["address", "--log-level", "ERROR"])

        assert result.exit_code == 0
        setup_logging.assert_called_once_with("ERROR")
