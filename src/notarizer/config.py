"""
Configuration management using pydantic-settings.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from notarizer.wallet.hdwallet import COIN_TYPE_IOTA


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    http_host: str = "localhost"
    http_port: int = Field(default=9687, ge=1, le=65535)

    node_url: str = "http://localhost:14265"

    # Name of the environment variable holding the seed phrase, read per request
    mnemonic_env_var: str = "MNEMONIC"
    mnemonic_passphrase: str = ""
    account_index: int = Field(default=0, ge=0)
    address_index: int = Field(default=0, ge=0)
    coin_type: int = Field(default=COIN_TYPE_IOTA, ge=0)

    # Waiting for the indexer plugin to come up can take a while after node start
    indexer_available_timeout: float = Field(default=30.0, gt=0)
    request_timeout: float = Field(default=5.0, gt=0)
    node_timeout: float = Field(default=30.0, gt=0)
    indexer_page_size: int = Field(default=1000, ge=1)

    log_level: str = "INFO"


def load_environment(env_file: str | Path = ".env") -> None:
    """
    Export the variables of env_file into the process environment.

    Variables already set in the environment win.
    """
    load_dotenv(env_file, override=False)


def get_settings() -> Settings:
    return Settings()
