"""
Command-line interface for the notarizer.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from loguru import logger

from notarizer.config import Settings, load_environment
from notarizer.engine.service import Notarizer
from notarizer.errors import NotarizerError
from notarizer.main import run_server, setup_logging

app = typer.Typer(
    name="notarizer",
    help="Notarizer - Anchor hashes in the ledger and verify them",
    add_completion=False,
)


def build_settings(node_url: str | None, log_level: str | None) -> Settings:
    load_environment()

    overrides: dict[str, str] = {}
    if log_level:
        overrides["log_level"] = log_level
    if node_url:
        overrides["node_url"] = node_url
    settings = Settings(**overrides)
    setup_logging(settings.log_level)
    return settings


async def _with_notarizer(settings: Settings, action):
    notarizer = Notarizer(settings)
    try:
        return await action(notarizer)
    finally:
        await notarizer.close()


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="HTTP bind host")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="HTTP bind port")] = None,
    node_url: Annotated[str | None, typer.Option("--node-url", help="Node API URL")] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", "-l", help="Log level")
    ] = None,
) -> None:
    """Run the HTTP API server."""
    settings = build_settings(node_url, log_level)
    if host:
        settings.http_host = host
    if port:
        settings.http_port = port

    try:
        asyncio.run(run_server(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")


@app.command()
def address(
    node_url: Annotated[str | None, typer.Option("--node-url", help="Node API URL")] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", "-l", help="Log level")
    ] = None,
) -> None:
    """Print the notarization wallet address."""
    settings = build_settings(node_url, log_level)

    try:
        bech32_address = asyncio.run(_with_notarizer(settings, lambda n: n.address()))
    except NotarizerError as e:
        logger.error(f"Failed to derive address: {e}")
        raise typer.Exit(1)

    typer.echo(bech32_address)


@app.command()
def create(
    hash_value: Annotated[str, typer.Argument(metavar="HASH", help="Hash to notarize")],
    node_url: Annotated[str | None, typer.Option("--node-url", help="Node API URL")] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", "-l", help="Log level")
    ] = None,
) -> None:
    """Notarize a hash and print the block ID."""
    settings = build_settings(node_url, log_level)

    try:
        block_id = asyncio.run(_with_notarizer(settings, lambda n: n.create(hash_value)))
    except NotarizerError as e:
        logger.error(f"Notarization failed: {e}")
        raise typer.Exit(1)

    typer.echo(block_id)


@app.command()
def verify(
    hash_value: Annotated[str, typer.Argument(metavar="HASH", help="Claimed hash")],
    output_id: Annotated[str, typer.Argument(help="Output ID (0x-prefixed hex)")],
    node_url: Annotated[str | None, typer.Option("--node-url", help="Node API URL")] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", "-l", help="Log level")
    ] = None,
) -> None:
    """Check whether an output carries the claimed hash. Exit code 2 on mismatch."""
    settings = build_settings(node_url, log_level)

    try:
        match = asyncio.run(
            _with_notarizer(settings, lambda n: n.verify(hash_value, output_id))
        )
    except NotarizerError as e:
        logger.error(f"Verification failed: {e}")
        raise typer.Exit(1)

    typer.echo("match" if match else "no match")
    if not match:
        raise typer.Exit(2)


def main() -> None:
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
