"""
Main entry point for the notarizer API server.
"""

import asyncio
import signal
import sys

from loguru import logger

from notarizer.config import Settings, get_settings, load_environment
from notarizer.engine.service import Notarizer
from notarizer.server import NotarizerServer


def setup_logging(level: str) -> None:
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level.upper(),
        colorize=True,
    )


async def run_server(settings: Settings) -> None:
    logger.info("Starting Notarizer")
    logger.info(f"Node: {settings.node_url}")
    logger.info(f"HTTP server: {settings.http_host}:{settings.http_port}")

    notarizer = Notarizer(settings)
    server = NotarizerServer(settings, notarizer)
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()

    def shutdown_handler() -> None:
        logger.info("Received shutdown signal")
        stop_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, shutdown_handler)

    try:
        await server.start()
        await stop_event.wait()
    except asyncio.CancelledError:
        logger.info("Server cancelled")
    finally:
        await server.stop()


def main() -> None:
    load_environment()
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        asyncio.run(run_server(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
