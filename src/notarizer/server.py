"""
HTTP API for creating and verifying notarizations.

Routes:
- GET  /health          liveness
- POST /create/{hash}   notarize hash, returns {"blockId": "0x..."}
- POST /verify          body {"hash": ..., "outputID": ...}, returns {"match": bool}

Every internal error becomes a 500 with a generic message; the detail is
only logged. A verification against a missing output is {"match": false}.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

from aiohttp import web
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from notarizer.config import Settings
from notarizer.engine.service import Notarizer
from notarizer.errors import NotarizerError

if TYPE_CHECKING:
    from loguru import Logger

PARAMETER_HASH = "hash"

ROUTE_HEALTH = "/health"
ROUTE_CREATE_NOTARIZATION = "/create/{" + PARAMETER_HASH + "}"
ROUTE_VERIFY_NOTARIZATION = "/verify"


class VerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hash: str
    output_id: str = Field(..., alias="outputID")


def error_response(message: str, status: int = 500) -> web.Response:
    return web.json_response({"error": message}, status=status)


class NotarizerServer:
    def __init__(
        self, settings: Settings, notarizer: Notarizer, log: Logger | None = None
    ) -> None:
        self.settings = settings
        self.notarizer = notarizer
        self.log = (log or logger).bind(component="server")
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self.site: web.TCPSite | None = None
        self._stopping = False
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.app.router.add_get(ROUTE_HEALTH, self._handle_health)
        self.app.router.add_post(ROUTE_CREATE_NOTARIZATION, self._handle_create)
        self.app.router.add_post(ROUTE_VERIFY_NOTARIZATION, self._handle_verify)

    async def _handle_health(self, _request: web.Request) -> web.Response:
        self.log.debug("Health endpoint called")
        return web.Response(status=200)

    async def _handle_create(self, request: web.Request) -> web.Response:
        hash_value = request.match_info[PARAMETER_HASH]

        try:
            block_id = await self.notarizer.create(hash_value)
        except NotarizerError as e:
            self.log.error(f"Error creating notarization for {hash_value!r}: {e}")
            return error_response("Error creating notarization")

        return web.json_response({"blockId": block_id})

    async def _handle_verify(self, request: web.Request) -> web.Response:
        try:
            body = VerifyRequest.model_validate(await request.json())
        except (ValueError, ValidationError) as e:
            # Covers invalid UTF-8 as well as invalid JSON
            self.log.error(f"Error decoding request body: {e}")
            return error_response("Error decoding request body")

        try:
            match = await self.notarizer.verify(body.hash, body.output_id)
        except NotarizerError as e:
            self.log.error(f"Error verifying notarization in {body.output_id}: {e}")
            return error_response("Error verifying notarization")

        return web.json_response({"match": match})

    async def start(self) -> None:
        self.log.info(
            f"Starting API server on {self.settings.http_host}:{self.settings.http_port}"
        )

        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, self.settings.http_host, self.settings.http_port)
        await self.site.start()

        self.log.info(
            f"You can now access the API using: "
            f"http://{self.settings.http_host}:{self.settings.http_port}"
        )

    async def stop(self) -> None:
        if self._stopping:
            return
        self._stopping = True

        self.log.info("Stopping API server...")

        if self.site:
            with contextlib.suppress(RuntimeError):
                await self.site.stop()
            self.site = None

        if self.runner:
            with contextlib.suppress(RuntimeError):
                await self.runner.cleanup()
            self.runner = None

        await self.notarizer.close()
        self.log.info("API server stopped")
