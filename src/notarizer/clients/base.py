"""
Shared HTTP plumbing for the node REST API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

from notarizer.errors import NodeError

if TYPE_CHECKING:
    from loguru import Logger

# Timeout for regular API calls (seconds)
DEFAULT_API_TIMEOUT = 30.0


class RestClient:
    """
    Thin wrapper around an ``httpx.AsyncClient``.

    The underlying client is safe for concurrent use, so one instance may be
    shared by every in-flight request (and by several RestClient subclasses).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_API_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        log: Logger | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.log = (log or logger).bind(component=type(self).__name__)

    async def _api_call(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make an API call and return the decoded JSON body.

        Raises:
            NodeError: On transport errors, non-2xx responses or invalid JSON
        """
        url = f"{self.base_url}/{endpoint}"

        try:
            response = await self.client.request(
                method, url, params=params, content=content, headers=headers
            )
        except httpx.HTTPError as e:
            self.log.error(f"API call failed: {method} {endpoint} - {e}")
            raise NodeError(f"{method} {endpoint} failed: {e}") from e

        if response.is_error:
            detail = response.text[:200]
            self.log.debug(f"API call {method} {endpoint} returned {response.status_code}: {detail}")
            raise NodeError(
                f"{method} {endpoint} returned {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise NodeError(f"{method} {endpoint} returned invalid JSON: {e}") from e

    async def close(self) -> None:
        await self.client.aclose()
