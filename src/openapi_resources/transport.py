"""HTTP transport used by the provider client."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

import httpx


logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def invoke(
        self, method: str, url: str, headers: Mapping[str, str], body: Optional[Any]
    ) -> httpx.Response: ...


class HttpxTransport:
    """Sends each request on its own ``httpx.AsyncClient``.

    HTTP error statuses are returned as responses; only transport level
    failures (``httpx.HTTPError``) are raised.
    """

    def __init__(
        self,
        timeout_seconds: float = 30,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.verify_ssl = verify_ssl
        self.transport = transport

    async def invoke(
        self, method: str, url: str, headers: Mapping[str, str], body: Optional[Any]
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, verify=self.verify_ssl, transport=self.transport
        ) as client:
            response = await client.request(method, url, headers=headers, json=body)
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response
