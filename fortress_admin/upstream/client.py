"""
Fortress Admin — Engine API Client.

Thin JSON helpers for the Fortress engine admin API. Every helper raises
:class:`FortressAPIError` on a non-2xx response; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger("fortress.upstream")

API_KEY_HEADER = "X-Fortress-Key"


class FortressAPIError(Exception):
    """Non-2xx response from the engine API."""

    def __init__(self, status_code: int, reason: str, path: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self.path = path
        super().__init__(f"Fortress API error: {status_code} {reason}")


class FortressClient:
    """Async JSON client for ``/api/fortress/*`` endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={
                API_KEY_HEADER: api_key,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        resp = await self._client.request(
            method,
            path,
            json=body,
            params=params,
        )
        if not resp.is_success:
            logger.debug("%s %s → %d", method, path, resp.status_code)
            raise FortressAPIError(resp.status_code, resp.reason_phrase, path)
        if not resp.content:
            return None
        return resp.json()

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("PUT", path, body=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def close(self) -> None:
        await self._client.aclose()
