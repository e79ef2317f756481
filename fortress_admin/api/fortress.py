"""
Fortress Admin — Engine API Proxy.

Forwards ``/api/fortress/*`` from the browser to the Fortress engine's
admin API, attaching the engine API key server-side so it never reaches
the client. Sits behind the request gate like every other API route.
"""

from __future__ import annotations

import logging
import time

import httpx
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from fortress_admin.upstream.client import API_KEY_HEADER

logger = logging.getLogger("fortress.api.proxy")

router = APIRouter(tags=["Engine Proxy"])


@router.api_route(
    "/fortress/{path:path}",
    methods=["GET", "POST", "PUT", "DELETE"],
    include_in_schema=False,
)
async def proxy_engine(request: Request, path: str = "") -> Response:
    """Relay one request to the engine and its response back verbatim."""
    state = request.app.state
    client: httpx.AsyncClient = state.engine_http
    upstream_path = "/api/fortress/" + path

    headers = {
        API_KEY_HEADER: state.settings.api_key,
        "Content-Type": "application/json",
    }
    body = b""
    if request.method not in ("GET", "HEAD"):
        body = await request.body()

    start = time.monotonic()
    try:
        upstream_resp = await client.request(
            method=request.method,
            url=upstream_path,
            headers=headers,
            content=body or None,
            params=dict(request.query_params),
        )
    except httpx.RequestError as exc:
        logger.error("Engine API unavailable: %s", exc)
        return JSONResponse(
            {"error": "Fortress API unavailable", "detail": str(exc)},
            status_code=502,
        )

    logger.debug(
        "%s %s → %d (%.1fms)",
        request.method, upstream_path, upstream_resp.status_code,
        (time.monotonic() - start) * 1000,
    )
    return Response(
        content=upstream_resp.content,
        status_code=upstream_resp.status_code,
        media_type=upstream_resp.headers.get("content-type", "application/json"),
    )
