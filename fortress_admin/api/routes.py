"""
Fortress Admin — Console API Routes.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Request

from fortress_admin.config import VERSION
from fortress_admin.upstream.client import FortressAPIError

logger = logging.getLogger("fortress.api")

router = APIRouter(tags=["Console API"])


@router.get("/health")
async def health_check(request: Request):
    """Console health plus reachability of the engine API."""
    engine = "up"
    try:
        await request.app.state.fortress.get("/api/fortress/status")
    except (FortressAPIError, httpx.RequestError, ValueError) as exc:
        logger.warning("Engine health probe failed: %s", exc)
        engine = "down"
    return {"status": "healthy", "version": VERSION, "engine": engine}
