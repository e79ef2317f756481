"""
Fortress Admin — Application Entry Point.

Starts the FastAPI console: session gate in front of everything, login
page and auth API, and the proxy to the Fortress engine API.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Callable, Optional

import httpx
import uvicorn
from fastapi import FastAPI

from fortress_admin.config import VERSION, Settings, settings
from fortress_admin.api.auth import router as auth_router
from fortress_admin.api.fortress import router as fortress_router
from fortress_admin.api.routes import router as api_router
from fortress_admin.auth.gate import AuthGateMiddleware, RequestGate
from fortress_admin.auth.limiter import LoginAttemptLimiter
from fortress_admin.auth.token import codec_from_settings
from fortress_admin.pages.home import router as home_router
from fortress_admin.pages.login import router as pages_router
from fortress_admin.storage.redis_client import RedisManager
from fortress_admin.upstream.client import FortressClient

logger = logging.getLogger("fortress")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup / shutdown lifecycle."""
    # ── Startup ──────────────────────────────────────────
    cfg: Settings = app.state.settings
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        force=True,
    )
    logger.info("Fortress Admin v%s starting", VERSION)

    if app.state.codec is None:
        logger.warning("Session secret missing: console is locked until FORTRESS_AUTH_SECRET is set")
    if not cfg.admin_password:
        logger.warning("FORTRESS_ADMIN_PASSWORD is not set: login is disabled")

    # Redis is optional; login counters fall back to process memory
    try:
        await app.state.redis.connect()
    except Exception as exc:
        logger.warning(
            "Redis unavailable (%s); login attempt counters are per-process", exc,
        )

    logger.info("Engine API: %s", cfg.api_url)
    logger.info("Console: http://%s:%d", cfg.host, cfg.port)

    yield

    # ── Shutdown ─────────────────────────────────────────
    await app.state.engine_http.aclose()
    await app.state.fortress.close()
    await app.state.redis.disconnect()
    logger.info("Fortress Admin stopped.")


def create_app(
    cfg: Optional[Settings] = None,
    clock: Callable[[], float] = time.time,
    engine_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Factory for the FastAPI application."""
    cfg = cfg or settings
    app = FastAPI(
        title=cfg.app_name,
        version=VERSION,
        description="Fortress DDoS/WAF admin console",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    redis = RedisManager(cfg.redis_url)
    codec = codec_from_settings(cfg, clock=clock)

    app.state.settings = cfg
    app.state.redis = redis
    app.state.codec = codec
    app.state.login_limiter = LoginAttemptLimiter(
        max_attempts=cfg.login_max_attempts,
        window_secs=cfg.login_window_secs,
        redis=redis,
        clock=clock,
    )
    app.state.engine_http = httpx.AsyncClient(
        base_url=cfg.api_url,
        timeout=httpx.Timeout(cfg.api_timeout),
        transport=engine_transport,
    )
    app.state.fortress = FortressClient(
        cfg.api_url,
        api_key=cfg.api_key,
        timeout=cfg.api_timeout,
        transport=engine_transport,
    )

    app.add_middleware(AuthGateMiddleware, gate=RequestGate(codec))

    # ── Routers ──────────────────────────────────────────
    app.include_router(pages_router)
    app.include_router(home_router)
    app.include_router(auth_router, prefix="/api")
    app.include_router(api_router, prefix="/api")
    app.include_router(fortress_router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "fortress_admin.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level,
    )
