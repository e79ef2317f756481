"""
Fortress Admin — Session Issuance API.

POST   /api/auth  → check password, set the ``fortress_auth`` cookie
DELETE /api/auth  → clear the cookie
GET    /api/auth  → report whether the current cookie is valid
"""

from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from fortress_admin.auth.gate import COOKIE_NAME

logger = logging.getLogger("fortress.api.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_client_ip(request: Request) -> str:
    """Client IP from X-Forwarded-For, then X-Real-IP, then the socket."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "127.0.0.1"


@router.post("")
async def login(request: Request):
    """Exchange the admin password for a session cookie."""
    state = request.app.state
    cfg = state.settings
    client_ip = get_client_ip(request)

    limit = await state.login_limiter.hit(client_ip)
    if not limit.allowed:
        logger.warning("Login rate limit hit for %s", client_ip)
        return JSONResponse(
            {"error": "Too many failed login attempts. Please wait."},
            status_code=429,
            headers={"Retry-After": str(limit.retry_after)},
        )

    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"error": "Invalid request"}, status_code=400)
    if not isinstance(body, dict):
        return JSONResponse({"error": "Invalid request"}, status_code=400)

    if state.codec is None or not cfg.admin_password:
        logger.error("Login attempted but auth secret or admin password is unset")
        return JSONResponse(
            {"error": "Authentication is not configured"}, status_code=503,
        )

    password = body.get("password")
    if not isinstance(password, str) or not hmac.compare_digest(
        password.encode("utf-8"), cfg.admin_password.encode("utf-8"),
    ):
        logger.info("Failed login from %s", client_ip)
        return JSONResponse({"error": "Invalid password"}, status_code=401)

    await state.login_limiter.reset(client_ip)
    logger.info("Successful login from %s", client_ip)

    response = JSONResponse({"success": True})
    response.set_cookie(
        COOKIE_NAME,
        state.codec.issue(),
        max_age=state.codec.max_age_secs,
        path="/",
        httponly=True,
        secure=cfg.cookie_secure,
        samesite="lax",
    )
    return response


@router.delete("")
async def logout():
    response = JSONResponse({"success": True})
    response.delete_cookie(COOKIE_NAME, path="/")
    return response


@router.get("")
async def session_status(request: Request):
    codec = request.app.state.codec
    token = request.cookies.get(COOKIE_NAME)
    if codec is not None and codec.is_valid(token):
        return {"authenticated": True}
    return JSONResponse({"authenticated": False}, status_code=401)
