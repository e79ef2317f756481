"""
Fortress Admin — Request Gate.

Runs in front of every console page and API route. Public paths pass
untouched; everything else needs a valid ``fortress_auth`` cookie.
API callers get a 401 JSON body, browsers get redirected to the login page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from fastapi import Request
from fastapi.datastructures import URL
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from fortress_admin.auth.token import TokenCodec, TokenStatus

logger = logging.getLogger("fortress.auth.gate")

COOKIE_NAME = "fortress_auth"
LOGIN_PATH = "/login"
API_PREFIX = "/api/"

PUBLIC_PREFIXES = ("/api/auth", "/_next", "/static", "/favicon")
PUBLIC_SUFFIXES = (".ico", ".png", ".svg")

UNAUTHORIZED_BODY = {"error": "Unauthorized"}


class RouteClass(str, Enum):
    PUBLIC = "public"
    PROTECTED_PAGE = "protected_page"
    PROTECTED_API = "protected_api"


class GateAction(str, Enum):
    PASS = "pass"
    REDIRECT = "redirect"
    REJECT = "reject"


@dataclass(frozen=True)
class RequestInfo:
    """Framework-neutral view of an inbound request."""
    method: str
    path: str
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: Request) -> "RequestInfo":
        return cls(
            method=request.method,
            path=request.url.path,
            url=str(request.url),
            headers=request.headers,
            cookies=request.cookies,
        )


@dataclass(frozen=True)
class Decision:
    action: GateAction
    location: Optional[str] = None
    status: Optional[int] = None
    body: Optional[dict[str, Any]] = None

    @classmethod
    def passed(cls) -> "Decision":
        return cls(GateAction.PASS)

    @classmethod
    def redirect(cls, location: str) -> "Decision":
        return cls(GateAction.REDIRECT, location=location, status=307)

    @classmethod
    def reject(cls, status: int = 401, body: Optional[dict] = None) -> "Decision":
        return cls(GateAction.REJECT, status=status, body=body or dict(UNAUTHORIZED_BODY))


def classify(path: str) -> RouteClass:
    """Map a request path to its route class. Path only, no method or body."""
    if (
        path == LOGIN_PATH
        or path.startswith(PUBLIC_PREFIXES)
        or path.endswith(PUBLIC_SUFFIXES)
    ):
        return RouteClass.PUBLIC
    if path.startswith(API_PREFIX):
        return RouteClass.PROTECTED_API
    return RouteClass.PROTECTED_PAGE


def login_url(request_url: str) -> str:
    """``/login`` on the same scheme and host as ``request_url``."""
    if not request_url:
        return LOGIN_PATH
    return str(URL(request_url).replace(path=LOGIN_PATH, query="", fragment=""))


class RequestGate:
    """
    Per-request authentication decision.

    ``codec=None`` means no secret is configured: every protected request
    is denied.
    """

    def __init__(self, codec: Optional[TokenCodec]) -> None:
        self.codec = codec

    def check_token(self, token: Optional[str]) -> Optional[TokenStatus]:
        """Verification status, or None when there is nothing to verify."""
        if not token or self.codec is None:
            return None
        return self.codec.verify(token)

    def decide(self, info: RequestInfo) -> Decision:
        route = classify(info.path)
        if route is RouteClass.PUBLIC:
            return Decision.passed()

        status = self.check_token(info.cookies.get(COOKIE_NAME))
        if status is TokenStatus.VALID:
            return Decision.passed()

        # Reason stays server-side; every failure looks the same to the client.
        logger.debug(
            "Denied %s %s (%s)",
            info.method, info.path,
            status.value if status else "no credential",
        )
        if route is RouteClass.PROTECTED_API:
            return Decision.reject()
        return Decision.redirect(login_url(info.url))


def to_response(decision: Decision) -> Optional[Response]:
    """Render a non-pass decision as a Starlette response."""
    if decision.action is GateAction.REDIRECT:
        return RedirectResponse(decision.location, status_code=decision.status)
    if decision.action is GateAction.REJECT:
        return JSONResponse(decision.body, status_code=decision.status)
    return None


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Applies :class:`RequestGate` decisions to every HTTP request."""

    def __init__(self, app: ASGIApp, gate: RequestGate) -> None:
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        decision = self.gate.decide(RequestInfo.from_request(request))
        response = to_response(decision)
        if response is None:
            return await call_next(request)
        return response
