"""
Tests for request classification and gate decisions.
"""

import pytest

from fortress_admin.auth.gate import (
    COOKIE_NAME,
    Decision,
    GateAction,
    RequestGate,
    RequestInfo,
    RouteClass,
    classify,
    login_url,
)
from fortress_admin.auth.token import TokenCodec

SECRET = "gate-secret"
NOW = 1_700_000_000
DAY = 24 * 3600


@pytest.fixture
def codec():
    return TokenCodec(SECRET, max_age_secs=7 * DAY, clock=lambda: NOW)


@pytest.fixture
def gate(codec):
    return RequestGate(codec)


def _info(path: str, token: str | None = None) -> RequestInfo:
    cookies = {COOKIE_NAME: token} if token is not None else {}
    return RequestInfo(
        method="GET",
        path=path,
        url=f"https://console.example.com:8443{path}?tab=1",
        cookies=cookies,
    )


@pytest.mark.parametrize(
    "path",
    [
        "/login",
        "/api/auth",
        "/api/auth/session",
        "/_next/chunk.js",
        "/_next/static/app.css",
        "/static/logo.css",
        "/favicon.ico",
        "/images/logo.png",
        "/icons/shield.svg",
    ],
)
def test_public_paths(path):
    assert classify(path) is RouteClass.PUBLIC


@pytest.mark.parametrize("path", ["/api/blocklist", "/api/fortress/status", "/api/health"])
def test_protected_api_paths(path):
    assert classify(path) is RouteClass.PROTECTED_API


@pytest.mark.parametrize("path", ["/", "/dashboard", "/login/extra", "/settings/l4", "/api"])
def test_protected_page_paths(path):
    assert classify(path) is RouteClass.PROTECTED_PAGE


def test_public_path_passes_without_cookie(gate):
    assert gate.decide(_info("/favicon.ico")).action is GateAction.PASS


def test_public_path_ignores_bad_cookie(gate):
    assert gate.decide(_info("/login", token="garbage")).action is GateAction.PASS


def test_api_without_cookie_rejected(gate):
    decision = gate.decide(_info("/api/blocklist"))
    assert decision.action is GateAction.REJECT
    assert decision.status == 401
    assert decision.body == {"error": "Unauthorized"}


def test_page_without_cookie_redirects_same_origin(gate):
    decision = gate.decide(_info("/dashboard"))
    assert decision.action is GateAction.REDIRECT
    assert decision.location == "https://console.example.com:8443/login"


def test_valid_token_passes(gate, codec):
    assert gate.decide(_info("/dashboard", codec.issue())).action is GateAction.PASS
    assert gate.decide(_info("/api/blocklist", codec.issue())).action is GateAction.PASS


def test_eight_day_old_token_redirects(gate, codec):
    stale = codec.issue(issued_at=NOW - 8 * DAY)
    decision = gate.decide(_info("/dashboard", stale))
    assert decision.action is GateAction.REDIRECT


@pytest.mark.parametrize("token", ["", "1.2.3", f"{NOW}.{'a' * 64}", "abc.def"])
def test_all_failures_look_identical(gate, token):
    assert gate.decide(_info("/api/rules", token)) == Decision.reject()
    assert gate.decide(_info("/rules", token)) == gate.decide(_info("/rules"))


def test_missing_secret_fails_closed(codec):
    gate = RequestGate(None)
    token = codec.issue()
    assert gate.decide(_info("/api/blocklist", token)).action is GateAction.REJECT
    assert gate.decide(_info("/dashboard", token)).action is GateAction.REDIRECT
    assert gate.decide(_info("/login")).action is GateAction.PASS


def test_login_url_without_request_url():
    assert login_url("") == "/login"


def test_login_url_drops_query():
    assert login_url("http://localhost:3000/rules?x=1#top") == "http://localhost:3000/login"
