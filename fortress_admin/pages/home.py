"""
Fortress Admin — Console Home.

Landing page after sign-in. Shows whether the engine API answers and
offers sign-out; the dashboards themselves are served elsewhere.
"""

from __future__ import annotations

import html
import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from fortress_admin.config import VERSION
from fortress_admin.upstream.client import FortressAPIError

logger = logging.getLogger("fortress.pages")

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home_page(request: Request) -> HTMLResponse:
    try:
        status = await request.app.state.fortress.get("/api/fortress/status")
        engine = "online"
        level = status.get("level", "unknown") if isinstance(status, dict) else "unknown"
    except (FortressAPIError, httpx.RequestError, ValueError) as exc:
        logger.warning("Engine status unavailable: %s", exc)
        engine, level = "offline", "unknown"
    return HTMLResponse(render_home_page(engine, str(level)))


def render_home_page(engine: str, level: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Fortress Console</title>
    <style>
        body {{
            background: #0a0e17; color: #c9d1d9; margin: 0; padding: 40px;
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
        }}
        dt {{ color: #8b949e; font-size: 0.8rem; text-transform: uppercase; }}
        dd {{ margin: 4px 0 16px; font-size: 1.1rem; }}
        button {{
            background: #1f2937; color: #e5e7eb; border: 1px solid #374151;
            border-radius: 6px; padding: 8px 14px; cursor: pointer;
        }}
    </style>
</head>
<body>
    <h1>FORTRESS CONSOLE</h1>
    <dl>
        <dt>Engine</dt><dd id="engine">{html.escape(engine)}</dd>
        <dt>Protection level</dt><dd id="level">{html.escape(level)}</dd>
        <dt>Console version</dt><dd>{VERSION}</dd>
    </dl>
    <button id="logout">Sign out</button>
    <script>
        document.getElementById("logout").addEventListener("click", async () => {{
            await fetch("/api/auth", {{ method: "DELETE" }});
            window.location.href = "/login";
        }});
    </script>
</body>
</html>"""
