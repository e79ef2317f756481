"""
Fortress Admin — Login Page.

Serves the password form. The form posts to ``/api/auth`` and, once the
session cookie is set, navigates to the dashboard root.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from fortress_admin.auth.gate import LOGIN_PATH

router = APIRouter(tags=["Pages"])


@router.get(LOGIN_PATH, response_class=HTMLResponse, include_in_schema=False)
async def login_page() -> HTMLResponse:
    return HTMLResponse(render_login_page())


def render_login_page(title: str = "Fortress") -> str:
    """Render the login form HTML."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Sign in | {title}</title>
    <style>
        body {{
            background: #0a0e17; color: #c9d1d9;
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
            display: flex; align-items: center; justify-content: center;
            height: 100vh; margin: 0;
        }}
        form {{
            background: #111827; border: 1px solid #1f2937; border-radius: 8px;
            padding: 32px; width: 320px;
        }}
        h1 {{ font-size: 1.25rem; margin: 0 0 20px; letter-spacing: 0.08em; }}
        input, button {{
            width: 100%; box-sizing: border-box; padding: 10px;
            border-radius: 6px; font-size: 0.95rem;
        }}
        input {{ background: #0a0e17; border: 1px solid #374151; color: #e5e7eb; }}
        button {{
            margin-top: 12px; background: #10b981; border: 0; color: #04130d;
            font-weight: 600; cursor: pointer;
        }}
        button:disabled {{ opacity: 0.6; cursor: default; }}
        #error {{ color: #f87171; min-height: 1.2em; margin-top: 10px; font-size: 0.85rem; }}
    </style>
</head>
<body>
    <form id="login">
        <h1>{title.upper()} CONSOLE</h1>
        <input id="password" type="password" placeholder="Password"
               autocomplete="current-password" autofocus required>
        <button id="submit" type="submit">Sign in</button>
        <div id="error"></div>
    </form>
    <script>
        document.getElementById("login").addEventListener("submit", async (ev) => {{
            ev.preventDefault();
            const button = document.getElementById("submit");
            const error = document.getElementById("error");
            button.disabled = true;
            error.textContent = "";
            try {{
                const res = await fetch("/api/auth", {{
                    method: "POST",
                    headers: {{ "Content-Type": "application/json" }},
                    body: JSON.stringify({{
                        password: document.getElementById("password").value
                    }}),
                }});
                if (res.ok) {{
                    window.location.href = "/";
                    return;
                }}
                const data = await res.json().catch(() => ({{}}));
                error.textContent = data.error || "Login failed";
            }} catch (e) {{
                error.textContent = "Connection error";
            }} finally {{
                button.disabled = false;
            }}
        }});
    </script>
</body>
</html>"""
