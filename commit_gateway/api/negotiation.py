"""Render a status code and message as JSON or HTML depending on the caller."""

from __future__ import annotations

import html
from collections.abc import Mapping

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from ..schemas import ErrorResponse

PAGE_TITLE = "commit"

_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="robots" content="noindex, nofollow">
    <title>{title}</title>
    <style>
        *, *::before, *::after {{ box-sizing: border-box; }}
        * {{ margin: 0; font-family: Verdana, Geneva, Tahoma, sans-serif; }}
        body {{ line-height: 1.5; padding: 10px; background-color: #ffffff; color: #000000; }}
        p {{ overflow-wrap: break-word; }}
        @media (prefers-color-scheme: dark) {{
            body {{ background-color: #121212; color: #ffffff; }}
        }}
    </style>
</head>
<body>
    <p>{content}</p>
</body>
</html>"""


def wants_json(request: Request) -> bool:
    """JSON for API clients and curl, HTML for browsers."""
    accept = request.headers.get("accept", "")
    user_agent = request.headers.get("user-agent", "")
    return "application/json" in accept or "curl" in user_agent


def render_html(message: str, title: str = PAGE_TITLE) -> str:
    return _HTML_TEMPLATE.format(title=html.escape(title), content=html.escape(message))


def negotiate(
    request: Request, status_code: int, message: str, headers: Mapping[str, str] | None = None
) -> Response:
    if wants_json(request):
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(message=message).model_dump(),
            headers=headers,
        )
    return HTMLResponse(status_code=status_code, content=render_html(message), headers=headers)
