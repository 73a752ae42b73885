"""Streamable HTTP transport for the MCP server."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.datastructures import Headers
from starlette.responses import JSONResponse, PlainTextResponse

from npmdocs import __version__

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP
    from starlette.types import ASGIApp, Receive, Scope, Send

    from npmdocs.config import Settings

log = structlog.get_logger()

HEALTH_PATH = "/healthz"
_LOCAL_ORIGIN = re.compile(r"^https?://(localhost|127\.0\.0\.1|\[::1\])(:\d+)?$")


class OriginGuardMiddleware:
    """Pure ASGI wrapper around the MCP HTTP app.

    Requests carrying a browser ``Origin`` header are only let through when
    the origin is local or explicitly allowed (DNS rebinding protection).
    Requests without an Origin (CLI clients, agents) are unaffected.
    ``GET /healthz`` is answered here without touching the MCP app.
    """

    def __init__(self, app: ASGIApp, *, allowed_origins: frozenset[str] = frozenset()) -> None:
        self.app = app
        self.allowed_origins = allowed_origins

    def is_origin_allowed(self, origin: str) -> bool:
        return bool(_LOCAL_ORIGIN.match(origin)) or origin.rstrip("/") in self.allowed_origins

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            headers = Headers(scope=scope)
            origin = headers.get("origin", "")
            if origin and not self.is_origin_allowed(origin):
                log.warning("http_origin_rejected", origin=origin, path=scope["path"])
                await PlainTextResponse("Forbidden", status_code=403)(scope, receive, send)
                return

            if scope["path"] == HEALTH_PATH and scope["method"] == "GET":
                response = JSONResponse({"status": "ok", "version": __version__})
                await response(scope, receive, send)
                return

        await self.app(scope, receive, send)


def run_http_server(mcp: FastMCP, settings: Settings) -> None:
    """Serve the MCP server over Streamable HTTP until interrupted."""
    allowed = frozenset(o.rstrip("/") for o in settings.server.allowed_origins)
    log.info(
        "http_server_starting",
        host=settings.server.host,
        port=settings.server.port,
        extra_origins=sorted(allowed),
    )
    app = OriginGuardMiddleware(mcp.streamable_http_app(), allowed_origins=allowed)
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # structlog owns logging
    )
