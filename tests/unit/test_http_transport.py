"""Tests for OriginGuardMiddleware.

The middleware is exercised through httpx's ASGI transport so no server is
started. The inner app is a trivial 200-OK responder that never runs if the
middleware short-circuits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from npmdocs import __version__
from npmdocs.transport import HEALTH_PATH, OriginGuardMiddleware

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send


async def _ok_app(scope: Scope, receive: Receive, send: Send) -> None:
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": b"ok"})


def _client(app: ASGIApp) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://localhost",
    )


async def test_request_without_origin_passes() -> None:
    app = OriginGuardMiddleware(_ok_app)
    async with _client(app) as client:
        response = await client.post("/mcp")
    assert response.status_code == 200
    assert response.text == "ok"


async def test_localhost_origins_pass() -> None:
    app = OriginGuardMiddleware(_ok_app)
    async with _client(app) as client:
        for origin in ("http://localhost:3000", "https://127.0.0.1", "http://[::1]:8080"):
            response = await client.post("/mcp", headers={"Origin": origin})
            assert response.status_code == 200, origin


async def test_foreign_origin_rejected() -> None:
    app = OriginGuardMiddleware(_ok_app)
    async with _client(app) as client:
        response = await client.post("/mcp", headers={"Origin": "https://evil.example"})
    assert response.status_code == 403


async def test_lookalike_localhost_origin_rejected() -> None:
    app = OriginGuardMiddleware(_ok_app)
    async with _client(app) as client:
        response = await client.post("/mcp", headers={"Origin": "http://localhost.evil.example"})
    assert response.status_code == 403


async def test_configured_origin_allowed() -> None:
    app = OriginGuardMiddleware(_ok_app, allowed_origins=frozenset({"https://tools.example"}))
    async with _client(app) as client:
        response = await client.post("/mcp", headers={"Origin": "https://tools.example/"})
    assert response.status_code == 200


async def test_health_endpoint() -> None:
    app = OriginGuardMiddleware(_ok_app)
    async with _client(app) as client:
        response = await client.get(HEALTH_PATH)
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}
