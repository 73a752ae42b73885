"""Integration test fixtures.

Provides a fully wired AppState with an in-memory SQLite cache and a real
httpx client (requests are intercepted with respx in the tests).
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import aiosqlite
import pytest

from npmdocs.cache import Cache
from npmdocs.config import Settings
from npmdocs.registry import RegistryClient, build_http_client
from npmdocs.service import DocService
from npmdocs.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Forces stdio transport, points the cache at an isolated tmp database and
    the registry at an unroutable address so nothing leaves the machine.
    """
    env = os.environ.copy()
    env["NPMDOCS__SERVER__TRANSPORT"] = "stdio"
    env["NPMDOCS__CACHE__DB_PATH"] = str(tmp_path / "cache.db")
    env["NPMDOCS__REGISTRY__BASE_URL"] = "http://127.0.0.1:1/v2"
    env["NPMDOCS__REGISTRY__TIMEOUT_SECONDS"] = "2"
    return env


@pytest.fixture()
async def app_state() -> AsyncGenerator[AppState, None]:
    """Full AppState wired the way the server lifespan does it."""
    settings = Settings()
    async with aiosqlite.connect(":memory:") as db:
        cache = Cache(db)
        await cache.init_db()

        async with build_http_client(settings.registry) as client:
            registry_client = RegistryClient.from_settings(client, settings.registry)
            service = DocService(settings, cache, registry_client)
            yield AppState(settings=settings, service=service, http_client=client)
