"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan
context manager) and injected into every tool handler via the MCP Context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from npmdocs.config import Settings
    from npmdocs.service import DocService


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    service: DocService
    http_client: httpx.AsyncClient | None = None
