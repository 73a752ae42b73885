"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the correct transport (stdio or HTTP)
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import npmdocs.tools.check_cache as t_check_cache
import npmdocs.tools.clear_cache as t_clear_cache
import npmdocs.tools.get_package_docs as t_get_docs
from npmdocs import __version__
from npmdocs.cache import Cache
from npmdocs.config import Settings
from npmdocs.errors import NpmDocsError
from npmdocs.registry import RegistryClient, build_http_client
from npmdocs.service import DocService
from npmdocs.state import AppState
from npmdocs.transport import run_http_server

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info(
        "server_starting",
        version=__version__,
        transport=settings.server.transport,
        db_path=settings.cache.db_path,
    )

    http_client = build_http_client(settings.registry)
    try:
        # A CACHE_ERROR here aborts startup: the service cannot run uncached.
        cache = await Cache.open(settings.cache.db_path)
    except NpmDocsError:
        log.error("server_startup_failed", reason="cache_unavailable")
        await http_client.aclose()
        raise

    registry_client = RegistryClient.from_settings(http_client, settings.registry)
    service = DocService(settings, cache, registry_client)
    state = AppState(settings=settings, service=service, http_client=http_client)

    log.info("server_started", version=__version__, registry=settings.registry.base_url)

    try:
        yield state
    finally:
        await service.close()
        await http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("npmdocs", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg, so set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: NpmDocsError) -> CallToolResult:
    """Convert an NpmDocsError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _run_tool(tool: str, call: Awaitable[dict]) -> object:
    try:
        return await call
    except NpmDocsError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


@mcp.tool()
async def get_npm_package_docs(
    package_name: str, ctx: Context, force_fresh: bool = False
) -> object:
    """Retrieve documentation and metadata for an npm package.

    Returns version, description, author, license, keywords, links,
    dependencies and the README text when the registry provides it. Results
    are served from a local cache when fresh; set force_fresh to bypass it.
    package_name must be the exact, case-sensitive name (e.g. 'react',
    '@azure/storage-blob').
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool(
        "get_npm_package_docs", t_get_docs.handle(package_name, force_fresh, state)
    )


@mcp.tool()
async def check_npm_docs_cache(package_name: str, ctx: Context) -> object:
    """Report whether fresh documentation for a package is in the local cache."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("check_npm_docs_cache", t_check_cache.handle(package_name, state))


@mcp.tool()
async def clear_npm_docs_cache(ctx: Context, package_name: str | None = None) -> object:
    """Remove one package from the local documentation cache, or all packages if omitted."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("clear_npm_docs_cache", t_clear_cache.handle(package_name, state))


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()

    if settings.server.transport == "http":
        _setup_logging(settings)
        run_http_server(mcp, settings)
        return

    mcp.run()


if __name__ == "__main__":
    main()
