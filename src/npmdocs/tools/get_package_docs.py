"""Tool handler for get_npm_package_docs.

Validates input, delegates to DocService and returns the documentation
record as a JSON-ready dict. No MCP or FastMCP imports; server.py handles
the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from npmdocs.errors import ErrorCode, NpmDocsError
from npmdocs.models.tools import GetPackageDocsInput

if TYPE_CHECKING:
    from npmdocs.state import AppState


async def handle(package_name: str, force_fresh: bool, state: AppState) -> dict:
    """Handle a get_npm_package_docs tool call."""
    log = structlog.get_logger().bind(tool="get_npm_package_docs", package_name=package_name)
    log.info("handler_called", force_fresh=force_fresh)

    try:
        validated = GetPackageDocsInput(package_name=package_name, force_fresh=force_fresh)
    except ValueError as exc:
        raise NpmDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide an exact npm package name, e.g. 'react' or '@types/node'.",
            recoverable=False,
        ) from exc

    documentation = await state.service.get_documentation(
        validated.package_name, bypass_cache=validated.force_fresh
    )
    return documentation.to_output()
