"""Tool handler for check_npm_docs_cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from npmdocs.errors import ErrorCode, NpmDocsError
from npmdocs.models.tools import CheckCacheInput, CheckCacheOutput

if TYPE_CHECKING:
    from npmdocs.state import AppState


async def handle(package_name: str, state: AppState) -> dict:
    """Report whether a valid (unexpired) cache entry exists."""
    log = structlog.get_logger().bind(tool="check_npm_docs_cache", package_name=package_name)
    log.info("handler_called")

    try:
        validated = CheckCacheInput(package_name=package_name)
    except ValueError as exc:
        raise NpmDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide an exact npm package name, e.g. 'react' or '@types/node'.",
            recoverable=False,
        ) from exc

    cached = await state.service.is_cached(validated.package_name)
    return CheckCacheOutput(package_name=validated.package_name, cached=cached).model_dump()
