"""Tool handler for clear_npm_docs_cache.

Omitting package_name clears every cached package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from npmdocs.errors import ErrorCode, NpmDocsError
from npmdocs.models.tools import ClearCacheInput, ClearCacheOutput

if TYPE_CHECKING:
    from npmdocs.state import AppState


async def handle(package_name: str | None, state: AppState) -> dict:
    log = structlog.get_logger().bind(tool="clear_npm_docs_cache", package_name=package_name)
    log.info("handler_called")

    try:
        validated = ClearCacheInput(package_name=package_name)
    except ValueError as exc:
        raise NpmDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Omit package_name to clear everything, or pass an exact package name.",
            recoverable=False,
        ) from exc

    cleared = await state.service.invalidate(validated.package_name)
    log.info("cache_cleared", cleared=cleared)
    return ClearCacheOutput(package_name=validated.package_name, cleared=cleared).model_dump()
