"""Cache-backed documentation lookup.

DocService decides between the cache and the registry:

  bypass_cache=False → is_valid → get → return cached documentation
  miss / bypass      → registry fetch → cache write (non-fatal) → return

Cache reads fail open (treated as a miss). Registry errors propagate
unchanged so callers can tell PACKAGE_NOT_FOUND from NETWORK_ERROR.
Concurrent misses for the same package may each fetch and write; the last
write wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from npmdocs.errors import ErrorCode, NpmDocsError

if TYPE_CHECKING:
    from npmdocs.config import Settings
    from npmdocs.models.docs import PackageDocumentation
    from npmdocs.protocols import CacheProtocol, RegistryClientProtocol

log = structlog.get_logger()


class DocService:
    """Entry point for documentation lookups and cache management."""

    def __init__(
        self,
        settings: Settings,
        cache: CacheProtocol,
        registry_client: RegistryClientProtocol,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._registry_client = registry_client
        log.info(
            "doc_service_initialized",
            registry=settings.registry.base_url,
            cache_ttl=settings.cache.ttl_seconds,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    def update_settings(self, settings: Settings) -> None:
        """Replace the settings object in full. Affects subsequent lookups only."""
        self._settings = settings

    async def get_documentation(
        self,
        package_name: str,
        bypass_cache: bool = False,
    ) -> PackageDocumentation:
        """Return documentation for ``package_name``, from cache when valid.

        Raises NpmDocsError: PACKAGE_NOT_FOUND / NETWORK_ERROR from the
        registry client as-is, UNEXPECTED_ERROR for anything unclassified.
        """
        logger = log.bind(package_name=package_name)
        logger.info("get_documentation", bypass_cache=bypass_cache)

        if bypass_cache:
            logger.info("cache_bypassed")
        else:
            cached = await self._read_cache(package_name, logger)
            if cached is not None:
                return cached

        logger.info("cache_miss_fetching")
        try:
            documentation = await self._registry_client.fetch_documentation(package_name)
        except NpmDocsError as exc:
            logger.warning("fetch_failed", code=exc.code, message=exc.message)
            raise
        except Exception as exc:
            logger.error("fetch_unexpected_error", exc_info=True)
            raise NpmDocsError(
                code=ErrorCode.UNEXPECTED_ERROR,
                message=f"Unexpected error during registry fetch for '{package_name}': {exc}",
                suggestion="This is likely a bug. Retry, and report it if it persists.",
                recoverable=False,
            ) from exc

        try:
            await self._cache.set(package_name, documentation, self._settings.cache.ttl_seconds)
        except Exception:
            # The caller still gets the fresh data; only persistence is lost.
            logger.warning("cache_store_failed", exc_info=True)

        return documentation

    async def _read_cache(
        self,
        package_name: str,
        logger: structlog.typing.FilteringBoundLogger,
    ) -> PackageDocumentation | None:
        try:
            if not await self._cache.is_valid(package_name):
                logger.info("cache_no_valid_entry")
                return None
            entry = await self._cache.get(package_name)
        except Exception:
            logger.warning("cache_lookup_error", exc_info=True)
            return None

        if entry is None:
            # is_valid saw a row that get could not return (concurrent
            # invalidation or corruption); fall through to the registry.
            logger.warning("cache_inconsistent")
            return None

        logger.info("cache_hit", fetched_at=entry.fetched_at.isoformat())
        return entry.documentation

    async def invalidate(self, package_name: str | None = None) -> int:
        """Remove one package, or every package when ``package_name`` is None."""
        return await self._cache.invalidate(package_name)

    async def is_cached(self, package_name: str) -> bool:
        return await self._cache.is_valid(package_name)

    async def close(self) -> None:
        log.info("doc_service_closing")
        await self._cache.close()
