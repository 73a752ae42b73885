"""Protocol interfaces for swappable components.

DocService and AppState reference these protocols, not the concrete
implementations, so tests can substitute in-memory doubles and count calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from npmdocs.models.cache import DocCacheEntry
    from npmdocs.models.docs import PackageDocumentation


class CacheProtocol(Protocol):
    """Interface for the documentation cache backend."""

    async def get(self, package_name: str) -> DocCacheEntry | None: ...

    async def set(
        self,
        package_name: str,
        documentation: PackageDocumentation,
        ttl: int,
    ) -> None: ...

    async def is_valid(self, package_name: str) -> bool: ...

    async def invalidate(self, package_name: str | None = None) -> int: ...

    async def close(self) -> None: ...


class RegistryClientProtocol(Protocol):
    """Interface for the upstream registry lookup."""

    async def fetch_documentation(self, package_name: str) -> PackageDocumentation: ...
