"""npms.io registry client: the only network boundary.

One GET per lookup, no retries. Transport and HTTP outcomes are mapped to
PACKAGE_NOT_FOUND or NETWORK_ERROR; the raw upstream shape is normalised into
PackageDocumentation before it leaves this module.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from npmdocs import __version__
from npmdocs.errors import ErrorCode, NpmDocsError
from npmdocs.models.docs import PackageDocumentation
from npmdocs.models.npms import NpmsLinks, NpmsMetadata, NpmsPackageResponse

if TYPE_CHECKING:
    from npmdocs.config import RegistrySettings

log = structlog.get_logger()

USER_AGENT = f"npmdocs/{__version__}"
README_MARKER = "README content included via npms.io"


def build_http_client(settings: RegistrySettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def package_url(base_url: str, package_name: str) -> str:
    """``'@types/node'`` → ``'{base_url}/package/%40types%2Fnode'``."""
    return f"{base_url.rstrip('/')}/package/{quote(package_name, safe='')}"


def normalise_metadata(metadata: NpmsMetadata) -> PackageDocumentation:
    """Map upstream metadata onto the documentation record.

    Callers must have checked that ``metadata.name`` is set.
    """
    author = metadata.author
    if author is not None and not isinstance(author, str):
        author = author.name

    links = metadata.links or NpmsLinks()
    readme_content = metadata.readme or None

    return PackageDocumentation(
        name=metadata.name or "",
        version=metadata.version or "unknown",
        description=metadata.description or "",
        homepage=links.homepage,
        repository=links.repository,
        author=author,
        license=metadata.license,
        keywords=metadata.keywords,
        dependencies=metadata.dependencies,
        dev_dependencies=metadata.dev_dependencies,
        readme_content=readme_content,
        readme=README_MARKER if readme_content else None,
    )


def _not_found(package_name: str, message: str) -> NpmDocsError:
    return NpmDocsError(
        code=ErrorCode.PACKAGE_NOT_FOUND,
        message=message,
        suggestion=(
            f"Check the spelling of '{package_name}'. Names are case-sensitive and "
            "scoped packages need their scope, e.g. '@types/node'."
        ),
        recoverable=False,
    )


class RegistryClient:
    """Fetches package metadata from npms.io."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        timeout_seconds: float,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._timeout = httpx.Timeout(timeout_seconds)

    @classmethod
    def from_settings(
        cls, client: httpx.AsyncClient, settings: RegistrySettings
    ) -> RegistryClient:
        return cls(client, settings.base_url, settings.timeout_seconds)

    async def fetch_documentation(self, package_name: str) -> PackageDocumentation:
        """Look up one package.

        Raises NpmDocsError with PACKAGE_NOT_FOUND on HTTP 404 or when a
        successful response carries no usable metadata, and NETWORK_ERROR on
        any other non-2xx status or transport failure (including timeouts).
        """
        url = package_url(self._base_url, package_name)
        log.debug("registry_request", package_name=package_name, url=url)

        try:
            response = await self._client.get(url, timeout=self._timeout)
        except httpx.HTTPError as exc:
            log.warning(
                "registry_network_error", package_name=package_name, url=url, error=str(exc)
            )
            raise NpmDocsError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Network error connecting to the registry for '{package_name}': {exc}",
                suggestion="The npm registry may be temporarily unreachable. Try again later.",
                recoverable=True,
            ) from exc

        if response.status_code == 404:
            log.warning("registry_package_not_found", package_name=package_name, url=url)
            raise _not_found(package_name, f"Package '{package_name}' not found.")

        if not response.is_success:
            log.warning(
                "registry_http_error",
                package_name=package_name,
                url=url,
                status_code=response.status_code,
            )
            raise NpmDocsError(
                code=ErrorCode.NETWORK_ERROR,
                message=(
                    f"Registry returned HTTP {response.status_code} "
                    f"{response.reason_phrase} for '{package_name}'"
                ),
                suggestion="The npm registry may be temporarily unavailable. Try again later.",
                recoverable=True,
                status_code=response.status_code,
            )

        # A 2xx with a missing or malformed body is treated exactly like a 404
        try:
            body = NpmsPackageResponse.model_validate_json(response.content)
        except ValidationError as exc:
            log.warning(
                "registry_invalid_payload", package_name=package_name, url=url, exc_info=True
            )
            raise _not_found(
                package_name, f"Package '{package_name}' not found or returned invalid data."
            ) from exc

        metadata = body.collected.metadata if body.collected is not None else None
        if metadata is None or not metadata.name:
            log.warning("registry_metadata_missing", package_name=package_name, url=url)
            raise _not_found(
                package_name, f"Package '{package_name}' not found or returned invalid data."
            )

        documentation = normalise_metadata(metadata)
        log.info(
            "registry_fetch_complete",
            package_name=package_name,
            version=documentation.version,
            has_readme=documentation.readme_content is not None,
        )
        return documentation
