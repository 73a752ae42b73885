"""Raw response shape of the npms.io package endpoint.

Every field is optional: real responses are loosely typed and occasionally
inconsistent. Only registry.normalise_metadata() reads these models; nothing
partially populated is allowed past the registry client.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class NpmsAuthor(BaseModel):
    name: str | None = None
    email: str | None = None
    url: str | None = None


class NpmsLinks(BaseModel):
    npm: str | None = None
    homepage: str | None = None
    repository: str | None = None
    bugs: str | None = None


class NpmsMetadata(BaseModel):
    name: str | None = None
    version: str | None = None
    description: str | None = None
    keywords: list[str] | None = None
    # Usually an object, but older packages sometimes carry a bare string
    author: NpmsAuthor | str | None = None
    license: str | None = None
    links: NpmsLinks | None = None
    dependencies: dict[str, str] | None = None
    dev_dependencies: dict[str, str] | None = Field(default=None, alias="devDependencies")
    readme: str | None = None  # Full readme text, not a filename


class NpmsCollected(BaseModel):
    metadata: NpmsMetadata | None = None


class NpmsPackageResponse(BaseModel):
    """Top-level body of ``GET {base_url}/package/{name}``."""

    collected: NpmsCollected | None = None
