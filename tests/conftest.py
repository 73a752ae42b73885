"""Shared test fixtures for the npmdocs test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import aiosqlite
import pytest

from npmdocs.cache import Cache
from npmdocs.models.docs import PackageDocumentation

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

REGISTRY_BASE_URL = "https://api.npms.io/v2"


@pytest.fixture()
def sample_documentation() -> PackageDocumentation:
    """A fully populated documentation record."""
    return PackageDocumentation(
        name="left-pad",
        version="1.3.0",
        description="String left pad",
        homepage="https://github.com/stevemao/left-pad#readme",
        repository="https://github.com/stevemao/left-pad",
        author="azer",
        license="WTFPL",
        keywords=["leftpad", "left", "pad", "padding", "string"],
        dependencies={},
        dev_dependencies={"benchmark": "^2.1.0", "tape": "*"},
        readme="README content included via npms.io",
        readme_content="# left-pad\n\nString left pad.",
    )


@pytest.fixture()
def npms_payload() -> dict:
    """A trimmed npms.io /package response for left-pad."""
    return {
        "analyzedAt": "2024-01-01T00:00:00.000Z",
        "collected": {
            "metadata": {
                "name": "left-pad",
                "scope": "unscoped",
                "version": "1.3.0",
                "description": "String left pad",
                "keywords": ["leftpad", "left", "pad", "padding", "string"],
                "author": {"name": "azer", "email": "azer@example.com"},
                "license": "WTFPL",
                "links": {
                    "npm": "https://www.npmjs.com/package/left-pad",
                    "homepage": "https://github.com/stevemao/left-pad#readme",
                    "repository": "https://github.com/stevemao/left-pad",
                    "bugs": "https://github.com/stevemao/left-pad/issues",
                },
                "dependencies": {},
                "devDependencies": {"benchmark": "^2.1.0", "tape": "*"},
                "readme": "# left-pad\n\nString left pad.",
            },
            "npm": {"downloads": []},
        },
        "score": {"final": 0.5},
    }


@pytest.fixture()
async def cache() -> AsyncGenerator[Cache, None]:
    """Cache backed by an in-memory SQLite database."""
    db = await aiosqlite.connect(":memory:")
    cache = Cache(db)
    await cache.init_db()
    yield cache
    await cache.close()
