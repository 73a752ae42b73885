from __future__ import annotations

from npmdocs.models.cache import DocCacheEntry
from npmdocs.models.docs import PackageDocumentation
from npmdocs.models.npms import NpmsAuthor, NpmsLinks, NpmsMetadata, NpmsPackageResponse
from npmdocs.models.tools import (
    CheckCacheInput,
    CheckCacheOutput,
    ClearCacheInput,
    ClearCacheOutput,
    GetPackageDocsInput,
)

__all__ = [
    # documentation
    "PackageDocumentation",
    # cache
    "DocCacheEntry",
    # upstream
    "NpmsAuthor",
    "NpmsLinks",
    "NpmsMetadata",
    "NpmsPackageResponse",
    # tools
    "GetPackageDocsInput",
    "CheckCacheInput",
    "CheckCacheOutput",
    "ClearCacheInput",
    "ClearCacheOutput",
]
