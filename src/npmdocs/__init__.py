"""npmdocs: MCP server for npm package documentation with a local SQLite cache."""

from __future__ import annotations

import warnings
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("npmdocs")
except PackageNotFoundError:
    # Running from a source tree without installed distribution metadata.
    warnings.warn(
        "Package metadata for 'npmdocs' not found; using fallback version '0.0.0+unknown'.",
        RuntimeWarning,
        stacklevel=2,
    )
    __version__ = "0.0.0+unknown"
