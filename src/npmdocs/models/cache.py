from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel

from npmdocs.models.docs import PackageDocumentation


class DocCacheEntry(BaseModel):
    """Cached documentation for one package, keyed by package name."""

    package_name: str
    documentation: PackageDocumentation
    fetched_at: datetime  # Time of the last successful registry fetch (UTC)
    ttl: int  # Seconds the entry stays valid after fetched_at

    @property
    def expires_at(self) -> datetime:
        return self.fetched_at + timedelta(seconds=self.ttl)

    def is_valid(self, now: datetime | None = None) -> bool:
        """Validity is computed at read time; expired rows are never swept."""
        if now is None:
            now = datetime.now(UTC)
        return now < self.expires_at
