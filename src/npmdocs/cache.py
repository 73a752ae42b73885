"""SQLite documentation cache keyed by package name.

Failure handling differs per operation:

- ``get`` / ``is_valid`` degrade to a miss (``None`` / ``False``). A row whose
  stored document no longer deserialises is deleted on read.
- ``invalidate`` logs and reports 0 removed rows.
- ``set`` raises ``NpmDocsError(CACHE_ERROR)``; DocService logs it and still
  returns the fetched documentation.
- Opening the database raises ``NpmDocsError(CACHE_ERROR)``; the server
  cannot start without its cache.

All failures are logged with ``exc_info=True``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import structlog
from pydantic import ValidationError

from npmdocs.errors import ErrorCode, NpmDocsError
from npmdocs.models.cache import DocCacheEntry
from npmdocs.models.docs import PackageDocumentation

log = structlog.get_logger()

_CREATE_DOC_TABLE = """
CREATE TABLE IF NOT EXISTS doc_cache (
    package_name  TEXT PRIMARY KEY,
    documentation TEXT NOT NULL,
    fetched_at    INTEGER NOT NULL,
    ttl           INTEGER NOT NULL
)
"""


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _from_millis(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=UTC)


class Cache:
    """SQLite-backed documentation cache implementing CacheProtocol.

    ``fetched_at`` is stored as integer milliseconds since the epoch.
    """

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db
        self._closed = False

    @classmethod
    async def open(cls, db_path: str) -> Cache:
        """Connect to ``db_path`` and create the schema. Called once at startup."""
        in_memory = db_path == ":memory:"
        if not in_memory:
            db_path = str(Path(db_path).expanduser())
        try:
            if not in_memory:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            db = await aiosqlite.connect(db_path)
        except (aiosqlite.Error, OSError) as exc:
            log.error("cache_open_error", db_path=db_path, exc_info=True)
            raise NpmDocsError(
                code=ErrorCode.CACHE_ERROR,
                message=f"Cache initialization failed for {db_path}: {exc}",
                suggestion="Check that the cache db_path is writable.",
                recoverable=False,
            ) from exc

        cache = cls(db)
        try:
            await cache.init_db()
        except aiosqlite.Error as exc:
            log.error("cache_schema_error", db_path=db_path, exc_info=True)
            await db.close()
            raise NpmDocsError(
                code=ErrorCode.CACHE_ERROR,
                message=f"Cache table initialization failed for {db_path}: {exc}",
                suggestion="The cache database may be corrupted; remove it and restart.",
                recoverable=False,
            ) from exc

        log.info("cache_opened", db_path=db_path)
        return cache

    async def init_db(self) -> None:
        """Create the table if missing and set WAL mode. Safe to call repeatedly."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_DOC_TABLE)
        await self._db.commit()

    async def get(self, package_name: str) -> DocCacheEntry | None:
        """Read an entry. Returns ``None`` on miss, read failure or corruption."""
        try:
            cursor = await self._db.execute(
                "SELECT package_name, documentation, fetched_at, ttl "
                "FROM doc_cache WHERE package_name = ?",
                (package_name,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("cache_read_error", package_name=package_name, exc_info=True)
            return None

        if row is None:
            log.debug("cache_miss", package_name=package_name)
            return None

        # Any unreadable column (payload, timestamp or ttl) counts as corruption
        try:
            return DocCacheEntry(
                package_name=row[0],
                documentation=PackageDocumentation.model_validate_json(row[1]),
                fetched_at=_from_millis(row[2]),
                ttl=row[3],
            )
        except (ValidationError, TypeError, ValueError, OverflowError, OSError):
            log.error("cache_entry_corrupted", package_name=package_name, exc_info=True)
            await self.invalidate(package_name)
            return None

    async def set(
        self,
        package_name: str,
        documentation: PackageDocumentation,
        ttl: int,
    ) -> None:
        """Insert or replace an entry stamped with the current time.

        Raises ``NpmDocsError(CACHE_ERROR)`` when the write fails.
        """
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO doc_cache "
                "(package_name, documentation, fetched_at, ttl) VALUES (?, ?, ?, ?)",
                (
                    package_name,
                    documentation.to_json(),
                    _to_millis(datetime.now(UTC)),
                    ttl,
                ),
            )
            await self._db.commit()
        except aiosqlite.Error as exc:
            log.warning("cache_write_error", package_name=package_name, exc_info=True)
            raise NpmDocsError(
                code=ErrorCode.CACHE_ERROR,
                message=f"Cache update failed for '{package_name}': {exc}",
                suggestion="The documentation was fetched but could not be stored.",
                recoverable=True,
            ) from exc
        log.debug("cache_write", package_name=package_name, ttl=ttl)

    async def is_valid(self, package_name: str) -> bool:
        """True iff an entry exists and has not expired. False on any error."""
        try:
            entry = await self.get(package_name)
            if entry is None:
                return False
            valid = entry.is_valid()
        except Exception:
            log.warning("cache_validity_check_error", package_name=package_name, exc_info=True)
            return False
        log.debug(
            "cache_validity_checked",
            package_name=package_name,
            valid=valid,
            expires_at=entry.expires_at.isoformat(),
        )
        return valid

    async def invalidate(self, package_name: str | None = None) -> int:
        """Delete one entry, or every entry when ``package_name`` is None.

        Returns the number of rows removed (0 on failure).
        """
        try:
            if package_name is None:
                cursor = await self._db.execute("DELETE FROM doc_cache")
            else:
                cursor = await self._db.execute(
                    "DELETE FROM doc_cache WHERE package_name = ?", (package_name,)
                )
            deleted = cursor.rowcount
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_invalidate_error", package_name=package_name, exc_info=True)
            return 0
        log.info("cache_invalidated", package_name=package_name, deleted=deleted)
        return deleted

    async def close(self) -> None:
        """Close the connection. A second call logs and does nothing."""
        if self._closed:
            log.warning("cache_already_closed")
            return
        self._closed = True
        try:
            await self._db.close()
        except aiosqlite.Error:
            log.warning("cache_close_error", exc_info=True)
            return
        log.info("cache_closed")
