"""SQLite-backed document store.

Stores JSON documents in a single ``documents`` table keyed by collection
name, and answers equality filters on (dotted) field paths with SQLite's
``json_extract``.  Uses ``aiosqlite`` for async I/O.  Every call is bounded
by a wall-clock timeout; a timeout or SQLite error surfaces as
:class:`~event_enricher.utils.errors.PersistentStoreError`.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any, Awaitable, TypeVar

import aiosqlite
import structlog

from event_enricher.interfaces.document_store import NOT_FOUND, FindResult, IDocumentStore
from event_enricher.utils.errors import PersistentStoreError

logger = structlog.get_logger(logger_name=__name__)

_T = TypeVar("_T")

_DEFAULT_DB_PATH = Path("data/event_enricher.db")
_DEFAULT_TIMEOUT = 10.0

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS documents (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    collection  TEXT    NOT NULL,
    body        TEXT    NOT NULL,
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection);",
]

_INSERT_SQL = "INSERT INTO documents (collection, body) VALUES (?, ?);"

# Field paths are interpolated into JSON paths, so keep them to identifiers.
_FIELD_PATH_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def _build_where(collection: str, criteria: dict[str, str]) -> tuple[str, list[Any]]:
    """Translate an equality filter into a WHERE clause and its parameters."""
    clauses = ["collection = ?"]
    params: list[Any] = [collection]
    for path, value in criteria.items():
        if not _FIELD_PATH_RE.match(path):
            raise ValueError(f"Invalid field path: {path!r}")
        clauses.append("json_extract(body, ?) = ?")
        params.extend([f"$.{path}", value])
    return " AND ".join(clauses), params


class SQLiteDocumentStore(IDocumentStore):
    """Document store persisted in a local SQLite file.

    Parameters
    ----------
    db_path:
        Path of the database file; parent directories are created.
    timeout:
        Seconds allowed for each store call.
    """

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout

    async def _bounded(self, operation: str, coro: Awaitable[_T]) -> _T:
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("store_timeout", operation=operation, timeout=self._timeout)
            raise PersistentStoreError(
                message=f"{operation} timed out after {self._timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except aiosqlite.Error as exc:
            logger.error("store_error", operation=operation, error=str(exc))
            raise PersistentStoreError(
                message=f"{operation} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    # -- IDocumentStore implementation -------------------------------------

    async def initialize(self) -> None:
        """Create the documents table and indices if they don't exist."""

        async def _init() -> None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()

        await self._bounded("initialize", _init())
        logger.info("document_store_initialized", path=str(self._db_path))

    async def find_one(self, collection: str, criteria: dict[str, str]) -> FindResult:
        where, params = _build_where(collection, criteria)

        async def _find() -> FindResult:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    f"SELECT body FROM documents WHERE {where} ORDER BY id LIMIT 1",  # noqa: S608
                    params,
                )
                row = await cursor.fetchone()
            if row is None:
                return NOT_FOUND
            return FindResult(document=json.loads(row[0]))

        return await self._bounded(f"find_one({collection})", _find())

    async def find_many(self, collection: str, criteria: dict[str, str]) -> list[dict[str, Any]]:
        where, params = _build_where(collection, criteria)

        async def _find() -> list[dict[str, Any]]:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    f"SELECT body FROM documents WHERE {where} ORDER BY id",  # noqa: S608
                    params,
                )
                rows = await cursor.fetchall()
            return [json.loads(row[0]) for row in rows]

        return await self._bounded(f"find_many({collection})", _find())

    async def insert_one(self, collection: str, document: dict[str, Any]) -> None:
        body = json.dumps(document)

        async def _insert() -> None:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_INSERT_SQL, (collection, body))
                await db.commit()

        await self._bounded(f"insert_one({collection})", _insert())
        logger.debug("document_inserted", collection=collection)

    async def close(self) -> None:
        # Connections are opened per call; nothing is held between calls.
        return None

    def get_provider_name(self) -> str:
        return "sqlite"
