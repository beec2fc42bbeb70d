"""In-memory FTS5 table backing one search index generation."""

from __future__ import annotations

from collections.abc import Sequence
from types import TracebackType

import aiosqlite

MEMORY_PATH = ":memory:"

SCHEMA_SQL = """
CREATE VIRTUAL TABLE IF NOT EXISTS documents_fts USING fts5(
    doc_id UNINDEXED,
    content,
    project_name,
    session_id,
    session_name,
    tokenize='porter unicode61'
);
"""

INSERT_SQL = """
INSERT INTO documents_fts (doc_id, content, project_name, session_id, session_name)
VALUES (?, ?, ?, ?, ?)
"""

MATCH_SQL = """
SELECT doc_id, rank
FROM documents_fts
WHERE documents_fts MATCH ?
ORDER BY rank
"""

type DocumentRow = tuple[str, str, str, str, str]


class Database:
    """Owns the aiosqlite connection for a single FTS5 document table."""

    def __init__(self, db_path: str = MEMORY_PATH) -> None:
        self._db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> Database:
        """Open the connection and create the FTS5 table."""
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.executescript(SCHEMA_SQL)
        await self._conn.commit()
        return self

    async def __aenter__(self) -> Database:
        return await self.connect()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            msg = "Database not connected. Use 'async with Database() as db:'"
            raise RuntimeError(msg)
        return self._conn

    async def insert_documents(self, rows: Sequence[DocumentRow]) -> None:
        """Insert ``(doc_id, content, project_name, session_id, session_name)`` rows."""
        await self.conn.executemany(INSERT_SQL, rows)
        await self.conn.commit()

    async def match(self, match_query: str) -> list[aiosqlite.Row]:
        """Run an FTS5 MATCH expression, best rank first."""
        cursor = await self.conn.execute(MATCH_SQL, (match_query,))
        return list(await cursor.fetchall())
