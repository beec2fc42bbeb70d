"""In-memory FTS5 search over conversations."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import aiosqlite

from ccs.data.db import Database
from ccs.models.search import SearchResult

if TYPE_CHECKING:
    from ccs.models.conversations import Conversation

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
PREVIEW_CONTEXT_BEFORE = 80
PREVIEW_CONTEXT_AFTER = 120
PREVIEW_MAX_LENGTH = 200


@dataclass(frozen=True, slots=True)
class IndexedDocument:
    """The fields of a conversation the index keeps for result assembly."""

    id: str
    project_name: str
    project_path: str
    session_id: str
    session_name: str
    content: str
    timestamp: str
    message_count: int

    @classmethod
    def from_conversation(cls, conversation: Conversation) -> IndexedDocument:
        return cls(
            id=conversation.id,
            project_name=conversation.project_name,
            project_path=conversation.project_path,
            session_id=conversation.session_id,
            session_name=conversation.session_name,
            content=conversation.full_text,
            timestamp=conversation.timestamp,
            message_count=conversation.message_count,
        )

    def to_result(self, preview: str, score: float = 1.0) -> SearchResult:
        return SearchResult(
            id=self.id,
            project_name=self.project_name,
            project_path=self.project_path,
            session_id=self.session_id,
            session_name=self.session_name,
            preview=preview,
            timestamp=self.timestamp,
            message_count=self.message_count,
            score=score,
        )


class _Generation:
    """One built index. Its connection closes once retired and no search holds it."""

    def __init__(
        self,
        db: Database | None = None,
        documents: dict[str, IndexedDocument] | None = None,
    ) -> None:
        self.db = db
        self.documents = documents or {}
        self._readers = 0
        self._retired = False

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[Database | None]:
        self._readers += 1
        try:
            yield self.db
        finally:
            self._readers -= 1
            if self._retired and self._readers == 0:
                await self._close()

    async def retire(self) -> None:
        self._retired = True
        if self._readers == 0:
            await self._close()

    async def _close(self) -> None:
        if self.db is not None:
            await self.db.close()


class SearchIndex:
    """Full-text index rebuilt wholesale from a conversation list.

    Each build fills a new in-memory database and then replaces the current
    generation in one assignment; queries always run against a complete one.
    A replaced generation stays open until the searches reading it finish.
    """

    def __init__(self) -> None:
        self._generation = _Generation()

    async def build_index(self, conversations: Iterable[Conversation]) -> None:
        """Replace the current index with one built from ``conversations``."""
        documents = {conv.id: IndexedDocument.from_conversation(conv) for conv in conversations}
        rows = [
            (doc.id, doc.content, doc.project_name, doc.session_id, doc.session_name)
            for doc in documents.values()
        ]

        db = Database()
        await db.connect()
        try:
            await db.insert_documents(rows)
        except Exception:
            await db.close()
            raise

        previous = self._generation
        self._generation = _Generation(db=db, documents=documents)
        await previous.retire()
        logger.info("Search index ready with %d documents", len(documents))

    async def search(
        self,
        query: str,
        limit: int = 50,
        project_filter: str | None = None,
    ) -> list[SearchResult]:
        """Search conversations.

        Args:
            query: Free text. Blank returns the most recent conversations.
            limit: Maximum results to return.
            project_filter: Optional substring the project name must contain.

        Returns:
            Results in engine rank order (recency order for a blank query).
        """
        generation = self._generation
        if limit <= 0:
            return []
        if not query.strip():
            return _recent(generation, limit, project_filter)

        match_query = build_match_query(query)
        if not match_query:
            return []

        try:
            async with generation.reading() as db:
                rows = await db.match(match_query) if db is not None else []
        except aiosqlite.Error as exc:
            logger.warning("Search query %r failed: %s", query, exc)
            return []

        seen: set[str] = set()
        results: list[SearchResult] = []
        for row in rows:
            doc_id = str(row["doc_id"])
            if doc_id in seen:
                continue
            seen.add(doc_id)

            doc = generation.documents.get(doc_id)
            if doc is None or not _matches_project(doc, project_filter):
                continue
            preview = generate_preview(doc.content, query)
            results.append(doc.to_result(preview, score=-float(row["rank"] or 0.0)))
            if len(results) >= limit:
                break
        return results

    def get_document_count(self) -> int:
        return len(self._generation.documents)

    async def close(self) -> None:
        """Release the current generation's connection."""
        previous = self._generation
        self._generation = _Generation()
        await previous.retire()


def build_match_query(query: str) -> str:
    """Turn free text into an FTS5 expression of quoted prefix terms."""
    terms: list[str] = []
    for term in query.split():
        # Terms without any word character tokenize to nothing.
        if not any(ch.isalnum() for ch in term):
            continue
        safe_term = term.replace('"', '""')
        terms.append(f'"{safe_term}"*')
    return " ".join(terms)


def generate_preview(content: str, query: str) -> str:
    """Excerpt around the first case-insensitive occurrence of ``query``."""
    needle = query.strip().lower()
    index = content.lower().find(needle) if needle else -1
    if index == -1:
        return truncate_text(content, PREVIEW_MAX_LENGTH)

    start = max(0, index - PREVIEW_CONTEXT_BEFORE)
    end = min(len(content), index + len(needle) + PREVIEW_CONTEXT_AFTER)
    preview = content[start:end]
    if start > 0:
        preview = ELLIPSIS + preview
    if end < len(content):
        preview = preview + ELLIPSIS
    return preview


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def _recent(
    generation: _Generation,
    limit: int,
    project_filter: str | None,
) -> list[SearchResult]:
    docs = [doc for doc in generation.documents.values() if _matches_project(doc, project_filter)]
    docs.sort(key=lambda doc: doc.timestamp, reverse=True)
    return [
        doc.to_result(truncate_text(doc.content, PREVIEW_MAX_LENGTH)) for doc in docs[:limit]
    ]


def _matches_project(doc: IndexedDocument, project_filter: str | None) -> bool:
    return not project_filter or project_filter in doc.project_name
