"""Protocol definitions for the data layer."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from ccs.models.conversations import Conversation
from ccs.models.indexing import IndexResult
from ccs.models.search import SearchResult


class ScannerProtocol(Protocol):
    """Interface for the conversation scanner."""

    last_result: IndexResult

    async def scan_all(self) -> list[Conversation]: ...

    def get_conversation(self, conversation_id: str) -> Conversation | None: ...

    def get_projects(self) -> list[str]: ...


class SearchIndexProtocol(Protocol):
    """Interface for the full-text search index."""

    async def build_index(self, conversations: Iterable[Conversation]) -> None: ...

    async def search(
        self,
        query: str,
        limit: int = 50,
        project_filter: str | None = None,
    ) -> list[SearchResult]: ...

    def get_document_count(self) -> int: ...
