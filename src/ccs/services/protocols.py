"""Protocol definitions for services."""

from __future__ import annotations

from typing import Protocol

from result import Result

from ccs.models.conversations import Conversation
from ccs.models.search import CorpusStats, DateRange, SearchResult, SortOrder


class ConversationServiceProtocol(Protocol):
    """Interface for conversation operations."""

    def get_conversation(self, conversation_id: str) -> Conversation | None: ...

    def list_projects(self) -> list[str]: ...

    def get_stats(self) -> CorpusStats: ...


class SearchServiceProtocol(Protocol):
    """Interface for search operations."""

    async def search(
        self,
        query: str,
        limit: int | None = None,
        project_filter: str | None = None,
        sort_by: SortOrder | None = None,
        date_range: DateRange = DateRange.ALL,
    ) -> Result[list[SearchResult], str]: ...
