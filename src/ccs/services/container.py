"""Service container with DI wiring and the rebuild cycle."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from ccs.data.scanner import ConversationScanner
from ccs.data.search import SearchIndex
from ccs.models.search import DateRange, SortOrder
from ccs.services.conversation_service import ConversationService
from ccs.services.search_service import SearchService

if TYPE_CHECKING:
    from ccs.config import Config
    from ccs.models.conversations import Conversation
    from ccs.models.indexing import IndexResult
    from ccs.models.search import CorpusStats, SearchResult

logger = logging.getLogger(__name__)

type IndexReadyCallback = Callable[[IndexResult], None]


@dataclass
class ServiceContainer:
    """Holds all application services. Built once at startup."""

    scanner: ConversationScanner
    index: SearchIndex
    conversation_service: ConversationService
    search_service: SearchService
    _rebuild_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)
    _ready_callbacks: list[IndexReadyCallback] = field(
        default_factory=list, init=False, repr=False
    )

    @classmethod
    def create(cls, config: Config) -> ServiceContainer:
        """Factory that wires all dependencies."""
        scanner = ConversationScanner(config)
        index = SearchIndex()
        return cls(
            scanner=scanner,
            index=index,
            conversation_service=ConversationService(scanner, index),
            search_service=SearchService(index, default_limit=config.default_search_limit),
        )

    async def scan(self) -> list[Conversation]:
        """Rescan the corpus without touching the search index."""
        return await self.scanner.scan_all()

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self.conversation_service.get_conversation(conversation_id)

    def get_projects(self) -> list[str]:
        return self.conversation_service.list_projects()

    def get_stats(self) -> CorpusStats:
        return self.conversation_service.get_stats()

    async def search(
        self,
        query: str,
        limit: int | None = None,
        project_filter: str | None = None,
        sort_by: SortOrder | None = None,
        date_range: DateRange = DateRange.ALL,
    ) -> Result[list[SearchResult], str]:
        return await self.search_service.search(
            query,
            limit=limit,
            project_filter=project_filter,
            sort_by=sort_by,
            date_range=date_range,
        )

    def on_index_ready(self, callback: IndexReadyCallback) -> None:
        """Register a callback fired after each completed rebuild."""
        self._ready_callbacks.append(callback)

    async def rebuild(self) -> Result[IndexResult, str]:
        """Scan and re-index. Concurrent requests queue behind the running one."""
        async with self._rebuild_lock:
            try:
                conversations = await self.scanner.scan_all()
                await self.index.build_index(conversations)
            except Exception as exc:
                logger.exception("Rebuild failed")
                return Err(f"Rebuild failed: {exc}")

            result = self.scanner.last_result
            for callback in list(self._ready_callbacks):
                try:
                    callback(result)
                except Exception:
                    logger.exception("Index-ready callback failed")
            return Ok(result)

    async def close(self) -> None:
        """Shut down all services."""
        await self.index.close()
