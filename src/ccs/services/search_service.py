"""Search service wrapping the in-memory FTS5 index."""

from __future__ import annotations

from typing import TYPE_CHECKING

from result import Err, Ok, Result

from ccs.models.search import DateRange, SearchResult, SortOrder
from ccs.services.result_filters import filter_by_date, sort_results

if TYPE_CHECKING:
    from ccs.data.protocols import SearchIndexProtocol


class SearchService:
    """Service for full-text search."""

    def __init__(self, index: SearchIndexProtocol, default_limit: int = 50) -> None:
        self._index = index
        self._default_limit = default_limit

    async def search(
        self,
        query: str,
        limit: int | None = None,
        project_filter: str | None = None,
        sort_by: SortOrder | None = None,
        date_range: DateRange = DateRange.ALL,
    ) -> Result[list[SearchResult], str]:
        """Search conversations. A blank query lists the most recent ones.

        The date range and sort order apply to the hits the index returned, so
        they narrow or reorder at most ``limit`` results.
        """
        normalized_limit = self._default_limit if limit is None else limit
        if normalized_limit < 1:
            return Err("Search limit must be at least 1")
        try:
            results = await self._index.search(
                query,
                limit=normalized_limit,
                project_filter=project_filter or None,
            )
            results = filter_by_date(results, date_range)
            if sort_by is not None:
                results = sort_results(results, sort_by)
            return Ok(results)
        except Exception as exc:
            return Err(f"Search failed: {exc}")
