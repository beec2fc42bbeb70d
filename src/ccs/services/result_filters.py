"""Date-range filtering and re-sorting of search results."""

from __future__ import annotations

from datetime import datetime, timedelta

from ccs.models.search import DateRange, SearchResult, SortOrder

_RANGE_DAYS = {DateRange.TODAY: 0, DateRange.WEEK: 7, DateRange.MONTH: 30}


def filter_by_date(
    results: list[SearchResult],
    date_range: DateRange,
    now: datetime | None = None,
) -> list[SearchResult]:
    """Keep results whose timestamp falls on or after the range's local-midnight cutoff.

    Results with an unparseable timestamp only survive ``DateRange.ALL``.
    """
    if date_range is DateRange.ALL:
        return list(results)

    local_now = (now or datetime.now()).astimezone()
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    cutoff = midnight - timedelta(days=_RANGE_DAYS[date_range])

    kept: list[SearchResult] = []
    for result in results:
        when = _parse_timestamp(result.timestamp)
        if when is not None and when >= cutoff:
            kept.append(result)
    return kept


def sort_results(results: list[SearchResult], sort_by: SortOrder) -> list[SearchResult]:
    """Return a stably re-sorted copy; ties keep engine order."""
    match sort_by:
        case SortOrder.RECENT:
            return sorted(results, key=lambda r: r.timestamp, reverse=True)
        case SortOrder.OLDEST:
            return sorted(results, key=lambda r: r.timestamp)
        case SortOrder.MOST_MESSAGES:
            return sorted(results, key=lambda r: r.message_count, reverse=True)
        case SortOrder.FEWEST_MESSAGES:
            return sorted(results, key=lambda r: r.message_count)
        case SortOrder.PROJECT:
            return sorted(results, key=lambda r: r.project_name.casefold())


def _parse_timestamp(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    # Naive timestamps are read as local time.
    return parsed.astimezone()
