"""Search models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SortOrder(str, Enum):
    """Result orderings applied on top of the engine ranking."""

    RECENT = "recent"
    OLDEST = "oldest"
    MOST_MESSAGES = "most-messages"
    FEWEST_MESSAGES = "fewest-messages"
    PROJECT = "project"


class DateRange(str, Enum):
    """How far back a result's last activity may be."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class SearchResult(BaseModel):
    """A single conversation hit with a context preview."""

    id: str
    project_name: str = ""
    project_path: str = ""
    session_id: str = ""
    session_name: str = ""
    preview: str = ""
    timestamp: str = ""
    message_count: int = 0
    score: float = 1.0


class CorpusStats(BaseModel):
    """Counts for the current index generation."""

    conversation_count: int = 0
    project_count: int = 0
