"""Pydantic models for CCS."""

from ccs.models.conversations import Conversation, Message, MessageMetadata
from ccs.models.indexing import IndexResult
from ccs.models.search import CorpusStats, DateRange, SearchResult, SortOrder
from ccs.models.tool_results import (
    BashToolResult,
    EditToolResult,
    GenericToolResult,
    GlobToolResult,
    GrepToolResult,
    PatchHunk,
    ReadToolResult,
    StatusChange,
    TaskAgentToolResult,
    TaskCreateToolResult,
    TaskUpdateToolResult,
    ToolResult,
    ToolUseBlock,
    WriteToolResult,
)

__all__ = [
    "BashToolResult",
    "Conversation",
    "CorpusStats",
    "DateRange",
    "EditToolResult",
    "GenericToolResult",
    "GlobToolResult",
    "GrepToolResult",
    "IndexResult",
    "Message",
    "MessageMetadata",
    "PatchHunk",
    "ReadToolResult",
    "SearchResult",
    "SortOrder",
    "StatusChange",
    "TaskAgentToolResult",
    "TaskCreateToolResult",
    "TaskUpdateToolResult",
    "ToolResult",
    "ToolUseBlock",
    "WriteToolResult",
]
