"""Normalized conversation models built from transcript files."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ccs.models.tool_results import ToolResult, ToolUseBlock


class MessageMetadata(BaseModel):
    """Sparse per-message metadata. Only built when some field is non-empty."""

    model: str | None = None
    stop_reason: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    cache_read_tokens: int | None = None
    cache_creation_tokens: int | None = None
    git_branch: str | None = None
    version: str | None = None
    tool_uses: list[str] | None = None
    tool_use_blocks: list[ToolUseBlock] | None = None
    tool_results: list[ToolResult] | None = None


class Message(BaseModel):
    """A single user/assistant/system message in a conversation."""

    type: Literal["user", "assistant", "system"]
    content: str = ""
    timestamp: str = ""
    line_number: int | None = None
    is_tool_result: bool = False
    metadata: MessageMetadata | None = None


class Conversation(BaseModel):
    """One transcript file, normalized."""

    id: str
    file_path: str
    project_path: str = ""
    project_name: str = ""
    session_id: str = ""
    session_name: str = ""
    messages: list[Message] = Field(default_factory=list)
    full_text: str = ""
    timestamp: str = ""
    message_count: int = 0
