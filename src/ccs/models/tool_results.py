"""Tool invocation and typed tool-result models."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ToolUseBlock(BaseModel):
    """A tool_use content block from an assistant message."""

    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class PatchHunk(BaseModel):
    """One hunk of an Edit tool's structured patch."""

    old_start: int = 0
    old_lines: int = 0
    new_start: int = 0
    new_lines: int = 0
    lines: list[str] = Field(default_factory=list)


class StatusChange(BaseModel):
    """A task status transition reported by TaskUpdate."""

    model_config = ConfigDict(populate_by_name=True)

    from_status: str = Field(default="", alias="from")
    to_status: str = Field(default="", alias="to")


class EditToolResult(BaseModel):
    type: Literal["edit"] = "edit"
    file_path: str = ""
    old_string: str = ""
    new_string: str = ""
    structured_patch: list[PatchHunk] = Field(default_factory=list)
    user_modified: bool = False
    replace_all: bool = False


class BashToolResult(BaseModel):
    type: Literal["bash"] = "bash"
    stdout: str = ""
    stderr: str = ""
    interrupted: bool = False


class ReadToolResult(BaseModel):
    type: Literal["read"] = "read"
    file_path: str = ""


class WriteToolResult(BaseModel):
    type: Literal["write"] = "write"
    file_path: str = ""


class GlobToolResult(BaseModel):
    type: Literal["glob"] = "glob"
    filenames: list[str] = Field(default_factory=list)
    num_files: int = 0
    truncated: bool = False


class GrepToolResult(BaseModel):
    type: Literal["grep"] = "grep"
    mode: str = ""
    filenames: list[str] = Field(default_factory=list)
    content: str = ""
    num_files: int = 0
    num_lines: int = 0


class TaskAgentToolResult(BaseModel):
    type: Literal["taskAgent"] = "taskAgent"
    status: str = ""
    prompt: str = ""
    agent_id: str = ""


class TaskCreateToolResult(BaseModel):
    type: Literal["taskCreate"] = "taskCreate"
    task_id: str = ""
    subject: str = ""


class TaskUpdateToolResult(BaseModel):
    type: Literal["taskUpdate"] = "taskUpdate"
    task_id: str = ""
    updated_fields: list[str] = Field(default_factory=list)
    status_change: StatusChange | None = None


class GenericToolResult(BaseModel):
    """Fallback for result shapes without a dedicated variant."""

    type: Literal["generic"] = "generic"
    tool_name: str = "unknown"
    data: dict[str, Any] = Field(default_factory=dict)


ToolResult = Annotated[
    EditToolResult
    | BashToolResult
    | ReadToolResult
    | WriteToolResult
    | GlobToolResult
    | GrepToolResult
    | TaskAgentToolResult
    | TaskCreateToolResult
    | TaskUpdateToolResult
    | GenericToolResult,
    Field(discriminator="type"),
]
