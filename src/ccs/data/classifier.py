"""Classify raw ``toolUseResult`` payloads into typed tool results.

The payloads carry no reliable type tag, so classification sniffs their
structure. Rules are evaluated in order and the first match wins; several
shapes are subsets of others, so the order is part of the contract.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ccs.data._value_helpers import as_bool, as_id, as_int, as_str, as_str_list
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

type Payload = dict[str, Any]
type PendingToolUses = Mapping[str, ToolUseBlock]
type _Builder = Callable[[Payload, object, PendingToolUses], ToolResult]

UNKNOWN_TOOL = "unknown"


def classify(
    raw: object,
    sibling_content: object,
    pending_tool_uses: PendingToolUses,
) -> ToolResult | None:
    """Return the first matching typed result, or None if ``raw`` is not a mapping.

    Args:
        raw: The record's ``toolUseResult`` value.
        sibling_content: The ``message.content`` list of the same record, used to
            find the ``tool_use_id`` that names the tool for generic results.
        pending_tool_uses: Tool invocations seen so far in the file, keyed by id.
    """
    if not isinstance(raw, dict):
        return None
    for matches, build in _RULES:
        if matches(raw):
            return build(raw, sibling_content, pending_tool_uses)
    return _build_generic(raw, sibling_content, pending_tool_uses)


def resolve_tool_name(sibling_content: object, pending_tool_uses: PendingToolUses) -> str:
    """Find the invoking tool's name through the content's tool_result references."""
    if not isinstance(sibling_content, list):
        return UNKNOWN_TOOL
    for item in sibling_content:
        if not isinstance(item, dict) or item.get("type") != "tool_result":
            continue
        tool_use = pending_tool_uses.get(as_str(item.get("tool_use_id")))
        if tool_use is not None:
            return tool_use.name
    return UNKNOWN_TOOL


# ── Predicates ──


def _is_edit(raw: Payload) -> bool:
    return "structuredPatch" in raw and "oldString" in raw and "filePath" in raw


def _is_write(raw: Payload) -> bool:
    return raw.get("type") == "create" and "filePath" in raw


def _is_read(raw: Payload) -> bool:
    file_info = raw.get("file")
    return raw.get("type") == "text" and isinstance(file_info, dict) and "filePath" in file_info


def _is_bash(raw: Payload) -> bool:
    return "stdout" in raw and "stderr" in raw


def _is_grep(raw: Payload) -> bool:
    return "mode" in raw and "numLines" in raw and "filenames" in raw


def _is_glob(raw: Payload) -> bool:
    return "filenames" in raw and "numFiles" in raw and "mode" not in raw


def _is_task_agent(raw: Payload) -> bool:
    return "status" in raw and "prompt" in raw and "agentId" in raw


def _is_task_create(raw: Payload) -> bool:
    task = raw.get("task")
    return isinstance(task, dict) and "id" in task and "subject" in task


def _is_task_update(raw: Payload) -> bool:
    return "taskId" in raw and "updatedFields" in raw


def _is_message_only(raw: Payload) -> bool:
    return len(raw) == 1 and "message" in raw


# ── Builders ──


def _build_edit(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    patch = raw.get("structuredPatch")
    hunks = patch if isinstance(patch, list) else []
    return EditToolResult(
        file_path=as_str(raw.get("filePath")),
        old_string=as_str(raw.get("oldString")),
        new_string=as_str(raw.get("newString")),
        structured_patch=[_parse_hunk(hunk) for hunk in hunks if isinstance(hunk, dict)],
        user_modified=as_bool(raw.get("userModified")),
        replace_all=as_bool(raw.get("replaceAll")),
    )


def _parse_hunk(hunk: Payload) -> PatchHunk:
    return PatchHunk(
        old_start=as_int(hunk.get("oldStart")),
        old_lines=as_int(hunk.get("oldLines")),
        new_start=as_int(hunk.get("newStart")),
        new_lines=as_int(hunk.get("newLines")),
        lines=as_str_list(hunk.get("lines")),
    )


def _build_write(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    return WriteToolResult(file_path=as_str(raw.get("filePath")))


def _build_read(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    file_info = raw["file"]
    return ReadToolResult(file_path=as_str(file_info.get("filePath")))


def _build_bash(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    return BashToolResult(
        stdout=as_str(raw.get("stdout")),
        stderr=as_str(raw.get("stderr")),
        interrupted=as_bool(raw.get("interrupted")),
    )


def _build_grep(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    return GrepToolResult(
        mode=as_str(raw.get("mode")),
        filenames=as_str_list(raw.get("filenames")),
        content=as_str(raw.get("content")),
        num_files=as_int(raw.get("numFiles")),
        num_lines=as_int(raw.get("numLines")),
    )


def _build_glob(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    return GlobToolResult(
        filenames=as_str_list(raw.get("filenames")),
        num_files=as_int(raw.get("numFiles")),
        truncated=as_bool(raw.get("truncated")),
    )


def _build_task_agent(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    return TaskAgentToolResult(
        status=as_str(raw.get("status")),
        prompt=as_str(raw.get("prompt")),
        agent_id=as_id(raw.get("agentId")),
    )


def _build_task_create(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    task = raw["task"]
    return TaskCreateToolResult(task_id=as_id(task.get("id")), subject=as_str(task.get("subject")))


def _build_task_update(raw: Payload, _content: object, _pending: PendingToolUses) -> ToolResult:
    change = raw.get("statusChange")
    status_change = None
    if isinstance(change, dict):
        status_change = StatusChange(
            from_status=as_str(change.get("from")),
            to_status=as_str(change.get("to")),
        )
    return TaskUpdateToolResult(
        task_id=as_id(raw.get("taskId")),
        updated_fields=as_str_list(raw.get("updatedFields")),
        status_change=status_change,
    )


def _build_generic(raw: Payload, content: object, pending: PendingToolUses) -> ToolResult:
    return GenericToolResult(tool_name=resolve_tool_name(content, pending), data=dict(raw))


_RULES: tuple[tuple[Callable[[Payload], bool], _Builder], ...] = (
    (_is_edit, _build_edit),
    (_is_write, _build_write),
    (_is_read, _build_read),
    (_is_bash, _build_bash),
    (_is_grep, _build_grep),
    (_is_glob, _build_glob),
    (_is_task_agent, _build_task_agent),
    (_is_task_create, _build_task_create),
    (_is_task_update, _build_task_update),
    (_is_message_only, _build_generic),
)
