"""Stream-parse a transcript JSONL file into a normalized Conversation."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ccs.data._value_helpers import as_int, as_str
from ccs.data.classifier import classify
from ccs.data.normalizer import normalize
from ccs.models.conversations import Conversation, Message, MessageMetadata
from ccs.models.tool_results import ToolResult, ToolUseBlock

logger = logging.getLogger(__name__)

_CONVERSATION_TYPES = frozenset({"user", "assistant"})


def parse_conversation(path: Path, fallback_project_path: str = "") -> Conversation | None:
    """Parse one transcript file. Returns None when it holds no displayable message.

    Args:
        path: The JSONL transcript.
        fallback_project_path: Project path used when no record carries a ``cwd``.
            Defaults to the decoded name of the file's parent directory.
    """
    messages: list[Message] = []
    pending_tool_uses: dict[str, ToolUseBlock] = {}
    cwd = ""
    session_id = ""
    session_name = ""
    latest_timestamp = ""

    for line_num, raw in iter_records(path):
        if not cwd:
            cwd = as_str(raw.get("cwd"))
        if not session_id:
            session_id = as_str(raw.get("sessionId"))
        if not session_name:
            session_name = as_str(raw.get("slug"))

        # ISO-8601 UTC timestamps are fixed width, so string order is time order.
        timestamp = as_str(raw.get("timestamp"))
        if timestamp > latest_timestamp:
            latest_timestamp = timestamp

        if raw.get("type") not in _CONVERSATION_TYPES or raw.get("isMeta"):
            continue
        message = _parse_message(raw, line_num, pending_tool_uses)
        if message is not None:
            messages.append(message)

    if not messages:
        return None

    project_path = cwd or fallback_project_path or decode_project_dir(path.parent.name)
    return Conversation(
        id=str(path),
        file_path=str(path),
        project_path=project_path,
        project_name=short_project_name(project_path),
        session_id=session_id or path.stem,
        session_name=session_name,
        messages=messages,
        full_text=" ".join(m.content for m in messages if m.content),
        timestamp=latest_timestamp or _utc_now_iso(),
        message_count=len(messages),
    )


def iter_records(path: Path) -> Generator[tuple[int, dict[str, Any]]]:
    """Yield ``(line_number, record)`` for each JSON object line, lazily."""
    with open(path, encoding="utf-8", errors="replace") as file:
        for line_num, line in enumerate(file, 1):
            line = line.strip()
            if not line:
                continue
            try:
                raw = json.loads(line)
            except json.JSONDecodeError:
                # Crashed writers leave truncated trailing lines behind.
                logger.debug("Skipping invalid JSON at %s:%d", path, line_num)
                continue
            if isinstance(raw, dict):
                yield line_num, raw


def extract_text(content: object) -> str:
    """Return normalized display text for a ``message.content`` value."""
    if isinstance(content, str):
        return normalize(content)
    if not isinstance(content, list):
        return ""
    parts: list[str] = []
    for item in content:
        segment = _segment_text(item)
        if not segment:
            continue
        cleaned = normalize(segment)
        if cleaned:
            parts.append(cleaned)
    return " ".join(parts)


def extract_tool_uses(content: object) -> list[ToolUseBlock]:
    if not isinstance(content, list):
        return []
    blocks: list[ToolUseBlock] = []
    for item in content:
        if not isinstance(item, dict) or item.get("type") != "tool_use":
            continue
        name = as_str(item.get("name"))
        if not name:
            continue
        tool_input = item.get("input")
        blocks.append(
            ToolUseBlock(
                id=as_str(item.get("id")),
                name=name,
                input=tool_input if isinstance(tool_input, dict) else {},
            )
        )
    return blocks


def is_tool_result_only(content: object) -> bool:
    """True when every content item is a tool_result reference."""
    if not isinstance(content, list) or not content:
        return False
    return all(isinstance(item, dict) and item.get("type") == "tool_result" for item in content)


def decode_project_dir(name: str) -> str:
    """Decode a project directory name '-Users-foo-src-app' -> '/Users/foo/src/app'."""
    if not name:
        return ""
    return name.replace("-", "/")


def short_project_name(project_path: str) -> str:
    """Last three path segments, for display."""
    parts = [part for part in project_path.split("/") if part]
    return "/".join(parts[-3:])


def _parse_message(
    raw: dict[str, Any],
    line_num: int,
    pending_tool_uses: dict[str, ToolUseBlock],
) -> Message | None:
    msg = raw.get("message")
    if not isinstance(msg, dict):
        msg = {}
    content = msg.get("content")

    text = extract_text(content)
    tool_uses = extract_tool_uses(content)
    for block in tool_uses:
        if block.id:
            pending_tool_uses[block.id] = block

    tool_result = None
    if "toolUseResult" in raw:
        tool_result = classify(raw["toolUseResult"], content, pending_tool_uses)

    tool_result_only = is_tool_result_only(content)
    if not text and not tool_result_only:
        return None

    return Message(
        type=raw["type"],
        content=text,
        timestamp=as_str(raw.get("timestamp")),
        line_number=line_num,
        is_tool_result=tool_result_only,
        metadata=_build_metadata(raw, msg, tool_uses, tool_result),
    )


def _build_metadata(
    raw: dict[str, Any],
    msg: dict[str, Any],
    tool_uses: list[ToolUseBlock],
    tool_result: ToolResult | None,
) -> MessageMetadata | None:
    usage = msg.get("usage")
    if not isinstance(usage, dict):
        usage = {}

    fields: dict[str, object] = {
        "model": as_str(msg.get("model")) or None,
        "stop_reason": as_str(msg.get("stop_reason")) or None,
        "input_tokens": as_int(usage.get("input_tokens")) or None,
        "output_tokens": as_int(usage.get("output_tokens")) or None,
        "cache_read_tokens": as_int(usage.get("cache_read_input_tokens")) or None,
        "cache_creation_tokens": as_int(usage.get("cache_creation_input_tokens")) or None,
        "git_branch": as_str(raw.get("gitBranch")) or None,
        "version": as_str(raw.get("version")) or None,
        "tool_uses": [block.name for block in tool_uses] or None,
        "tool_use_blocks": tool_uses or None,
        "tool_results": [tool_result] if tool_result is not None else None,
    }
    present = {key: value for key, value in fields.items() if value is not None}
    if not present:
        return None
    return MessageMetadata.model_validate(present)


def _segment_text(item: object) -> str:
    if isinstance(item, str):
        return item
    if not isinstance(item, dict):
        return ""
    match item.get("type"):
        case "text":
            return as_str(item.get("text"))
        case "tool_result":
            return as_str(item.get("content"))
        case _:
            return ""


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
