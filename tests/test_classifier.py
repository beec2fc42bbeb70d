"""Tests for toolUseResult classification."""

from __future__ import annotations

from ccs.data.classifier import UNKNOWN_TOOL, classify, resolve_tool_name
from ccs.models.tool_results import (
    BashToolResult,
    EditToolResult,
    GenericToolResult,
    GlobToolResult,
    GrepToolResult,
    ReadToolResult,
    TaskAgentToolResult,
    TaskCreateToolResult,
    TaskUpdateToolResult,
    ToolUseBlock,
    WriteToolResult,
)

PENDING = {"toolu_1": ToolUseBlock(id="toolu_1", name="WebFetch", input={"url": "x"})}
SIBLING = [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "ok"}]


class TestClassify:
    def test_non_mapping_returns_none(self) -> None:
        assert classify("plain error text", [], {}) is None
        assert classify(["a"], [], {}) is None
        assert classify(None, [], {}) is None

    def test_edit(self) -> None:
        raw = {
            "filePath": "/src/app.py",
            "oldString": "a",
            "newString": "b",
            "structuredPatch": [
                {"oldStart": 3, "oldLines": 1, "newStart": 3, "newLines": 1, "lines": ["-a", "+b"]}
            ],
            "userModified": True,
        }
        result = classify(raw, [], {})
        assert isinstance(result, EditToolResult)
        assert result.file_path == "/src/app.py"
        assert result.user_modified is True
        assert result.replace_all is False
        assert result.structured_patch[0].old_start == 3
        assert result.structured_patch[0].lines == ["-a", "+b"]

    def test_write(self) -> None:
        result = classify({"type": "create", "filePath": "/new.py", "content": "x"}, [], {})
        assert isinstance(result, WriteToolResult)
        assert result.file_path == "/new.py"

    def test_read(self) -> None:
        raw = {"type": "text", "file": {"filePath": "/r.py", "content": "...", "numLines": 3}}
        result = classify(raw, [], {})
        assert isinstance(result, ReadToolResult)
        assert result.file_path == "/r.py"

    def test_text_without_file_is_not_read(self) -> None:
        result = classify({"type": "text", "file": "nope"}, [], {})
        assert isinstance(result, GenericToolResult)

    def test_bash(self) -> None:
        result = classify({"stdout": "ok", "stderr": "", "interrupted": True}, [], {})
        assert isinstance(result, BashToolResult)
        assert result.stdout == "ok"
        assert result.interrupted is True

    def test_grep(self) -> None:
        raw = {"mode": "content", "numLines": 4, "filenames": ["a.py"], "content": "hit"}
        result = classify(raw, [], {})
        assert isinstance(result, GrepToolResult)
        assert result.num_lines == 4
        assert result.num_files == 0

    def test_glob(self) -> None:
        raw = {"filenames": ["a.py", "b.py"], "numFiles": 2, "truncated": False}
        result = classify(raw, [], {})
        assert isinstance(result, GlobToolResult)
        assert result.num_files == 2

    def test_grep_shape_wins_over_glob(self) -> None:
        raw = {"mode": "files_with_matches", "numLines": 0, "filenames": [], "numFiles": 0}
        assert isinstance(classify(raw, [], {}), GrepToolResult)

    def test_task_agent(self) -> None:
        raw = {"status": "completed", "prompt": "look around", "agentId": 42}
        result = classify(raw, [], {})
        assert isinstance(result, TaskAgentToolResult)
        assert result.agent_id == "42"
        assert result.type == "taskAgent"

    def test_task_create(self) -> None:
        result = classify({"task": {"id": 7, "subject": "Write docs"}}, [], {})
        assert isinstance(result, TaskCreateToolResult)
        assert result.task_id == "7"
        assert result.subject == "Write docs"

    def test_task_update(self) -> None:
        raw = {
            "taskId": "3",
            "updatedFields": ["status"],
            "statusChange": {"from": "pending", "to": "done"},
        }
        result = classify(raw, [], {})
        assert isinstance(result, TaskUpdateToolResult)
        assert result.status_change is not None
        assert result.status_change.from_status == "pending"
        assert result.status_change.to_status == "done"

    def test_task_update_without_status_change(self) -> None:
        result = classify({"taskId": "3", "updatedFields": []}, [], {})
        assert isinstance(result, TaskUpdateToolResult)
        assert result.status_change is None

    def test_message_only_is_generic_with_resolved_name(self) -> None:
        result = classify({"message": "Fetched"}, SIBLING, PENDING)
        assert isinstance(result, GenericToolResult)
        assert result.tool_name == "WebFetch"
        assert result.data == {"message": "Fetched"}

    def test_unmatched_shape_is_generic(self) -> None:
        result = classify({"bytes": 10, "code": 200}, SIBLING, PENDING)
        assert isinstance(result, GenericToolResult)
        assert result.tool_name == "WebFetch"
        assert result.data["code"] == 200

    def test_edit_beats_bash_when_both_match(self) -> None:
        raw = {
            "filePath": "/x",
            "oldString": "",
            "structuredPatch": [],
            "stdout": "",
            "stderr": "",
        }
        assert isinstance(classify(raw, [], {}), EditToolResult)

    def test_bash_beats_later_shapes(self) -> None:
        raw = {
            "stdout": "3 files",
            "stderr": "",
            "mode": "content",
            "numLines": 3,
            "filenames": ["a.py"],
            "numFiles": 1,
            "status": "completed",
            "prompt": "search",
            "agentId": "agent-1",
            "taskId": "9",
            "updatedFields": ["status"],
        }
        result = classify(raw, SIBLING, PENDING)
        assert isinstance(result, BashToolResult)
        assert result.stdout == "3 files"

    def test_idempotent(self) -> None:
        raw = {"stdout": "a", "stderr": "b"}
        assert classify(raw, [], {}) == classify(raw, [], {})


class TestResolveToolName:
    def test_unknown_without_match(self) -> None:
        assert resolve_tool_name(SIBLING, {}) == UNKNOWN_TOOL
        assert resolve_tool_name("text", PENDING) == UNKNOWN_TOOL
        assert resolve_tool_name([], PENDING) == UNKNOWN_TOOL

    def test_first_known_reference_wins(self) -> None:
        pending = {
            **PENDING,
            "toolu_2": ToolUseBlock(id="toolu_2", name="Skill"),
        }
        content = [
            {"type": "text", "text": "x"},
            {"type": "tool_result", "tool_use_id": "missing"},
            {"type": "tool_result", "tool_use_id": "toolu_2"},
            {"type": "tool_result", "tool_use_id": "toolu_1"},
        ]
        assert resolve_tool_name(content, pending) == "Skill"
