"""Tests for transcript discovery and the conversation cache."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from pathlib import Path

import pytest

from ccs.config import Config
from ccs.data.scanner import ConversationScanner

SAMPLE_PROJECT_DIR = "-Users-test-work-myproject"


def _user(text: str, timestamp: str = "2026-02-01T09:00:00.000Z") -> dict:
    return {"type": "user", "timestamp": timestamp, "message": {"content": text}}


class TestDiscoverFiles:
    def test_finds_sample(self, test_config: Config) -> None:
        files = ConversationScanner(test_config).discover_files()
        assert len(files) == 1
        project_dir, path = files[0]
        assert project_dir.name == SAMPLE_PROJECT_DIR
        assert path.name == "test-session-001.jsonl"

    def test_skips_hidden_excluded_and_other_suffixes(
        self, test_config: Config, write_transcript: Callable[..., Path]
    ) -> None:
        write_transcript(SAMPLE_PROJECT_DIR, "nested/deeper/child.jsonl", [_user("x")])
        write_transcript(SAMPLE_PROJECT_DIR, "subagents/agent-1.jsonl", [_user("x")])
        write_transcript(SAMPLE_PROJECT_DIR, "memory/notes.jsonl", [_user("x")])
        write_transcript(SAMPLE_PROJECT_DIR, "tool-results/out.jsonl", [_user("x")])
        write_transcript(SAMPLE_PROJECT_DIR, ".hidden.jsonl", [_user("x")])
        write_transcript(SAMPLE_PROJECT_DIR, "notes.txt", [_user("x")])
        write_transcript(".cache", "s.jsonl", [_user("x")])

        names = sorted(p.name for _, p in ConversationScanner(test_config).discover_files())
        assert names == ["child.jsonl", "test-session-001.jsonl"]

    def test_missing_projects_dir(self, tmp_path: Path) -> None:
        scanner = ConversationScanner(Config(claude_dir=tmp_path / "nope"))
        assert scanner.discover_files() == []

    def test_files_at_projects_root_are_ignored(self, test_config: Config) -> None:
        (test_config.projects_dir / "stray.jsonl").write_text(json.dumps(_user("x")))
        assert len(ConversationScanner(test_config).discover_files()) == 1


class TestScanAll:
    @pytest.mark.asyncio
    async def test_scan_sample(self, test_config: Config) -> None:
        scanner = ConversationScanner(test_config)
        conversations = await scanner.scan_all()
        assert len(conversations) == 1
        conv = conversations[0]
        assert scanner.get_conversation(conv.id) is conv
        assert scanner.get_projects() == ["/Users/test/work/myproject"]
        result = scanner.last_result
        assert result.files_indexed == 1
        assert result.total_messages == 6
        assert str(result) == "indexed=1, skipped=0, failed=0, messages=6"

    @pytest.mark.asyncio
    async def test_lookup_before_scan(self, test_config: Config) -> None:
        scanner = ConversationScanner(test_config)
        assert scanner.get_conversation("anything") is None
        assert scanner.get_projects() == []

    @pytest.mark.asyncio
    async def test_sorted_newest_first(
        self, test_config: Config, write_transcript: Callable[..., Path]
    ) -> None:
        write_transcript("-a-old", "old.jsonl", [_user("old", "2025-01-01T00:00:00.000Z")])
        write_transcript("-a-new", "new.jsonl", [_user("new", "2027-01-01T00:00:00.000Z")])
        conversations = await ConversationScanner(test_config).scan_all()
        assert [c.session_id for c in conversations] == ["new", "test-session-001", "old"]

    @pytest.mark.asyncio
    async def test_empty_and_messageless_files_are_skipped(
        self, test_config: Config, write_transcript: Callable[..., Path]
    ) -> None:
        empty = test_config.projects_dir / SAMPLE_PROJECT_DIR / "empty.jsonl"
        empty.write_text("")
        write_transcript(SAMPLE_PROJECT_DIR, "meta.jsonl", [{"type": "summary"}])

        scanner = ConversationScanner(test_config)
        conversations = await scanner.scan_all()
        assert len(conversations) == 1
        assert scanner.last_result.files_skipped == 2
        assert scanner.get_conversation(str(empty)) is None

    @pytest.mark.asyncio
    async def test_parse_failure_is_isolated(
        self, test_config: Config, write_transcript: Callable[..., Path], monkeypatch
    ) -> None:
        bad = write_transcript(SAMPLE_PROJECT_DIR, "bad.jsonl", [_user("boom")])

        from ccs.data import scanner as scanner_module

        real_parse = scanner_module.parse_conversation

        def flaky_parse(path: Path, fallback: str = ""):  # type: ignore[no-untyped-def]
            if path == bad:
                raise OSError("disk error")
            return real_parse(path, fallback)

        monkeypatch.setattr("ccs.data.scanner.parse_conversation", flaky_parse)
        scanner = ConversationScanner(test_config)
        conversations = await scanner.scan_all()
        assert len(conversations) == 1
        assert scanner.last_result.files_failed == 1
        assert scanner.last_result.files_indexed == 1

    @pytest.mark.asyncio
    async def test_rescan_replaces_cache(
        self, test_config: Config, write_transcript: Callable[..., Path]
    ) -> None:
        extra = write_transcript("-b-proj", "extra.jsonl", [_user("extra")])
        scanner = ConversationScanner(test_config)
        await scanner.scan_all()
        assert scanner.get_conversation(str(extra)) is not None

        extra.unlink()
        await scanner.scan_all()
        assert scanner.get_conversation(str(extra)) is None
        assert scanner.get_projects() == ["/Users/test/work/myproject"]

    @pytest.mark.asyncio
    async def test_fallback_project_from_directory(
        self, test_config: Config, write_transcript: Callable[..., Path]
    ) -> None:
        path = write_transcript("-srv-apps-api", "nested/s.jsonl", [_user("hello")])
        scanner = ConversationScanner(test_config)
        await scanner.scan_all()
        conv = scanner.get_conversation(str(path))
        assert conv is not None
        # Nested files take their project from the top-level project directory.
        assert conv.project_path == "/srv/apps/api"

    @pytest.mark.asyncio
    async def test_discovery_runs_off_event_loop(self, test_config: Config, monkeypatch) -> None:
        scanner = ConversationScanner(test_config)
        offloaded: list[object] = []
        real_to_thread = asyncio.to_thread

        async def recording_to_thread(func, /, *args, **kwargs):  # type: ignore[no-untyped-def]
            offloaded.append(func)
            return await real_to_thread(func, *args, **kwargs)

        monkeypatch.setattr("ccs.data.scanner.asyncio.to_thread", recording_to_thread)
        conversations = await scanner.scan_all()

        assert len(conversations) == 1
        assert offloaded[0] == scanner.discover_files
        assert scanner.last_result.files_indexed == 1
