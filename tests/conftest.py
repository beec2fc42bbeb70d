"""Shared fixtures for CCS tests."""

from __future__ import annotations

import json
import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from ccs.config import Config
from ccs.models.conversations import Conversation, Message

SAMPLE_SESSION_PATH = Path(__file__).parent / "data" / "sample_session.jsonl"
SAMPLE_PROJECT_DIR = "-Users-test-work-myproject"


@pytest.fixture
def sample_session_path() -> Path:
    """Path to the sample session JSONL file."""
    return SAMPLE_SESSION_PATH


@pytest.fixture
def tmp_claude_dir(tmp_path: Path) -> Path:
    """Create a temporary Claude directory with sample data."""
    claude_dir = tmp_path / ".claude"
    project_dir = claude_dir / "projects" / SAMPLE_PROJECT_DIR
    project_dir.mkdir(parents=True)
    shutil.copy(SAMPLE_SESSION_PATH, project_dir / "test-session-001.jsonl")
    return claude_dir


@pytest.fixture
def test_config(tmp_claude_dir: Path) -> Config:
    """Config pointing at temporary test data."""
    return Config(claude_dir=tmp_claude_dir)


@pytest.fixture
def write_transcript(tmp_claude_dir: Path) -> Callable[..., Path]:
    """Write records as a JSONL transcript under the projects root."""

    def _write(project: str, name: str, records: list[dict | str]) -> Path:
        path = tmp_claude_dir / "projects" / project / name
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_conversation() -> Callable[..., Conversation]:
    """Build a Conversation without touching disk."""

    def _make(
        conversation_id: str,
        text: str,
        *,
        project_path: str = "/Users/test/work/app",
        session_id: str = "",
        session_name: str = "",
        timestamp: str = "2026-01-01T00:00:00.000Z",
    ) -> Conversation:
        project_name = "/".join([p for p in project_path.split("/") if p][-3:])
        return Conversation(
            id=conversation_id,
            file_path=conversation_id,
            project_path=project_path,
            project_name=project_name,
            session_id=session_id or conversation_id,
            session_name=session_name,
            messages=[Message(type="user", content=text, timestamp=timestamp)],
            full_text=text,
            timestamp=timestamp,
            message_count=1,
        )

    return _make

