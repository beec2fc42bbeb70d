"""Configuration for CCS."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    claude_dir: Path = field(default_factory=lambda: Path.home() / ".claude")
    transcript_suffix: str = ".jsonl"
    excluded_dirs: frozenset[str] = frozenset({"memory", "subagents", "tool-results"})
    default_search_limit: int = 50

    @property
    def projects_dir(self) -> Path:
        return self.claude_dir / "projects"
