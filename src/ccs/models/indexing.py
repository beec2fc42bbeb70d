"""Indexing result models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class IndexResult:
    """Result summary for a scan run."""

    files_indexed: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    total_messages: int = 0

    def __str__(self) -> str:
        return (
            f"indexed={self.files_indexed}, skipped={self.files_skipped}, "
            f"failed={self.files_failed}, messages={self.total_messages}"
        )
