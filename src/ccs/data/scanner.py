"""Discover transcript files and cache their parsed conversations."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ccs.data.parser import decode_project_dir, parse_conversation
from ccs.models.indexing import IndexResult

if TYPE_CHECKING:
    from ccs.config import Config
    from ccs.models.conversations import Conversation

logger = logging.getLogger(__name__)


class ConversationScanner:
    """Full-rescan corpus scanner owning the conversation cache."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._conversations: dict[str, Conversation] = {}
        self._projects: frozenset[str] = frozenset()
        self.last_result = IndexResult()

    async def scan_all(self) -> list[Conversation]:
        """Rebuild the cache from disk and return conversations, newest first.

        Discovery and parsing run off the event loop, one file at a time.
        The new cache is built aside and swapped in once the scan completes,
        so lookups during a scan keep seeing the previous generation.
        """
        result = IndexResult()
        conversations: dict[str, Conversation] = {}
        projects: set[str] = set()

        for project_dir, jsonl_path in await asyncio.to_thread(self.discover_files):
            try:
                if (await asyncio.to_thread(jsonl_path.stat)).st_size == 0:
                    result.files_skipped += 1
                    continue
                conversation = await asyncio.to_thread(
                    parse_conversation,
                    jsonl_path,
                    decode_project_dir(project_dir.name),
                )
            except Exception:
                logger.exception("Failed to parse %s", jsonl_path)
                result.files_failed += 1
                continue

            if conversation is None:
                result.files_skipped += 1
                continue
            conversations[conversation.id] = conversation
            projects.add(conversation.project_path)
            result.files_indexed += 1
            result.total_messages += conversation.message_count

        self._conversations = conversations
        self._projects = frozenset(projects)
        self.last_result = result
        logger.info("Scanned %d conversations (%s)", len(conversations), result)

        return sorted(conversations.values(), key=lambda c: c.timestamp, reverse=True)

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    def get_projects(self) -> list[str]:
        return sorted(self._projects)

    def discover_files(self) -> list[tuple[Path, Path]]:
        """Return ``(project_dir, transcript_path)`` pairs under the projects root."""
        projects_dir = self._config.projects_dir
        if not projects_dir.is_dir():
            logger.info("Projects directory not found: %s", projects_dir)
            return []

        try:
            entries = sorted(projects_dir.iterdir())
        except OSError as exc:
            logger.warning("Failed to read projects directory %s: %s", projects_dir, exc)
            return []

        found: list[tuple[Path, Path]] = []
        for entry in entries:
            if entry.name.startswith(".") or not entry.is_dir():
                continue
            found.extend((entry, path) for path in self._find_transcripts(entry))
        return found

    def _find_transcripts(self, directory: Path) -> list[Path]:
        """Recursively collect transcripts, skipping hidden and auxiliary entries."""
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning("Failed to read directory %s: %s", directory, exc)
            return []

        results: list[Path] = []
        for entry in entries:
            if entry.name.startswith(".") or entry.name in self._config.excluded_dirs:
                continue
            if entry.is_dir():
                results.extend(self._find_transcripts(entry))
            elif entry.is_file() and entry.name.endswith(self._config.transcript_suffix):
                results.append(entry)
        return results
