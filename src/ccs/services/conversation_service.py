"""Conversation service — cache lookups and corpus statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ccs.models.search import CorpusStats

if TYPE_CHECKING:
    from ccs.data.protocols import ScannerProtocol, SearchIndexProtocol
    from ccs.models.conversations import Conversation


class ConversationService:
    """Service for conversation and project queries.

    A missing conversation is a normal condition (for example before the
    first scan), so lookups return None instead of an error.
    """

    def __init__(self, scanner: ScannerProtocol, index: SearchIndexProtocol) -> None:
        self._scanner = scanner
        self._index = index

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._scanner.get_conversation(conversation_id)

    def list_projects(self) -> list[str]:
        return self._scanner.get_projects()

    def get_stats(self) -> CorpusStats:
        return CorpusStats(
            conversation_count=self._index.get_document_count(),
            project_count=len(self._scanner.get_projects()),
        )
