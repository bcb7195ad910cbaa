"""Import pipeline: upload bytes → parsing → filtering → ordering → storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import EmptyResultError
from .models import Conversation
from .ordering import sort_messages
from .parser import load_export, parse_conversations
from .storage import ConversationStore

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    conversations: int
    messages: int
    skipped: int


def read_upload(path: str | Path) -> bytes:
    """Read the raw bytes of an uploaded export file."""
    return Path(path).read_bytes()


def _ingest(raw: bytes) -> tuple[list[Conversation], int]:
    data = load_export(raw)
    logger.info("Found %d conversations in upload", len(data))

    conversations = parse_conversations(data)
    if not conversations:
        raise EmptyResultError()

    for conv in conversations:
        conv.messages = sort_messages(conv.messages)

    return conversations, len(data) - len(conversations)


def ingest(raw: bytes) -> list[Conversation]:
    """Turn raw upload bytes into retained conversations with ordered messages.

    Raises ParseError for malformed input and EmptyResultError when nothing
    survives filtering.
    """
    conversations, _ = _ingest(raw)
    return conversations


def import_export(raw: bytes, store: ConversationStore) -> ImportSummary:
    """Ingest an upload and replace the stored collection with the result.

    The store is only written once ingestion has fully succeeded.
    """
    conversations, skipped = _ingest(raw)
    store.replace_all(conversations)

    summary = ImportSummary(
        conversations=len(conversations),
        messages=sum(c.message_count for c in conversations),
        skipped=skipped,
    )
    logger.info(
        "Imported %d conversations (%d messages), skipped %d",
        summary.conversations,
        summary.messages,
        summary.skipped,
    )
    return summary
