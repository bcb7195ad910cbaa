"""Deterministic message ordering for display."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from .config import SENDER_RANK
from .models import Message

logger = logging.getLogger(__name__)

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken as UTC. Missing or unparseable values map to the
    earliest representable instant.
    """
    if not value:
        return EARLIEST
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable timestamp %r, sorting it first", value)
        return EARLIEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_key(message: Message) -> tuple[datetime, int]:
    return parse_timestamp(message.created_at), SENDER_RANK[message.sender]


def sort_messages(messages: Sequence[Message]) -> list[Message]:
    """Return messages ordered by creation time, human before assistant on ties.

    The sort is stable, so same-sender messages sharing a timestamp keep their
    input order. The input sequence is not modified.
    """
    return sorted(messages, key=_sort_key)
