"""Parse an uploaded conversations.json export into Conversation models."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from .errors import ParseError
from .models import Conversation

logger = logging.getLogger(__name__)


def load_export(raw: bytes) -> list[Any]:
    """Decode raw upload bytes and return the top-level JSON array."""
    try:
        data = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseError() from exc

    if not isinstance(data, list):
        logger.warning("Upload top level is %s, not an array", type(data).__name__)
        raise ParseError()

    return data


def _invalid_message_ids(conv: dict[str, Any], exc: ValidationError) -> list[str]:
    """Message uuids (or ``#index`` when absent) named by validation errors."""
    messages = conv.get("chat_messages", conv.get("messages"))
    ids: list[str] = []

    for error in exc.errors():
        loc = error["loc"]
        if len(loc) < 2 or loc[0] not in ("chat_messages", "messages") or not isinstance(loc[1], int):
            continue
        idx = loc[1]
        msg = messages[idx] if isinstance(messages, list) and idx < len(messages) else None
        msg_id = msg.get("uuid") if isinstance(msg, dict) else None
        label = str(msg_id) if msg_id else f"#{idx}"
        if label not in ids:
            ids.append(label)

    return ids


def parse_conversation(conv: Any) -> Conversation | None:
    """Parse a single exported conversation.

    Returns None if the element cannot be read or holds no contentful message.
    """
    if not isinstance(conv, dict):
        logger.warning("Skipping non-object conversation entry (%s)", type(conv).__name__)
        return None

    # One unreadable message drops the whole conversation; the warning names it.
    try:
        conversation = Conversation.model_validate(conv)
    except ValidationError as exc:
        bad_messages = _invalid_message_ids(conv, exc)
        logger.warning(
            "Skipping conversation '%s': %d validation error(s)%s",
            conv.get("name", "unknown"),
            exc.error_count(),
            f" in message(s) {', '.join(bad_messages)}" if bad_messages else "",
        )
        return None

    if not conversation.has_content:
        logger.debug("Conversation '%s' has no contentful messages, skipping", conversation.name)
        return None

    return conversation


def parse_conversations(data: list[Any]) -> list[Conversation]:
    """Parse a full conversations.json array, keeping only retained conversations."""
    conversations: list[Conversation] = []

    for conv_dict in data:
        conv = parse_conversation(conv_dict)
        if conv is not None:
            conversations.append(conv)

    return conversations
