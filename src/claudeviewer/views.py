"""Text rendering for the conversation list and detail views."""

from __future__ import annotations

from datetime import timezone
from typing import Sequence

from .config import SENDER_LABELS
from .models import Conversation
from .ordering import EARLIEST, parse_timestamp


def format_date(value: str | None) -> str:
    if not value:
        return "Unknown date"
    parsed = parse_timestamp(value)
    if parsed == EARLIEST:
        return value
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")


def _matches_messages(conv: Conversation, term: str) -> bool:
    for msg in conv.messages:
        if term in msg.text.lower():
            return True
        for att in msg.attachments:
            if att.extracted_content and term in att.extracted_content.lower():
                return True
    return False


def filter_conversations(
    conversations: Sequence[Conversation],
    term: str,
    include_messages: bool = False,
) -> list[Conversation]:
    """Case-insensitive substring filter on conversation names.

    With ``include_messages`` the term is also matched against message bodies
    and attachment contents.
    """
    needle = term.lower()
    if not needle:
        return list(conversations)
    return [
        c
        for c in conversations
        if needle in c.name.lower() or (include_messages and _matches_messages(c, needle))
    ]


def render_list(conversations: Sequence[Conversation]) -> str:
    if not conversations:
        return "No conversations found."

    lines = []
    for i, c in enumerate(conversations, 1):
        lines.append(f"{i}. **{c.name or 'Untitled'}** ({format_date(c.created_at)})")
        lines.append(f"   ID: `{c.id}` | {c.message_count} messages")
    return "\n".join(lines)


def render_conversation(conv: Conversation) -> str:
    """Render a full transcript, messages in stored order."""
    lines = [
        f"# {conv.name or 'Untitled'}",
        f"Date: {format_date(conv.created_at)}",
        f"Messages: {conv.message_count}",
        "",
        "---",
        "",
    ]

    for msg in conv.messages:
        label = SENDER_LABELS[msg.sender]
        lines.append(f"**{label}** ({format_date(msg.created_at)}):")
        if msg.text:
            lines.append(msg.text)
        for att in msg.attachments:
            lines.append(f"[Attachment: {att.file_name}]")
            if att.extracted_content:
                lines.append("```")
                lines.append(att.extracted_content)
                lines.append("```")
        lines.append("")

    return "\n".join(lines)


def render_not_found(conversation_id: str) -> str:
    return (
        f"Conversation not found: {conversation_id}\n"
        "Go back to the conversation list to pick another one."
    )
