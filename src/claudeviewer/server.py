"""FastMCP server exposing the conversation list and detail views."""

from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from .config import STORE_PATH
from .errors import ClaudeViewerError
from .importer import import_export, read_upload
from .storage import ConversationStore, SqliteBackend
from .views import filter_conversations, render_conversation, render_list, render_not_found

# Logging to stderr only — stdout is the MCP JSON-RPC transport
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "claudeviewer",
    instructions=(
        "Browse the user's exported Claude conversations. "
        "Use import_conversations to load a conversations.json export. "
        "Use list_conversations to browse or search conversations by name. "
        "Use get_conversation to read a full conversation transcript."
    ),
)

# Singleton store — reused across tool calls
_store: ConversationStore | None = None


def _get_store() -> ConversationStore:
    global _store
    if _store is None:
        _store = ConversationStore(SqliteBackend(STORE_PATH))
    return _store


@mcp.tool()
def import_conversations(file_path: str) -> str:
    """Import a Claude conversations.json export, replacing previously imported data.

    Args:
        file_path: Path to the conversations.json file
    """
    try:
        raw = read_upload(file_path)
    except OSError as exc:
        logger.warning("Could not read upload %s: %s", file_path, exc)
        return f"Could not read file: {file_path}"

    try:
        summary = import_export(raw, _get_store())
    except ClaudeViewerError as exc:
        return exc.message

    return (
        f"Imported {summary.conversations} conversations "
        f"({summary.messages} messages)."
    )


@mcp.tool()
def list_conversations(search: str = "", full_text: bool = False) -> str:
    """Browse imported conversations.

    Args:
        search: Optional case-insensitive text to match against conversation names
        full_text: Also match message bodies and attachment contents
    """
    conversations = _get_store().load_all()
    if not conversations:
        return "No conversations imported yet. Use import_conversations first."

    matches = filter_conversations(conversations, search, include_messages=full_text)
    if not matches and search:
        return f"No conversations found matching '{search}'."
    return render_list(matches)


@mcp.tool()
def get_conversation(conversation_id: str) -> str:
    """Retrieve a full conversation transcript.

    Args:
        conversation_id: The conversation UUID (from list_conversations)
    """
    conv = _get_store().find_by_id(conversation_id)
    if conv is None:
        return render_not_found(conversation_id)
    return render_conversation(conv)


@mcp.tool()
def get_stats() -> str:
    """Get statistics about the imported conversations."""
    stats = _get_store().get_stats()
    lines = [
        "# Claude Export Statistics",
        "",
        f"- **Conversations**: {stats['total_conversations']:,}",
        f"- **Messages**: {stats['total_messages']:,}",
        f"- **Avg messages/conversation**: {stats['avg_messages_per_conversation']}",
    ]
    if stats["date_range_start"]:
        lines.append(f"- **Date range**: {stats['date_range_start']} → {stats['date_range_end']}")
    return "\n".join(lines)
