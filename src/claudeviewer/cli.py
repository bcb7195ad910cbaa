"""CLI interface for claudeviewer."""

from __future__ import annotations

import logging
import shutil
import sys

import click

from . import __version__
from .config import DATA_DIR, STORE_PATH


def _open_store():
    from .storage import ConversationStore, SqliteBackend

    return ConversationStore(SqliteBackend(STORE_PATH))


@click.group()
@click.version_option(version=__version__, prog_name="claudeviewer")
@click.option("--verbose", is_flag=True, help="Show debug logging on stderr")
def cli(verbose: bool):
    """claudeviewer — Browse your exported Claude conversations.

    Import the conversations.json from a Claude data export, then list,
    search and read the conversations from the terminal or over MCP.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command("import")
@click.argument("json_path", type=click.Path(exists=True, dir_okay=False))
def import_cmd(json_path: str):
    """Import a conversations.json export, replacing anything imported before.

    Example:
        claudeviewer import ~/Downloads/conversations.json
    """
    from .errors import ClaudeViewerError
    from .importer import import_export, read_upload

    try:
        raw = read_upload(json_path)
    except OSError:
        raise click.ClickException(f"Could not read file: {json_path}")

    store = None
    try:
        store = _open_store()
        summary = import_export(raw, store)
    except ClaudeViewerError as exc:
        raise click.ClickException(exc.message)
    finally:
        if store is not None:
            store.close()

    click.echo(click.style("Import complete!", fg="green", bold=True))
    click.echo(f"  Imported: {summary.conversations} conversations ({summary.messages} messages)")
    if summary.skipped:
        click.echo(f"  Skipped:  {summary.skipped} (empty or unreadable)")


@cli.command("list")
@click.option("--search", "-s", default="", help="Filter conversations by name")
@click.option("--full-text", is_flag=True, help="Also search message bodies and attachments")
def list_cmd(search: str, full_text: bool):
    """List imported conversations."""
    from .views import filter_conversations, render_list

    store = _open_store()
    conversations = store.load_all()
    store.close()

    if not conversations:
        click.echo("No conversations imported yet. Import one first:")
        click.echo("  claudeviewer import ~/Downloads/conversations.json")
        return

    click.echo(render_list(filter_conversations(conversations, search, include_messages=full_text)))


@cli.command()
@click.argument("conversation_id")
def show(conversation_id: str):
    """Show a single conversation transcript."""
    from .views import render_conversation, render_not_found

    store = _open_store()
    conv = store.find_by_id(conversation_id)
    store.close()

    if conv is None:
        click.echo(render_not_found(conversation_id))
        return

    click.echo(render_conversation(conv))


@cli.command()
def stats():
    """Show statistics about your imported conversations."""
    store = _open_store()
    s = store.get_stats()
    store.close()

    if not s["total_conversations"]:
        click.echo("No data found. Import your Claude export first:")
        click.echo("  claudeviewer import ~/Downloads/conversations.json")
        return

    click.echo()
    click.echo(click.style("Claude Export Statistics", bold=True))
    click.echo(f"  Conversations:  {s['total_conversations']:,}")
    click.echo(f"  Messages:       {s['total_messages']:,}")
    click.echo(f"  Avg msgs/conv:  {s['avg_messages_per_conversation']}")
    if s["date_range_start"]:
        click.echo(f"  Date range:     {s['date_range_start']} → {s['date_range_end']}")
    click.echo(f"  Location:       {DATA_DIR}")
    click.echo()


@cli.command()
def serve():
    """Start the MCP server (stdio transport)."""
    from .server import mcp

    mcp.run(transport="stdio")


@cli.command()
@click.confirmation_option(prompt="This will delete all imported data. Are you sure?")
def reset():
    """Delete all imported data and start fresh."""
    if DATA_DIR.exists():
        shutil.rmtree(DATA_DIR)
        click.echo(f"Deleted {DATA_DIR}")
    else:
        click.echo("No data to delete.")
