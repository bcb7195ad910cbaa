"""Error taxonomy for ingestion and storage."""

from __future__ import annotations


class ClaudeViewerError(Exception):
    """Base class for errors shown to the user.

    ``message`` is the text a view should display inline.
    """

    default_message = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class IngestError(ClaudeViewerError):
    """An upload could not be turned into a conversation collection."""


class ParseError(IngestError):
    default_message = "Error reading file. Please make sure it's a valid JSON file."


class EmptyResultError(IngestError):
    default_message = "No valid conversations found in the file."


class PersistError(ClaudeViewerError):
    default_message = "Could not save conversations."


class DecodeError(ClaudeViewerError):
    """Stored payload is unreadable. Handled inside the store."""

    default_message = "Stored conversations could not be decoded."
