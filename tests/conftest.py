"""
Shared pytest fixtures for claudeviewer tests.
"""

import pytest

from claudeviewer.storage import ConversationStore, InMemoryBackend, SqliteBackend


@pytest.fixture
def memory_store():
    return ConversationStore(InMemoryBackend())


@pytest.fixture
def sqlite_store(tmp_path):
    store = ConversationStore(SqliteBackend(tmp_path / "store.db"))
    yield store
    store.close()
